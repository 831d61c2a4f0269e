# contact_scout/extractor/text.py
"""Plain-text body, brand matching and address cues."""
from __future__ import annotations

import json
import re
from typing import Any, Iterable, Iterator, List

from bs4 import BeautifulSoup
from bs4.element import Comment, Tag

_STRIP_TAGS = ("script", "style", "noscript", "template", "svg", "iframe")

_ADDRESS_LABEL_RE = re.compile(
    r"(?<!\w)(?:address|adresse|addr\.|anschrift|dirección|direccion|indirizzo|endereço|adres|adresa"
    r"|адреса|адрес|headquarters|head office|located (?:in|at))\s*[:\-–]?\s*",
    re.IGNORECASE,
)
_ADDRESS_STOP_RE = re.compile(r"(?<!\w)(?:tel|phone|e-?mail|fax|call|mobile|телефон|тел)(?!\w)", re.IGNORECASE)
_ADDRESS_WINDOW = 120
_MAX_ADDRESS_CUES = 8

_ITEMPROP_ADDRESS = ("address", "streetaddress", "addresslocality", "addressregion", "addresscountry")
_ADDRESS_KEYS = ("streetAddress", "addressLocality", "postalCode", "addressRegion", "addressCountry")


def collapse(text: str) -> str:
    return " ".join(text.split())


def json_ld_blocks(soup: BeautifulSoup) -> List[Any]:
    """Decoded ``application/ld+json`` payloads; unparsable blocks are skipped."""
    blocks: List[Any] = []
    for script in soup.find_all("script", attrs={"type": re.compile("ld\\+json", re.I)}):
        raw = script.string or script.get_text() or ""
        try:
            blocks.append(json.loads(raw))
        except ValueError:
            continue
    return blocks


def walk_json(node: Any) -> Iterator[dict]:
    """Every dict nested anywhere in a JSON-LD payload (``@graph`` included)."""
    if isinstance(node, dict):
        yield node
        for value in node.values():
            yield from walk_json(value)
    elif isinstance(node, list):
        for item in node:
            yield from walk_json(item)


def strip_markup(soup: BeautifulSoup) -> None:
    """Remove script/style-like elements and comments in place."""
    for element in soup(list(_STRIP_TAGS)):
        element.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()


def soup_text(soup: BeautifulSoup) -> str:
    return collapse(" ".join(t for t in soup.stripped_strings))


def html_to_text(html: str) -> str:
    """Tag-stripped, whitespace-collapsed text of an HTML document."""
    soup = BeautifulSoup(html, "html.parser")
    strip_markup(soup)
    return soup_text(soup)


def match_brands(text: str, brands: Iterable[str]) -> frozenset[str]:
    """Brands found in *text*, word-boundary safe, returned in dictionary casing."""
    hits = set()
    for brand in brands:
        brand = brand.strip()
        if not brand:
            continue
        if re.search(rf"(?<!\w){re.escape(brand)}(?!\w)", text, re.IGNORECASE):
            hits.add(brand)
    return frozenset(hits)


def _json_address(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        parts = []
        for key in _ADDRESS_KEYS:
            part = value.get(key)
            if isinstance(part, dict):
                part = part.get("name")
            if isinstance(part, str) and part.strip():
                parts.append(part.strip())
        return ", ".join(parts)
    return ""


def address_cues(soup: BeautifulSoup, text: str, ld_blocks: Iterable[Any] = ()) -> tuple[str, ...]:
    """
    Short snippets that probably hold a postal address.

    Sources: ``<address>`` blocks, schema.org microdata, JSON-LD ``address``
    objects and the text right after an address label.
    """
    cues: List[str] = []

    def add(value: str) -> None:
        value = collapse(value)[:_ADDRESS_WINDOW * 2]
        if value and value not in cues:
            cues.append(value)

    for tag in soup.find_all("address"):
        add(tag.get_text(" ", strip=True))
    for tag in soup.find_all(attrs={"itemprop": True}):
        if isinstance(tag, Tag) and str(tag.get("itemprop", "")).lower() in _ITEMPROP_ADDRESS:
            add(tag.get_text(" ", strip=True) or str(tag.get("content") or ""))
    for block in ld_blocks:
        for node in walk_json(block):
            if "address" in node:
                add(_json_address(node["address"]))
            elif "addressCountry" in node:
                add(_json_address(node))

    for m in _ADDRESS_LABEL_RE.finditer(text):
        window = text[m.end(): m.end() + _ADDRESS_WINDOW]
        stop = _ADDRESS_STOP_RE.search(window)
        if stop:
            window = window[: stop.start()]
        add(window.strip(" ,;|"))

    return tuple(cues[:_MAX_ADDRESS_CUES])


__all__ = [
    "address_cues",
    "collapse",
    "html_to_text",
    "json_ld_blocks",
    "match_brands",
    "soup_text",
    "strip_markup",
    "walk_json",
]
