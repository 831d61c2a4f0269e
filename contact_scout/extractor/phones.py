# contact_scout/extractor/phones.py
"""
Phone number harvesting with tiered priority scoring.

Every tier yields raw matches; each is validated, keyed by its digit string and
scored with the tier weight from :class:`~contact_scout.config.PhoneWeights`.
A number seen by several tiers gets the weights summed, so numbers anchored by
a ``tel:`` link or a label outrank bare digit runs from marketing copy.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote

from bs4 import BeautifulSoup
from bs4.element import Tag

from contact_scout.config import PhoneWeights
from contact_scout.crawler.models import PhoneCandidate

MIN_DIGITS = 7
MAX_DIGITS = 15

# at most two separator characters between digits
_NUMBER = r"\+?\(?\d(?:[\s().\-]{0,2}\d){5,16}"

_INTERNATIONAL_RE = re.compile(r"(?<![\w+])\+\d(?:[\s().\-]{0,2}\d){5,16}")
_SECTION_NUMBER_RE = re.compile(rf"(?<![\w+]){_NUMBER}")
_PLAIN_RE = re.compile(
    r"(?<![\w+])(?:"
    r"\(\d{3}\)\s?\d{3}[\s.\-]\d{4}"
    r"|\d{3}[.\-]\d{3}[.\-]\d{4}"
    r"|0\d{1,4}[\s.\-]\d{2,4}(?:[\s.\-]\d{2,4}){1,3}"
    r")(?!\w)"
)
_DATE_LIKE_RE = re.compile(r"^\d{1,4}[./\-]\d{1,2}[./\-]\d{1,4}$")
_YEAR_RE = re.compile(r"^(19|20)\d{2}$")
_DATE8_RE = re.compile(r"^20\d{6}$")

_LABELS = (
    r"tel(?:ephone|efon|éfono|efono|éphone|\.)?|phone|call(?:\s+us)?|mobile|mob|cell|fax|contact|hotline"
    r"|whatsapp|handy|tél|téléphone|telefone|телефон|тел|моб(?:ільний|ильный)?|факс"
)

_SECTION_HINTS = ("footer", "header", "contact", "kontakt", "address", "impressum")
_ADJACENT_STRIP = " \t:.-–—|/"


@dataclass(slots=True)
class _Hit:
    normalized: str
    priority: int
    order: int


def validate_phone(raw: str) -> Optional[str]:
    """
    Normalize *raw* to digits with an optional leading ``+``, or return None.

    Rejects fewer than 7 or more than 15 digits, all-identical digits, and
    digit strings shaped like an 8-digit ``20YYMMDD`` date or a bare year.
    """
    if not raw:
        return None
    cleaned = re.sub(r"[^\d+]", "", raw)
    has_plus = cleaned.startswith("+")
    digits = re.sub(r"\D", "", cleaned)
    if _YEAR_RE.match(digits) or _DATE8_RE.match(digits):
        return None
    if len(digits) < MIN_DIGITS or len(digits) > MAX_DIGITS:
        return None
    if len(set(digits)) == 1:
        return None
    return f"+{digits}" if has_plus else digits


@lru_cache(maxsize=8)
def _label_re(window: int) -> re.Pattern[str]:
    return re.compile(
        rf"(?<!\w)(?:{_LABELS})(?![^\W\d_])(?P<gap>[^\d+]{{0,{window}}}?)(?P<num>{_NUMBER})",
        re.IGNORECASE,
    )


def _looks_like_date(raw: str) -> bool:
    return bool(_DATE_LIKE_RE.match(raw.strip()))


def _tel_links(soup: BeautifulSoup) -> List[str]:
    found: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if isinstance(href, str) and href.strip().lower().startswith("tel:"):
            found.append(unquote(href.strip()[4:]))
    return found


def _label_matches(text: str, weights: PhoneWeights) -> List[Tuple[str, int]]:
    found: List[Tuple[str, int]] = []
    for m in _label_re(weights.label_window).finditer(text):
        gap = m.group("gap")
        adjacent = len(gap) <= 4 and not gap.strip(_ADJACENT_STRIP)
        found.append((m.group("num"), weights.label_adjacent if adjacent else weights.label_near))
    return found


def _section_elements(soup: BeautifulSoup) -> List[Tag]:
    """Footer/header-like blocks, outermost only so nested blocks are not counted twice."""
    picked: List[Tag] = []
    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        name = tag.name.lower()
        marker = " ".join(
            [str(tag.get("id") or "")] + [str(c) for c in (tag.get("class") or [])]
        ).lower()
        if name in ("footer", "header", "address") or any(h in marker for h in _SECTION_HINTS):
            if not any(parent in picked for parent in tag.parents):
                picked.append(tag)
    return picked


def _section_numbers(soup: BeautifulSoup) -> List[str]:
    found: List[str] = []
    for section in _section_elements(soup):
        text = " ".join(section.stripped_strings)
        found.extend(m.group(0) for m in _SECTION_NUMBER_RE.finditer(text))
    return found


def extract_phones(
    soup: BeautifulSoup,
    text: str,
    weights: Optional[PhoneWeights] = None,
    limit: int = 10,
) -> Tuple[PhoneCandidate, ...]:
    """Harvest, validate, merge and rank phone candidates from one page."""
    weights = weights or PhoneWeights()
    tiers: List[Iterable[Tuple[str, int]]] = [
        ((raw, weights.tel_link) for raw in _tel_links(soup)),
        _label_matches(text, weights),
        (
            (m.group(0), weights.international_long if len(re.sub(r"\D", "", m.group(0))) >= 10
             else weights.international_short)
            for m in _INTERNATIONAL_RE.finditer(text)
        ),
        ((raw, weights.section) for raw in _section_numbers(soup)),
        ((m.group(0), weights.plain) for m in _PLAIN_RE.finditer(text)),
    ]

    merged: Dict[str, _Hit] = {}
    for tier_index, tier in enumerate(tiers):
        seen_in_tier: Dict[str, int] = {}
        for raw, weight in tier:
            if tier_index > 0 and _looks_like_date(raw):
                continue
            normalized = validate_phone(raw)
            if normalized is None:
                continue
            key = normalized.lstrip("+")
            # one contribution per tier, the strongest one
            if seen_in_tier.get(key, -1) >= weight:
                if normalized.startswith("+"):
                    merged[key].normalized = normalized
                continue
            previous = seen_in_tier.get(key, 0)
            seen_in_tier[key] = weight
            hit = merged.get(key)
            if hit is None:
                merged[key] = _Hit(normalized, weight, len(merged))
                continue
            hit.priority += weight - previous
            if normalized.startswith("+"):
                hit.normalized = normalized

    ranked = sorted(merged.values(), key=lambda h: (-h.priority, h.order))
    return tuple(PhoneCandidate(h.normalized, h.priority) for h in ranked[:limit])


__all__ = ["extract_phones", "validate_phone", "MIN_DIGITS", "MAX_DIGITS"]
