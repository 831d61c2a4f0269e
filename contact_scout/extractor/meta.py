# contact_scout/extractor/meta.py
"""Company name candidates and social profile links (used by the enrichment flow)."""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List
from urllib.parse import urldefrag

from bs4 import BeautifulSoup
from bs4.element import Tag

from contact_scout.crawler.models import NameCandidate
from contact_scout.extractor.text import collapse, walk_json

_SOCIAL_PATTERNS = {
    "linkedin": re.compile(r"^https?://([a-z]{2,3}\.)?linkedin\.com/(company|school|showcase)/[^/?#\s]+", re.I),
    "facebook": re.compile(r"^https?://(www\.|m\.)?facebook\.com/(?!sharer|share\.php|dialog|plugins)[^?#\s]+", re.I),
}

JSON_LD_CONFIDENCE = 0.95
OG_SITE_NAME_CONFIDENCE = 0.8
TITLE_CONFIDENCE = 0.6


def extract_socials(soup: BeautifulSoup) -> Dict[str, str]:
    socials: Dict[str, str] = {}
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        href = href.strip()
        for platform, pattern in _SOCIAL_PATTERNS.items():
            if platform not in socials and pattern.match(href):
                socials[platform] = urldefrag(href)[0]
    return socials


def _json_ld_name(blocks: Iterable[Any]) -> str:
    for block in blocks:
        for node in walk_json(block):
            for key in ("legalName", "name"):
                value = node.get(key)
                if isinstance(value, str) and value.strip() and node.get("@type") not in (
                    "WebPage", "BreadcrumbList", "ListItem", "ImageObject",
                ):
                    return collapse(value)
    return ""


def extract_name_candidates(soup: BeautifulSoup, ld_blocks: Iterable[Any]) -> tuple[NameCandidate, ...]:
    found: List[NameCandidate] = []
    ld_name = _json_ld_name(ld_blocks)
    if ld_name:
        found.append(NameCandidate(ld_name, JSON_LD_CONFIDENCE))
    og = soup.find("meta", attrs={"property": "og:site_name"})
    if isinstance(og, Tag):
        content = og.get("content")
        if isinstance(content, str) and content.strip():
            found.append(NameCandidate(collapse(content), OG_SITE_NAME_CONFIDENCE))
    title = soup.find("title")
    if isinstance(title, Tag):
        value = collapse(title.get_text(" ", strip=True))
        if value:
            found.append(NameCandidate(value, TITLE_CONFIDENCE))
    return tuple(found)


__all__ = ["extract_name_candidates", "extract_socials"]
