# contact_scout/extractor/facts.py
"""
One-pass fact extraction for a single page body.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Optional

from bs4 import BeautifulSoup

from contact_scout.config import PhoneWeights
from contact_scout.crawler.models import ExtractedFacts
from contact_scout.extractor.emails import extract_emails
from contact_scout.extractor.meta import extract_name_candidates, extract_socials
from contact_scout.extractor.phones import extract_phones
from contact_scout.extractor.text import address_cues, json_ld_blocks, match_brands, soup_text, strip_markup


def extract_facts(
    body: str,
    brands: Iterable[str] = (),
    weights: Optional[PhoneWeights] = None,
    max_phones: int = 10,
) -> ExtractedFacts:
    """Parse *body* once and pull emails, ranked phones, text, address cues, brands, socials and names."""
    soup = BeautifulSoup(body or "", "html.parser")

    # JSON-LD lives in <script>, read it before scripts are stripped
    ld_blocks = json_ld_blocks(soup)
    names = extract_name_candidates(soup, ld_blocks)
    socials = extract_socials(soup)

    strip_markup(soup)
    text = soup_text(soup)

    return ExtractedFacts(
        emails=extract_emails(soup, text),
        phones=extract_phones(soup, text, weights, limit=max_phones),
        text_content=text,
        address_cues=address_cues(soup, text, ld_blocks),
        brand_hits=match_brands(text, brands),
        socials=MappingProxyType(socials),
        name_candidates=names,
    )


__all__ = ["extract_facts"]
