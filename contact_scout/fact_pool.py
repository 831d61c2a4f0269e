# contact_scout/fact_pool.py
"""
Per-site accumulation of extracted evidence.

:func:`merge` is pure: it never mutates the pool it is given and returns a new
frozen :class:`FactPool`. Sets only grow and ``pages_analyzed`` only increases,
which makes :func:`is_sufficient` monotonic across a crawl.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from contact_scout.country import merge_country
from contact_scout.crawler.models import (
    CountrySignal,
    CrawlResult,
    ExtractedFacts,
    NameCandidate,
    PageType,
)

_NO_SOCIALS: Mapping[str, str] = MappingProxyType({})


@dataclass(slots=True, frozen=True)
class FactPool:
    domain: str
    emails: frozenset[str] = frozenset()
    phones: Tuple[str, ...] = ()
    pages_analyzed: int = 0
    contact_page_found: bool = False
    about_page_found: bool = False
    country_best: Optional[CountrySignal] = None
    brands_verified: frozenset[str] = frozenset()
    socials: Mapping[str, str] = field(default_factory=lambda: _NO_SOCIALS)
    name_candidates: Tuple[NameCandidate, ...] = ()

    def to_result(self, error: Optional[str] = None) -> CrawlResult:
        return CrawlResult(
            domain=self.domain,
            emails=sorted(self.emails),
            phones=list(self.phones),
            pages_analyzed=self.pages_analyzed,
            contact_found=self.contact_page_found,
            country=self.country_best,
            brands=sorted(self.brands_verified),
            error=error,
        )


def create_pool(domain: str) -> FactPool:
    return FactPool(domain=domain)


def _union_ordered(current: Tuple[str, ...], new) -> Tuple[str, ...]:
    seen = set(current)
    added = []
    for item in new:
        if item not in seen:
            seen.add(item)
            added.append(item)
    return current + tuple(added) if added else current


def merge(
    pool: FactPool,
    facts: ExtractedFacts,
    page_type: Optional[PageType],
    country: Optional[CountrySignal] = None,
) -> FactPool:
    """
    Fold one analyzed page into *pool*.

    *page_type* ``None`` counts the page without marking contact/about found
    (used for the homepage).
    """
    socials = pool.socials
    new_socials = {k: v for k, v in facts.socials.items() if v and k not in socials}
    if new_socials:
        socials = MappingProxyType({**socials, **new_socials})

    known_names = {c.value for c in pool.name_candidates}
    names = pool.name_candidates + tuple(c for c in facts.name_candidates if c.value not in known_names)

    return replace(
        pool,
        emails=pool.emails | facts.emails,
        phones=_union_ordered(pool.phones, facts.phone_numbers),
        pages_analyzed=pool.pages_analyzed + 1,
        contact_page_found=pool.contact_page_found or page_type is PageType.CONTACT,
        about_page_found=pool.about_page_found or page_type is PageType.ABOUT,
        country_best=merge_country(pool.country_best, country),
        brands_verified=pool.brands_verified | facts.brand_hits,
        socials=socials,
        name_candidates=names,
    )


def is_sufficient(pool: FactPool) -> bool:
    """Enough to stop crawling: email and phone, or a contact/about page seen."""
    if pool.emails and pool.phones:
        return True
    return pool.contact_page_found or pool.about_page_found


__all__ = ["FactPool", "create_pool", "is_sufficient", "merge"]
