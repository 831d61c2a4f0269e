# contact_scout/crawler/models.py
"""
Data models shared by the fetcher, extractors, fact pool and orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


_EMPTY_MAPPING: Mapping[str, str] = MappingProxyType({})


@dataclass(slots=True, frozen=True)
class PageContent:
    """One fetched page: normalized URL, decoded body and the number of bytes read."""

    url: str
    body: str
    fetched_at: datetime = field(default_factory=_utcnow)
    size: int = 0


@dataclass(slots=True, frozen=True)
class PhoneCandidate:
    normalized: str
    priority: int


@dataclass(slots=True, frozen=True)
class NameCandidate:
    """Company name seen on a page, with how much we trust where it came from."""

    value: str
    confidence: float


@dataclass(slots=True, frozen=True)
class ExtractedFacts:
    """Everything pulled out of a single page body."""

    emails: frozenset[str] = frozenset()
    phones: Tuple[PhoneCandidate, ...] = ()
    text_content: str = ""
    address_cues: Tuple[str, ...] = ()
    brand_hits: frozenset[str] = frozenset()
    socials: Mapping[str, str] = field(default_factory=lambda: _EMPTY_MAPPING)
    name_candidates: Tuple[NameCandidate, ...] = ()

    @property
    def phone_numbers(self) -> List[str]:
        return [p.normalized for p in self.phones]


class PageType(str, Enum):
    CONTACT = "CONTACT"
    ABOUT = "ABOUT"
    PRODUCTS = "PRODUCTS"
    OTHER = "OTHER"


class ConfidenceTier(str, Enum):
    HIGH = "HIGH"
    WEAK = "WEAK"
    LLM = "LLM"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {ConfidenceTier.HIGH: 3, ConfidenceTier.WEAK: 2, ConfidenceTier.LLM: 1}


class CountrySource(str, Enum):
    ADDRESS = "ADDRESS"
    PHONE = "PHONE"
    TLD = "TLD"
    LLM = "LLM"
    UNKNOWN = "UNKNOWN"


@dataclass(slots=True, frozen=True)
class CountrySignal:
    iso2: Optional[str]
    tier: ConfidenceTier
    score: float
    source: CountrySource

    @property
    def is_known(self) -> bool:
        return self.iso2 is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iso2": self.iso2,
            "confidenceTier": self.tier.value,
            "confidenceScore": self.score,
            "source": self.source.value,
        }


UNKNOWN_COUNTRY = CountrySignal(None, ConfidenceTier.LLM, 0.0, CountrySource.UNKNOWN)


@dataclass(slots=True, frozen=True)
class PageClassification:
    page_type: PageType
    confidence: float
    evidence: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class PageTrace:
    """What the orchestrator did with one analyzed page."""

    url: str
    size: int
    page_type: PageType


@dataclass(slots=True, frozen=True)
class SiteRequest:
    homepage: str
    domain: str


@dataclass(slots=True, frozen=True)
class CrawlResult:
    """Final per-domain output handed to the caller and the persistence sink."""

    domain: str
    emails: List[str] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)
    pages_analyzed: int = 0
    contact_found: bool = False
    country: Optional[CountrySignal] = None
    brands: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def empty(cls, domain: str, error: Optional[str] = None) -> CrawlResult:
        return cls(domain=domain, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "emails": list(self.emails),
            "phones": list(self.phones),
            "pagesAnalyzed": self.pages_analyzed,
            "contactFound": self.contact_found,
            "country": self.country.to_dict() if self.country else None,
            "brands": list(self.brands),
            "error": self.error,
        }
