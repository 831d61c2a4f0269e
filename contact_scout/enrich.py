# contact_scout/enrich.py
"""
Single-organization enrichment.

Given whatever is known about a company (domain, name, email, phone), find
its site, crawl it with :class:`~contact_scout.crawler.orchestrator.SiteCrawler`
and turn the fact pool into form suggestions.

Stages are tried in order until one yields a reachable site:

1. explicit domain;
2. domain of a non-freemail email address;
3. web search by name;
4. web search by email;
5. web search by phone.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from contact_scout.crawler.models import PageTrace
from contact_scout.crawler.orchestrator import CrawlState, SiteCrawler, SiteCrawlReport
from contact_scout.errors import InputInvalid
from contact_scout.fact_pool import FactPool
from contact_scout.logger import logger
from contact_scout.search import SearchProvider, email_query, name_query, phone_query
from contact_scout.utils import FREEMAIL_DOMAINS, email_domain, homepage_for, normalize_domain

__all__ = [
    "EnrichRequest",
    "EnrichResult",
    "EnrichStage",
    "OrgEnricher",
    "Suggestion",
    "SuggestionField",
    "parse_enrich_request",
    "suggestions_from_pool",
]

# search hits on these hosts are directories, not the company's own site
SEARCH_SKIP_DOMAINS = frozenset({
    "linkedin.com", "facebook.com", "instagram.com", "twitter.com", "x.com", "youtube.com",
    "wikipedia.org", "alibaba.com", "made-in-china.com", "indiamart.com", "yelp.com", "crunchbase.com",
})
MAX_SEARCH_CANDIDATES = 3

EMAIL_DOMAIN_CONFIDENCE = 0.9
SEARCH_DOMAIN_CONFIDENCE = 0.6
GENERAL_EMAIL_CONFIDENCE = 0.85
CONTACT_EMAIL_CONFIDENCE = 0.70
PHONE_CONFIDENCE = 0.60
LINKEDIN_CONFIDENCE = 0.9
FACEBOOK_CONFIDENCE = 0.8
NAME_HINT_BONUS = 0.1


class SuggestionField(str, Enum):
    """Closed set of form fields a suggestion can target."""

    DOMAIN = "domain"
    NAME = "name"
    DISPLAY_NAME = "company.displayName"
    GENERAL_EMAIL = "general_email"
    CONTACT_EMAIL = "contact_email"
    WHO_EMAIL = "who.email"
    CONTACT_PHONE = "contact_phone"
    WHO_PHONE = "who.phone"
    LINKEDIN_URL = "linkedin_url"
    FACEBOOK_URL = "facebook_url"
    COUNTRY = "country"


SOCIAL_FIELDS: Dict[str, Tuple[SuggestionField, float]] = {
    "linkedin": (SuggestionField.LINKEDIN_URL, LINKEDIN_CONFIDENCE),
    "facebook": (SuggestionField.FACEBOOK_URL, FACEBOOK_CONFIDENCE),
}


class EnrichStage(str, Enum):
    DOMAIN = "domain"
    EMAIL_DOMAIN = "email_domain"
    NAME_SEARCH = "name_search"
    EMAIL_SEARCH = "email_search"
    PHONE_SEARCH = "phone_search"
    NONE = "none"


@dataclass(slots=True, frozen=True)
class Suggestion:
    field: SuggestionField
    value: str
    confidence: float
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field.value, "value": self.value, "confidence": self.confidence, "source": self.source}


class EnrichRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    domain: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("domain", "name", "email", "phone", mode="before")
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @model_validator(mode="after")
    def _at_least_one(self) -> EnrichRequest:
        if not any((self.domain, self.name, self.email, self.phone)):
            raise ValueError("one of domain, name, email or phone is required")
        return self


def parse_enrich_request(payload: Any) -> EnrichRequest:
    if not isinstance(payload, dict):
        raise InputInvalid("request body must be a JSON object")
    try:
        return EnrichRequest.model_validate(payload)
    except ValidationError as exc:
        details = [{"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]} for err in exc.errors()]
        raise InputInvalid("one of domain, name, email or phone is required", details=details) from None


@dataclass(slots=True)
class EnrichResult:
    suggestions: List[Suggestion] = field(default_factory=list)
    stage: EnrichStage = EnrichStage.NONE
    attempts: int = 0
    pages: List[PageTrace] = field(default_factory=list)
    pool: Optional[FactPool] = None

    def counts(self) -> Dict[str, Any]:
        pool = self.pool
        if pool is None:
            return {"emails": 0, "phones": 0, "socials": 0, "country": None}
        return {
            "emails": len(pool.emails),
            "phones": len(pool.phones),
            "socials": len(pool.socials),
            "country": pool.country_best.iso2 if pool.country_best else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "trace": {
                "stage": self.stage.value,
                "attempts": self.attempts,
                "pages": [{"url": p.url, "bytes": p.size} for p in self.pages],
                "counts": self.counts(),
            },
        }


class _SuggestionList:
    """Keeps the first suggestion per (field, lower-cased value)."""

    def __init__(self) -> None:
        self.items: List[Suggestion] = []
        self._seen: Set[Tuple[SuggestionField, str]] = set()

    def add(self, field_: SuggestionField, value: str, confidence: float, source: str) -> None:
        key = (field_, value.lower())
        if not value or key in self._seen:
            return
        self._seen.add(key)
        self.items.append(Suggestion(field_, value, confidence, source))


def _corporate_email(emails, domain: str) -> Optional[str]:
    ordered = sorted(emails)
    for email in ordered:
        host = email_domain(email) or ""
        if host == domain or host.endswith("." + domain):
            return email
    return ordered[0] if ordered else None


def suggestions_from_pool(pool: FactPool, source: str, name_hint: Optional[str] = None) -> List[Suggestion]:
    """Form suggestions derived from a crawled site's fact pool."""
    out = _SuggestionList()
    hint = (name_hint or "").lower()

    if pool.name_candidates:
        scored = [
            (min(1.0, c.confidence + (NAME_HINT_BONUS if hint and hint in c.value.lower() else 0.0)), c.value)
            for c in pool.name_candidates
        ]
        confidence, name = max(scored, key=lambda item: item[0])
        out.add(SuggestionField.NAME, name, round(confidence, 2), source)
        out.add(SuggestionField.DISPLAY_NAME, name, round(confidence, 2), source)

    email = _corporate_email(pool.emails, pool.domain)
    if email:
        out.add(SuggestionField.GENERAL_EMAIL, email, GENERAL_EMAIL_CONFIDENCE, source)
        out.add(SuggestionField.CONTACT_EMAIL, email, CONTACT_EMAIL_CONFIDENCE, source)
        out.add(SuggestionField.WHO_EMAIL, email, CONTACT_EMAIL_CONFIDENCE, source)

    if pool.phones:
        out.add(SuggestionField.CONTACT_PHONE, pool.phones[0], PHONE_CONFIDENCE, source)
        out.add(SuggestionField.WHO_PHONE, pool.phones[0], PHONE_CONFIDENCE, source)

    for platform, url in pool.socials.items():
        target = SOCIAL_FIELDS.get(platform)
        if target is not None:
            out.add(target[0], url, target[1], source)

    country = pool.country_best
    if country is not None and country.iso2:
        out.add(SuggestionField.COUNTRY, country.iso2, country.score, country.source.value)

    return out.items


class OrgEnricher:
    """Resolves a company's site from loose hints and crawls it for suggestions."""

    def __init__(self, crawler: SiteCrawler, search: SearchProvider, max_pages: Optional[int] = None) -> None:
        self.crawler = crawler
        self.search = search
        self.max_pages = max_pages

    async def _candidates(self, request: EnrichRequest) -> AsyncIterator[Tuple[EnrichStage, str, str, float]]:
        """Yields (stage, domain, source, confidence) in stage order."""
        if request.domain:
            domain = normalize_domain(request.domain)
            if domain:
                yield EnrichStage.DOMAIN, domain, "input", 1.0

        if request.email:
            domain = email_domain(request.email)
            if domain and domain not in FREEMAIL_DOMAINS:
                yield EnrichStage.EMAIL_DOMAIN, domain, "email", EMAIL_DOMAIN_CONFIDENCE

        searches = (
            (EnrichStage.NAME_SEARCH, name_query(request.name) if request.name else None),
            (EnrichStage.EMAIL_SEARCH, email_query(request.email) if request.email else None),
            (EnrichStage.PHONE_SEARCH, phone_query(request.phone) if request.phone else None),
        )
        for stage, query in searches:
            if not query:
                continue
            taken = 0
            for hit in await self.search.search(query):
                domain = normalize_domain(hit.homepage or "")
                if not domain or domain in SEARCH_SKIP_DOMAINS or domain in FREEMAIL_DOMAINS:
                    continue
                yield stage, domain, hit.link, SEARCH_DOMAIN_CONFIDENCE
                taken += 1
                if taken >= MAX_SEARCH_CANDIDATES:
                    break

    async def enrich(self, request: EnrichRequest) -> EnrichResult:
        result = EnrichResult()
        tried: Set[str] = set()
        email_suggestion: Optional[Suggestion] = None

        async for stage, domain, source, confidence in self._candidates(request):
            if domain in tried:
                continue
            tried.add(domain)
            if stage is EnrichStage.EMAIL_DOMAIN and email_suggestion is None:
                email_suggestion = Suggestion(SuggestionField.DOMAIN, domain, confidence, source)

            result.attempts += 1
            report: SiteCrawlReport = await self.crawler.crawl(homepage_for(domain), domain, self.max_pages)
            if report.state is CrawlState.FAILED:
                logger.info("Enrich stage %s: %s unreachable", stage.value, domain)
                continue

            logger.info("Enrich stage %s: %s, %d pages", stage.value, domain, report.pool.pages_analyzed)
            result.stage = stage
            result.pages = list(report.pages)
            result.pool = report.pool
            found = suggestions_from_pool(report.pool, source=homepage_for(domain), name_hint=request.name)
            if stage is not EnrichStage.DOMAIN:
                found.insert(0, Suggestion(SuggestionField.DOMAIN, domain, confidence, source))
            result.suggestions = found
            return result

        # the email domain is still worth suggesting when its site is down
        if email_suggestion is not None:
            result.suggestions = [email_suggestion]
        return result
