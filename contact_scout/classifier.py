# contact_scout/classifier.py
"""
Page-type classification (CONTACT / ABOUT / PRODUCTS / OTHER) and link ranking.

Two interchangeable classifiers share ``async classify(summary)``: a keyword
heuristic that always answers, and an LLM-backed one that may fail.
:class:`FallbackPageClassifier` composes them so the crawl never waits on the
model being available.
"""
from __future__ import annotations

import asyncio
import re
from typing import Dict, List, Optional, Protocol, Sequence, Tuple
from urllib.parse import urlparse

from contact_scout.crawler.models import PageClassification, PageType
from contact_scout.errors import ErrorCode, LLMUnavailable
from contact_scout.llm import LLMClient, extract_json
from contact_scout.logger import logger
from contact_scout.parser.html_parser import PageSummary

CONTACT_KEYWORDS: Tuple[str, ...] = (
    "contact", "get in touch", "reach us", "kontakt", "contacto", "contato", "contactez",
    "контакт", "impressum", "write to us", "call us", "email us",
)
ABOUT_KEYWORDS: Tuple[str, ...] = (
    "about us", "about the company", "who we are", "our story", "our mission", "our company",
    "über uns", "ueber uns", "sobre nosotros", "sobre nós", "chi siamo", "qui sommes-nous", "à propos",
    "о компании", "о нас", "про нас", "про компанію",
)
PRODUCTS_KEYWORDS: Tuple[str, ...] = (
    "products", "services", "catalog", "catalogue", "what we offer", "our range", "produkte", "productos",
)

_CONTACT_PATH_RE = re.compile(r"/(contact|contacts|contact-us|kontakt|kontakty|contacto|contato|contactez|impressum)(?![a-z])")
_ABOUT_PATH_RE = re.compile(
    r"/(about|about-us|ueber-uns|uber-uns|company|who-we-are|sobre|a-propos|chi-siamo|o-kompanii|o-nas|pro-nas)(?![a-z])"
)

HEURISTIC_CONFIDENCE = 0.7
OTHER_CONFIDENCE = 0.5

_LLM_SYSTEM = "You are a precise web page classifier. Output ONLY raw JSON."
_LLM_PROMPT = """Classify this web page into one of these types: CONTACT, ABOUT, PRODUCTS, OTHER.

CONTACT: Contains contact information, contact forms, addresses, phones, emails, "Contact Us", "Get in Touch"
ABOUT: Company information, "About Us", company history, team, mission, vision
PRODUCTS: Product listings, services, catalog, "Our Products", "What We Offer"
OTHER: Home page, news, blog, generic content that doesn't fit above

Page content:
{content}

Return ONLY a JSON object with this EXACT structure (no markdown, no backticks):
{{"pageType": "CONTACT" | "ABOUT" | "PRODUCTS" | "OTHER", "confidence": 0.0-1.0, "evidence": ["reason 1", "reason 2"]}}"""


class PageClassifier(Protocol):
    async def classify(self, summary: PageSummary) -> PageClassification:
        ...


def _has_any(text: str, keywords: Sequence[str]) -> Optional[str]:
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None


def classify_heuristic(summary: PageSummary) -> PageClassification:
    """Keyword rules over the digest; total, never raises."""
    text = summary.keyword_text()
    path = summary.path

    hit = _has_any(text, CONTACT_KEYWORDS)
    if hit or _CONTACT_PATH_RE.search(path):
        evidence = [f"keyword '{hit}'" if hit else f"path {path}"]
        return PageClassification(PageType.CONTACT, HEURISTIC_CONFIDENCE, tuple(evidence))
    if summary.email_count and summary.phone_count:
        return PageClassification(PageType.CONTACT, HEURISTIC_CONFIDENCE, ("has both email and phone",))

    hit = _has_any(text, ABOUT_KEYWORDS)
    if hit or _ABOUT_PATH_RE.search(path):
        return PageClassification(
            PageType.ABOUT, HEURISTIC_CONFIDENCE, (f"keyword '{hit}'" if hit else f"path {path}",)
        )

    hit = _has_any(text, PRODUCTS_KEYWORDS)
    if hit:
        return PageClassification(PageType.PRODUCTS, HEURISTIC_CONFIDENCE, (f"keyword '{hit}'",))

    return PageClassification(PageType.OTHER, OTHER_CONFIDENCE, ("no page type indicators",))


class HeuristicPageClassifier:
    async def classify(self, summary: PageSummary) -> PageClassification:
        return classify_heuristic(summary)


class LLMPageClassifier:
    """Zero-shot classification; raises :class:`LLMUnavailable` on any unusable reply."""

    def __init__(self, llm: LLMClient) -> None:
        self.llm = llm

    async def classify(self, summary: PageSummary) -> PageClassification:
        raw = await self.llm.complete(_LLM_SYSTEM, _LLM_PROMPT.format(content=summary.as_prompt()[:3000]))
        try:
            data = extract_json(raw)
        except ValueError as exc:
            raise LLMUnavailable(f"unparsable reply: {exc}") from exc
        return self.parse(data)

    @staticmethod
    def parse(data: object) -> PageClassification:
        if not isinstance(data, dict):
            raise LLMUnavailable("reply is not an object")
        try:
            page_type = PageType(str(data.get("pageType", "")).upper())
        except ValueError as exc:
            raise LLMUnavailable(f"unknown pageType {data.get('pageType')!r}") from exc
        confidence = data.get("confidence")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)) or not 0 <= confidence <= 1:
            confidence = OTHER_CONFIDENCE
        evidence = data.get("evidence")
        evidence = tuple(str(e) for e in evidence[:3]) if isinstance(evidence, list) else ()
        return PageClassification(page_type, float(confidence), evidence)


class FallbackPageClassifier:
    """Try *primary* under a timeout; on any failure answer with *fallback*."""

    def __init__(
        self,
        primary: PageClassifier,
        fallback: Optional[PageClassifier] = None,
        timeout: float = 8.0,
    ) -> None:
        self.primary = primary
        self.fallback = fallback or HeuristicPageClassifier()
        self.timeout = timeout

    async def classify(self, summary: PageSummary) -> PageClassification:
        try:
            return await asyncio.wait_for(self.primary.classify(summary), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("%s for %s: timeout", ErrorCode.CLASSIFIER_UNAVAILABLE.value, summary.url)
        except Exception as exc:  # noqa: BLE001 - the crawl must never block on the model
            logger.warning("%s for %s: %s", ErrorCode.CLASSIFIER_UNAVAILABLE.value, summary.url, exc)
        return await self.fallback.classify(summary)


def link_kind(url: str, anchor: str = "") -> PageType:
    """Guess what an unfetched link points to from its path and anchor text."""
    path = urlparse(url).path.lower()
    anchor = anchor.lower()
    if _CONTACT_PATH_RE.search(path) or _has_any(anchor, CONTACT_KEYWORDS):
        return PageType.CONTACT
    if _ABOUT_PATH_RE.search(path) or _has_any(anchor, ABOUT_KEYWORDS + ("about",)):
        return PageType.ABOUT
    return PageType.OTHER


def rank_links(links: Sequence[str], anchors: Optional[Dict[str, str]] = None) -> Tuple[List[str], List[str]]:
    """
    Split *links* into (candidates, overflow).

    Candidates are contact-looking links followed by about-looking ones, each
    group in discovery order; everything else is overflow in discovery order.
    """
    anchors = anchors or {}
    contact: List[str] = []
    about: List[str] = []
    overflow: List[str] = []
    for link in links:
        kind = link_kind(link, anchors.get(link, ""))
        if kind is PageType.CONTACT:
            contact.append(link)
        elif kind is PageType.ABOUT:
            about.append(link)
        else:
            overflow.append(link)
    return contact + about, overflow


def build_classifier(llm: Optional[LLMClient], timeout: float = 8.0) -> PageClassifier:
    if llm is None:
        return HeuristicPageClassifier()
    return FallbackPageClassifier(LLMPageClassifier(llm), HeuristicPageClassifier(), timeout=timeout)


__all__ = [
    "FallbackPageClassifier",
    "HeuristicPageClassifier",
    "LLMPageClassifier",
    "PageClassifier",
    "build_classifier",
    "classify_heuristic",
    "link_kind",
    "rank_links",
]
