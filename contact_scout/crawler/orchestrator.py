# contact_scout/crawler/orchestrator.py
"""
Per-site crawl: homepage first, then ranked contact/about candidates, then
whatever else the site links to, until the fact pool is sufficient or the
page/time budget runs out.

Pages of one site are fetched strictly one after another; concurrency lives
one level up, in :mod:`contact_scout.batch`.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Protocol, Sequence, Set, Tuple
from urllib.parse import urlparse

from contact_scout.classifier import PageClassifier, rank_links
from contact_scout.config import CrawlerConfig
from contact_scout.country import CountryInferenceEngine
from contact_scout.crawler.fetcher import HTML_TYPES, XML_TYPES
from contact_scout.crawler.link_extractor import extract_links, is_content_path, normalize_url, same_host
from contact_scout.crawler.models import CrawlResult, ExtractedFacts, PageContent, PageTrace, PageType
from contact_scout.errors import ErrorCode, FetchError, HomepageUnreachable
from contact_scout.extractor import extract_facts
from contact_scout.fact_pool import FactPool, create_pool, is_sufficient, merge
from contact_scout.logger import logger
from contact_scout.parser.html_parser import summarize_page
from contact_scout.parser.sitemap_parser import parse_sitemap

__all__ = ("CrawlState", "PageFetcher", "SiteCrawlReport", "SiteCrawler")


class PageFetcher(Protocol):
    async def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        accept: Sequence[str] = HTML_TYPES,
    ) -> PageContent:
        ...


class CrawlState(str, Enum):
    START = "START"
    HOMEPAGE_FETCHED = "HOMEPAGE_FETCHED"
    CANDIDATES_RANKED = "CANDIDATES_RANKED"
    PAGE_LOOP = "PAGE_LOOP"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass(slots=True)
class SiteCrawlReport:
    """Final pool of one site plus what was fetched along the way."""

    pool: FactPool
    pages: List[PageTrace] = field(default_factory=list)
    state: CrawlState = CrawlState.START
    error: Optional[ErrorCode] = None
    attempts: int = 0

    def to_result(self) -> CrawlResult:
        return self.pool.to_result(self.error.value if self.error else None)


class _Frontier:
    """Candidates first, then overflow; each URL handed out at most once."""

    def __init__(self, candidates: Iterable[str], overflow: Iterable[str], visited: Set[str]) -> None:
        self.candidates: List[str] = list(candidates)
        self.overflow: List[str] = list(overflow)
        self.visited = visited
        self._known: Set[str] = set(self.candidates) | set(self.overflow) | visited

    def add_overflow(self, links: Iterable[str]) -> int:
        added = 0
        for link in links:
            if link not in self._known:
                self._known.add(link)
                self.overflow.append(link)
                added += 1
        return added

    def next(self) -> Optional[str]:
        for queue in (self.candidates, self.overflow):
            while queue:
                url = queue.pop(0)
                if url not in self.visited:
                    return url
        return None


class SiteCrawler:
    """Bounded, early-terminating crawl of a single site."""

    def __init__(
        self,
        fetcher: PageFetcher,
        classifier: PageClassifier,
        country_engine: CountryInferenceEngine,
        config: CrawlerConfig,
        brands: Sequence[str] = (),
    ) -> None:
        self.fetcher = fetcher
        self.classifier = classifier
        self.country_engine = country_engine
        self.config = config
        self.brands: Tuple[str, ...] = tuple(brands) or tuple(config.brands)

    async def crawl(self, homepage: str, domain: str, max_pages: Optional[int] = None) -> SiteCrawlReport:
        budget = self.config.max_pages_per_site if max_pages is None else max_pages
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.site_timeout
        report = SiteCrawlReport(pool=create_pool(domain))

        def remaining() -> float:
            return deadline - loop.time()

        def page_timeout() -> float:
            return max(0.0, min(self.config.page_timeout, remaining()))

        start_url = normalize_url(homepage)
        visited: Set[str] = {start_url}
        report.attempts = 1
        try:
            page = await self.fetcher.fetch(start_url, timeout=page_timeout())
        except FetchError as exc:
            failure = HomepageUnreachable(start_url, exc)
            logger.warning("%s domain=%s url=%s reason=%s", failure.code.value, domain, start_url, exc.reason.value)
            report.error = failure.code
            self._transition(report, CrawlState.FAILED, domain)
            return report

        visited.add(page.url)
        self._transition(report, CrawlState.HOMEPAGE_FETCHED, domain)
        # homepage type never counts as a contact/about hit
        facts = self._extract(page)
        report.pool = await self._analyze(facts, report.pool, domain, None)
        report.pages.append(PageTrace(page.url, page.size, PageType.OTHER))
        if is_sufficient(report.pool):
            self._transition(report, CrawlState.DONE, domain)
            return report

        links = extract_links(page.body, page.url)
        candidates, overflow = rank_links(links.links, links.anchors)
        frontier = _Frontier(candidates, overflow, visited)
        self._transition(report, CrawlState.CANDIDATES_RANKED, domain)
        logger.debug("%s: %d candidates, %d overflow", domain, len(candidates), len(overflow))

        if self.config.use_sitemap and links.sitemap_url:
            frontier.add_overflow(await self._sitemap_links(links.sitemap_url, page.url, domain, page_timeout()))

        self._transition(report, CrawlState.PAGE_LOOP, domain)
        while not is_sufficient(report.pool) and report.attempts < budget:
            if remaining() <= 0:
                logger.warning("%s: site timeout after %d pages", domain, report.pool.pages_analyzed)
                break
            url = frontier.next()
            if url is None:
                break
            visited.add(url)
            report.attempts += 1
            try:
                page = await self.fetcher.fetch(url, timeout=page_timeout())
            except FetchError as exc:
                logger.warning(
                    "%s domain=%s url=%s reason=%s", exc.code.value, domain, url, exc.detail or exc.reason.value
                )
                continue
            if page.url != url and page.url in visited:
                logger.debug("%s: %s redirected to already seen %s", domain, url, page.url)
                continue
            visited.add(page.url)

            facts = self._extract(page)
            classification = await self.classifier.classify(summarize_page(page, facts))
            report.pool = await self._analyze(facts, report.pool, domain, classification.page_type)
            report.pages.append(PageTrace(page.url, page.size, classification.page_type))
            logger.debug("%s: %s -> %s", domain, page.url, classification.page_type.value)

            frontier.add_overflow(extract_links(page.body, page.url).links)

        self._transition(report, CrawlState.DONE, domain)
        return report

    def _extract(self, page: PageContent) -> ExtractedFacts:
        return extract_facts(page.body, self.brands, self.config.phone_weights, self.config.max_phones)

    async def _analyze(
        self, facts: ExtractedFacts, pool: FactPool, domain: str, page_type: Optional[PageType]
    ) -> FactPool:
        # the LLM snippet is offered only while nothing better is known
        snippet = facts.text_content if pool.country_best is None else None
        country = await self.country_engine.infer(facts.address_cues, facts.phone_numbers, domain, snippet)
        return merge(pool, facts, page_type, country)

    async def _sitemap_links(self, sitemap_url: str, base_url: str, domain: str, timeout: float) -> List[str]:
        try:
            sitemap = await self.fetcher.fetch(sitemap_url, timeout=timeout, accept=XML_TYPES)
        except FetchError as exc:
            logger.debug("%s: sitemap %s skipped (%s)", domain, sitemap_url, exc.reason.value)
            return []
        found = []
        for loc in parse_sitemap(sitemap.body):
            try:
                if same_host(loc, base_url) and is_content_path(urlparse(loc).path):
                    found.append(normalize_url(loc))
            except ValueError:
                logger.debug("%s: bad sitemap url %r skipped", domain, loc)
        logger.debug("%s: %d urls from sitemap", domain, len(found))
        return found

    @staticmethod
    def _transition(report: SiteCrawlReport, state: CrawlState, domain: str) -> None:
        logger.debug("%s: %s -> %s", domain, report.state.value, state.value)
        report.state = state
