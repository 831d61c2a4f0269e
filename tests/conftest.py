# File: tests/conftest.py
from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Sequence, Union

import pytest
from aiohttp import web

from contact_scout.classifier import HeuristicPageClassifier
from contact_scout.config import CrawlerConfig
from contact_scout.country import CountryInferenceEngine
from contact_scout.crawler.fetcher import HTML_TYPES
from contact_scout.crawler.link_extractor import normalize_url
from contact_scout.crawler.models import PageContent
from contact_scout.crawler.orchestrator import SiteCrawler
from contact_scout.errors import FetchError, FetchReason


class FakeFetcher:
    """
    In-memory fetcher: maps normalized URL -> HTML body or a FetchReason.
    Unknown URLs fail with BAD_STATUS (404).
    """

    def __init__(self, pages: Dict[str, Union[str, FetchReason]]) -> None:
        self.pages = {normalize_url(url): body for url, body in pages.items()}
        self.calls: List[str] = []

    async def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        accept: Sequence[str] = HTML_TYPES,
    ) -> PageContent:
        key = normalize_url(url)
        self.calls.append(key)
        body = self.pages.get(key)
        if body is None:
            raise FetchError(FetchReason.BAD_STATUS, key, "HTTP 404")
        if isinstance(body, FetchReason):
            raise FetchError(body, key)
        return PageContent(url=key, body=body, size=len(body.encode("utf-8")))


def html_page(body: str, title: str = "") -> str:
    head = f"<title>{title}</title>" if title else ""
    return f"<html><head>{head}</head><body>{body}</body></html>"


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def basic_config() -> CrawlerConfig:
    """
    Return a small, fast CrawlerConfig for crawler tests.
    """
    return CrawlerConfig(
        user_agent="TestAgent/1.0",
        page_timeout=2.0,
        site_timeout=10.0,
        max_pages_per_site=7,
        brands=["Bosch", "Makita"],
    )


@pytest.fixture()
def make_crawler(basic_config):
    """
    Factory for a SiteCrawler over a FakeFetcher with heuristic classification only.
    """

    def _make(pages: Dict[str, Union[str, FetchReason]], config: Optional[CrawlerConfig] = None):
        fetcher = FakeFetcher(pages)
        crawler = SiteCrawler(
            fetcher,
            HeuristicPageClassifier(),
            CountryInferenceEngine(),
            config or basic_config,
        )
        return crawler, fetcher

    return _make
