# File: contact_scout/engine.py
"""contact_scout.engine: Сборка компонентов и запуск пакетного обхода и обогащения."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from aiohttp import ClientSession

from contact_scout.batch import BatchCoordinator, parse_batch_request
from contact_scout.classifier import build_classifier
from contact_scout.config import CrawlerConfig, load_config
from contact_scout.country import CountryInferenceEngine, LLMCountryStrategy
from contact_scout.crawler.fetcher import Fetcher
from contact_scout.crawler.models import CrawlResult, SiteRequest
from contact_scout.crawler.orchestrator import PageFetcher, SiteCrawler
from contact_scout.enrich import EnrichRequest, EnrichResult, OrgEnricher, parse_enrich_request
from contact_scout.llm import LLMClient, build_llm_client
from contact_scout.logger import logger
from contact_scout.report import ResultSink, results_payload
from contact_scout.search import GoogleCSESearch, SearchProvider

__all__ = ["Engine", "start_crawl", "start_enrich"]


class Engine:
    """
    Фасад для CLI, HTTP API и тестов.

    Все внешние клиенты (HTTP-сессия, LLM, поиск, приёмник результатов)
    передаются снаружи или создаются здесь, внутри ``async with``.
    """

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerConfig:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(
        self,
        config: CrawlerConfig,
        *,
        session: Optional[ClientSession] = None,
        fetcher: Optional[PageFetcher] = None,
        llm: Optional[LLMClient] = None,
        search: Optional[SearchProvider] = None,
        sink: Optional[ResultSink] = None,
    ) -> None:
        self.config = config
        self._session = session
        self._fetcher = fetcher
        self._owned_fetcher: Optional[Fetcher] = None
        self.llm = llm if llm is not None else build_llm_client(config.llm)
        self._search = search
        self.sink = sink
        self.crawler: Optional[SiteCrawler] = None
        self.coordinator: Optional[BatchCoordinator] = None
        self.enricher: Optional[OrgEnricher] = None

    async def __aenter__(self) -> Engine:
        fetcher = self._fetcher
        if fetcher is None:
            self._owned_fetcher = Fetcher(self.config, self._session)
            fetcher = await self._owned_fetcher.__aenter__()
        search = self._search
        if search is None:
            session = self._owned_fetcher.session if self._owned_fetcher else self._session
            search = GoogleCSESearch(self.config.search, session)

        llm_strategy = None
        if self.llm is not None:
            llm_strategy = LLMCountryStrategy(
                self.llm, timeout=self.config.llm.timeout, max_snippet_chars=self.config.llm.max_snippet_chars
            )
        self.crawler = SiteCrawler(
            fetcher,
            build_classifier(self.llm, timeout=self.config.llm.timeout),
            CountryInferenceEngine(llm_strategy),
            self.config,
        )
        self.coordinator = BatchCoordinator(self.crawler, self.config, self.sink)
        self.enricher = OrgEnricher(self.crawler, search)
        logger.debug("Engine ready (llm=%s)", "on" if self.llm is not None else "off")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owned_fetcher is not None:
            await self._owned_fetcher.__aexit__(exc_type, exc, tb)
            self._owned_fetcher = None

    def _require(self) -> None:
        if self.coordinator is None or self.enricher is None:
            raise RuntimeError("Engine not started, use 'async with Engine(...)'")

    async def crawl_sites(
        self, sites: Sequence[SiteRequest], max_pages_per_site: Optional[int] = None
    ) -> Dict[str, CrawlResult]:
        self._require()
        assert self.coordinator is not None
        return await self.coordinator.crawl_many(sites, max_pages_per_site)

    async def handle_crawl(self, payload: Any) -> Dict[str, Any]:
        """Тело ответа для ``POST /api/crawl``; InputInvalid при неверном запросе."""
        request = parse_batch_request(payload)
        results = await self.crawl_sites(request.sites(), request.max_pages_per_site)
        return results_payload(results)

    async def enrich(self, request: EnrichRequest) -> EnrichResult:
        self._require()
        assert self.enricher is not None
        return await self.enricher.enrich(request)

    async def handle_enrich(self, payload: Any) -> Dict[str, Any]:
        """Тело ответа для ``POST /api/enrich/org``."""
        result = await self.enrich(parse_enrich_request(payload))
        return result.to_dict()


async def start_crawl(
    config: CrawlerConfig, sites: Sequence[SiteRequest], max_pages: Optional[int] = None, sink: Optional[ResultSink] = None
) -> Mapping[str, CrawlResult]:
    """Запускает пакетный обход (используется CLI)."""
    async with Engine(config, sink=sink) as engine:
        return await engine.crawl_sites(sites, max_pages)


async def start_enrich(config: CrawlerConfig, request: EnrichRequest) -> EnrichResult:
    """Запускает обогащение одной организации (используется CLI)."""
    async with Engine(config) as engine:
        return await engine.enrich(request)
