# contact_scout/batch.py
"""
Batch crawl: validate the inbound request, run one task per site, collect a
``domain -> CrawlResult`` mapping.

A failing site never takes the batch down: homepage failures come back from
the crawler as degraded results, and anything unexpected is logged and
replaced by an empty result here.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contact_scout.config import CrawlerConfig
from contact_scout.crawler.models import CrawlResult, SiteRequest
from contact_scout.crawler.orchestrator import SiteCrawler
from contact_scout.errors import InputInvalid
from contact_scout.logger import logger
from contact_scout.report import ResultSink
from contact_scout.utils import homepage_for, normalize_domain

__all__ = ["BatchCoordinator", "BatchItem", "BatchRequest", "parse_batch_request", "sites_from_args"]


class BatchItem(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    homepage: str = Field(..., min_length=1)
    domain: str = Field(..., min_length=1)

    @field_validator("homepage", "domain", mode="before")
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("homepage")
    def _with_scheme(cls, v: str) -> str:
        return homepage_for(v)

    def to_site(self) -> SiteRequest:
        return SiteRequest(homepage=self.homepage, domain=normalize_domain(self.domain) or self.domain)


class BatchRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    items: List[BatchItem] = Field(..., min_length=1)
    max_pages_per_site: Optional[int] = Field(None, alias="maxPagesPerSite", ge=1, le=50)

    def sites(self) -> List[SiteRequest]:
        return [item.to_site() for item in self.items]


def parse_batch_request(payload: Any) -> BatchRequest:
    """Validate ``{items: [{homepage, domain}], maxPagesPerSite?}``; raises InputInvalid."""
    if not isinstance(payload, dict):
        raise InputInvalid("request body must be a JSON object")
    try:
        return BatchRequest.model_validate(payload)
    except ValidationError as exc:
        details = [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in exc.errors()
        ]
        raise InputInvalid("items must be a non-empty list of {homepage, domain}", details=details) from None


def sites_from_args(values: Sequence[str]) -> List[SiteRequest]:
    """``SITE`` arguments of the CLI: bare domains or homepage URLs."""
    sites = []
    for value in values:
        domain = normalize_domain(value)
        if not domain:
            raise InputInvalid(f"not a site: {value!r}")
        sites.append(SiteRequest(homepage=homepage_for(value), domain=domain))
    if not sites:
        raise InputInvalid("at least one site is required")
    return sites


class BatchCoordinator:
    """Runs :class:`SiteCrawler` over many sites concurrently."""

    def __init__(self, crawler: SiteCrawler, config: CrawlerConfig, sink: Optional[ResultSink] = None) -> None:
        self.crawler = crawler
        self.config = config
        self.sink = sink

    def _accept(self, sites: Sequence[SiteRequest]) -> List[SiteRequest]:
        accepted: List[SiteRequest] = []
        seen = set()
        for site in sites:
            if site.domain in seen:
                logger.warning("Duplicate domain %s in batch, keeping the first entry", site.domain)
                continue
            seen.add(site.domain)
            accepted.append(site)
        if len(accepted) > self.config.max_sites:
            dropped = accepted[self.config.max_sites:]
            logger.warning(
                "Batch of %d sites exceeds max_sites=%d, dropping: %s",
                len(accepted), self.config.max_sites, ", ".join(s.domain for s in dropped),
            )
            accepted = accepted[: self.config.max_sites]
        return accepted

    async def crawl_many(
        self, sites: Sequence[SiteRequest], max_pages_per_site: Optional[int] = None
    ) -> Dict[str, CrawlResult]:
        accepted = self._accept(sites)
        limit = self.config.max_concurrent_sites
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def run(site: SiteRequest) -> CrawlResult:
            if semaphore is None:
                return await self._crawl_one(site, max_pages_per_site)
            async with semaphore:
                return await self._crawl_one(site, max_pages_per_site)

        logger.info("Batch crawl started: %d sites", len(accepted))
        results = await asyncio.gather(*(run(site) for site in accepted))
        by_domain = {site.domain: result for site, result in zip(accepted, results)}
        failed = sum(1 for r in results if r.error)
        logger.info("Batch crawl finished: %d sites, %d degraded", len(by_domain), failed)
        return by_domain

    async def _crawl_one(self, site: SiteRequest, max_pages: Optional[int]) -> CrawlResult:
        try:
            report = await self.crawler.crawl(site.homepage, site.domain, max_pages)
            result = report.to_result()
        except Exception as exc:  # noqa: BLE001 - one site must not fail the batch
            logger.exception("Crawl of %s failed: %s", site.domain, exc)
            result = CrawlResult.empty(site.domain, error=type(exc).__name__)
        logger.info(
            "%s: %d pages, %d emails, %d phones%s",
            site.domain, result.pages_analyzed, len(result.emails), len(result.phones),
            f", error {result.error}" if result.error else "",
        )
        if self.sink is not None:
            try:
                await self.sink.save(result)
            except Exception as exc:  # noqa: BLE001
                logger.error("Saving result for %s failed: %s", site.domain, exc)
        return result
