# contact_scout/crawler/fetcher.py
"""
Fetcher module: single-page HTTP GET under a wall-clock timeout and a byte cap,
with optional retry/backoff on retryable statuses.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from contact_scout.config import CrawlerConfig
from contact_scout.crawler.link_extractor import normalize_url
from contact_scout.crawler.models import PageContent
from contact_scout.errors import FetchError, FetchReason
from contact_scout.logger import logger

HTML_TYPES: Sequence[str] = ("text/html", "application/xhtml+xml")
XML_TYPES: Sequence[str] = ("application/xml", "text/xml", "application/rss+xml")

_RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
_CHUNK = 16 * 1024


class _Retryable(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(f"retryable status {status}")
        self.status = status


class Fetcher:
    """Fetches one page at a time; failures are always raised as :class:`FetchError`."""

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5",
                },
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        accept: Sequence[str] = HTML_TYPES,
    ) -> PageContent:
        """
        GET *url* and return its decoded body.

        Raises FetchError with TIMEOUT, TOO_LARGE, BAD_STATUS, NOT_HTML or NETWORK.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        timeout = timeout if timeout is not None else self.config.page_timeout
        max_bytes = max_bytes if max_bytes is not None else self.config.max_page_bytes

        attempts = 0
        while True:
            try:
                return await asyncio.wait_for(self._get(url, max_bytes, accept), timeout=timeout)
            except asyncio.TimeoutError:
                # no retry on timeout
                raise FetchError(FetchReason.TIMEOUT, url, f"after {timeout:.1f}s") from None
            except _Retryable as exc:
                attempts += 1
                if attempts > self.config.retry_times:
                    raise FetchError(FetchReason.BAD_STATUS, url, f"HTTP {exc.status}") from None
                backoff = min(2**attempts, 60)
                logger.debug("Retry %d/%d for %s after %d s", attempts, self.config.retry_times, url, backoff)
                await asyncio.sleep(backoff)
            except ClientError as exc:
                raise FetchError(FetchReason.NETWORK, url, str(exc) or type(exc).__name__) from exc

    async def _get(self, url: str, max_bytes: int, accept: Sequence[str]) -> PageContent:
        assert self.session is not None
        # the outer wait_for owns the deadline
        async with self.session.get(url, timeout=ClientTimeout(total=None), allow_redirects=True) as resp:
            if resp.status in _RETRY_STATUS:
                raise _Retryable(resp.status)
            if not 200 <= resp.status < 300:
                raise FetchError(FetchReason.BAD_STATUS, url, f"HTTP {resp.status}")

            mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
            if mime not in accept:
                raise FetchError(FetchReason.NOT_HTML, url, mime or "no content type")

            if resp.content_length is not None and resp.content_length > max_bytes:
                raise FetchError(FetchReason.TOO_LARGE, url, f"Content-Length {resp.content_length}")

            chunks: list[bytes] = []
            total = 0
            async for chunk in resp.content.iter_chunked(_CHUNK):
                total += len(chunk)
                if total > max_bytes:
                    raise FetchError(FetchReason.TOO_LARGE, url, f"more than {max_bytes} bytes")
                chunks.append(chunk)

            raw = b"".join(chunks)
            encoding = resp.charset or "utf-8"
            try:
                text = raw.decode(encoding, errors="replace")
            except LookupError:
                text = raw.decode("utf-8", errors="replace")
            return PageContent(url=normalize_url(str(resp.url)), body=text, size=total)


__all__ = ["Fetcher", "HTML_TYPES", "XML_TYPES"]
