# contact_scout/search.py
"""
Web search used by the enrichment flow to find a company's site when no
domain is known.

:class:`GoogleCSESearch` talks to the Google Custom Search JSON API. Without
credentials, or on any HTTP/network failure, it quietly returns no hits.
"""
from __future__ import annotations

import asyncio
import os
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from contact_scout.config import SearchConfig
from contact_scout.logger import logger

CSE_ENDPOINT = "https://www.googleapis.com/customsearch/v1"


@dataclass(slots=True, frozen=True)
class SearchHit:
    title: str
    link: str
    snippet: str = ""

    @property
    def homepage(self) -> Optional[str]:
        match = re.match(r"^(https?)://([^/?#]+)", self.link, re.IGNORECASE)
        if not match:
            return None
        return f"{match.group(1).lower()}://{match.group(2).lower()}"


class SearchProvider(Protocol):
    async def search(self, query: str) -> List[SearchHit]:
        ...


def name_query(name: str, country: Optional[str] = None) -> str:
    return f"{name} {country}" if country else name


def email_query(email: str) -> str:
    return f'"{email.strip()}"'


def phone_query(phone: str) -> str:
    return '"' + re.sub(r"[^\d+]", "", phone) + '"'


class GoogleCSESearch:
    """Google Custom Search; credentials are read from the env variables named in the config."""

    def __init__(self, config: SearchConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session

    def _credentials(self) -> Optional[tuple[str, str]]:
        key = os.getenv(self.config.api_key_env)
        cx = os.getenv(self.config.cx_env)
        if not key or not cx:
            return None
        return key, cx

    async def search(self, query: str) -> List[SearchHit]:
        creds = self._credentials()
        if creds is None or not query.strip():
            logger.debug("Search skipped for %r: no credentials or empty query", query)
            return []
        key, cx = creds
        params = {"key": key, "cx": cx, "q": query, "num": str(self.config.results), "start": "1"}
        try:
            if self.session is not None:
                data = await self._get(self.session, params)
            else:
                async with ClientSession() as session:
                    data = await self._get(session, params)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("Search request failed for %r: %s", query, str(exc) or type(exc).__name__)
            return []
        if data is None:
            return []
        items = data.get("items") if isinstance(data, dict) else None
        hits = [
            SearchHit(
                title=str(item.get("title") or ""),
                link=str(item.get("link") or ""),
                snippet=item.get("snippet") if isinstance(item.get("snippet"), str) else "",
            )
            for item in (items if isinstance(items, list) else [])
            if isinstance(item, dict) and item.get("link")
        ]
        logger.info("Search %r -> %d results", query, len(hits))
        return hits

    async def _get(self, session: ClientSession, params: dict) -> Optional[Any]:
        timeout = ClientTimeout(total=self.config.timeout)
        async with session.get(CSE_ENDPOINT, params=params, timeout=timeout) as resp:
            if resp.status != 200:
                logger.warning("Search API returned HTTP %s for %r", resp.status, params["q"])
                return None
            return await resp.json(content_type=None)


__all__ = ["CSE_ENDPOINT", "GoogleCSESearch", "SearchHit", "SearchProvider", "email_query", "name_query", "phone_query"]
