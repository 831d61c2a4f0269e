# contact_scout/llm.py
"""
Thin LLM completion layer.

Only two things in ContactScout ever talk to a model: the page classifier and
the country fallback. Both go through :class:`LLMClient`, so tests can plug in
a fake and production can use :class:`OpenAIChatClient`.
"""
from __future__ import annotations

import json
import os
import re
from typing import Any, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from contact_scout.config import LLMConfig
from contact_scout.errors import LLMUnavailable
from contact_scout.logger import logger

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class LLMClient(Protocol):
    async def complete(self, system: str, user: str) -> str:
        """Return the raw model reply, expected (but not guaranteed) to hold JSON."""
        ...


class OpenAIChatClient:
    """Chat-completions client; raises :class:`LLMUnavailable` on every kind of failure."""

    def __init__(self, config: LLMConfig, client: Optional[AsyncOpenAI] = None) -> None:
        self.config = config
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = os.getenv(self.config.api_key_env)
            if not api_key:
                raise LLMUnavailable(f"Missing {self.config.api_key_env}")
            self._client = AsyncOpenAI(api_key=api_key, timeout=self.config.timeout, max_retries=0)
        return self._client

    async def complete(self, system: str, user: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                temperature=0,
                max_tokens=400,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
        except OpenAIError as exc:
            logger.debug("LLM call failed: %s", exc)
            raise LLMUnavailable(str(exc)) from exc
        if not response.choices:
            raise LLMUnavailable("empty completion")
        return response.choices[0].message.content or ""


def extract_json(text: str) -> Any:
    """
    Pull a JSON value out of a model reply.

    Accepts raw JSON, a fenced ```json block, or prose around the first
    ``{...}``/``[...]`` span. Raises ValueError when nothing parses.
    """
    if not text or not text.strip():
        raise ValueError("empty reply")
    candidates = [text.strip()]
    fence = _FENCE_RE.search(text)
    if fence:
        candidates.insert(0, fence.group(1).strip())
    for opener, closer in (("{", "}"), ("[", "]")):
        start, end = text.find(opener), text.rfind(closer)
        if start != -1 and end > start:
            candidates.append(text[start: end + 1])
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    raise ValueError("no JSON object in reply")


def build_llm_client(config: LLMConfig) -> Optional[LLMClient]:
    """The configured client, or None when LLM use is switched off."""
    if not config.enabled:
        return None
    return OpenAIChatClient(config)


__all__ = ["LLMClient", "OpenAIChatClient", "build_llm_client", "extract_json"]
