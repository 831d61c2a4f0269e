# contact_scout/country/engine.py
"""
Country inference: address text > phone dialing code > ccTLD > LLM fallback.

The first three steps are deterministic table lookups; the LLM step is an
optional strategy that is only consulted when they all come up empty and a
text snippet is available.
"""
from __future__ import annotations

import asyncio
import re
from typing import Iterable, Optional, Protocol, Sequence

from contact_scout.country.tables import CCTLDS, COUNTRY_NAMES, DIAL_CODES, GENERIC_TLDS
from contact_scout.crawler.models import (
    UNKNOWN_COUNTRY,
    ConfidenceTier,
    CountrySignal,
    CountrySource,
)
from contact_scout.errors import ErrorCode, LLMUnavailable
from contact_scout.llm import LLMClient, extract_json
from contact_scout.logger import logger

ADDRESS_SCORE = 0.95
PHONE_SCORE = 0.9
TLD_SCORE = 0.6
_DEFAULT_LLM_SCORE = 0.5

# longest names first so "south africa" wins over a shorter overlapping name
_COUNTRY_RE = re.compile(
    r"(?<!\w)(" + "|".join(re.escape(n) for n in sorted(COUNTRY_NAMES, key=len, reverse=True)) + r")(?!\w)",
    re.IGNORECASE,
)
_ISO2_RE = re.compile(r"^[A-Z]{2}$")

_LLM_SYSTEM = "\n".join([
    "You are a country detection expert.",
    "Return STRICT JSON with { iso2, confidence, confidenceScore }.",
    "iso2: ISO 3166-1 alpha-2 code (e.g. 'UA', 'DE', 'PL', 'US', 'CN') or null if unknown.",
    "confidence: 'HIGH' if explicit mention (address, city, country name, phone prefix), 'WEAK' if only a domain hint.",
    "confidenceScore: 0.0 to 1.0.",
    "Analyze context carefully: distinguish 'Georgia (country)' from 'Georgia, USA'.",
])


def country_from_addresses(addresses: Iterable[str]) -> Optional[str]:
    for address in addresses:
        match = _COUNTRY_RE.search(address or "")
        if match:
            return COUNTRY_NAMES[match.group(1).lower()]
    return None


def country_from_phone(phone: str) -> Optional[str]:
    """ISO-2 for an international (``+``) number, longest calling code first."""
    phone = (phone or "").strip()
    if not phone.startswith("+"):
        return None
    digits = re.sub(r"\D", "", phone)
    for length in (3, 2, 1):
        iso2 = DIAL_CODES.get(digits[:length])
        if iso2:
            return iso2
    return None


def country_from_domain(domain: str) -> Optional[str]:
    labels = [p for p in (domain or "").lower().strip().strip(".").split(".") if p]
    if len(labels) < 2:
        return None
    tld = labels[-1]
    if tld in GENERIC_TLDS:
        return None
    return CCTLDS.get(tld)


def infer_heuristic(addresses: Sequence[str], phones: Sequence[str], domain: str) -> Optional[CountrySignal]:
    """Deterministic part of the inference; None when no table matched."""
    iso2 = country_from_addresses(addresses)
    if iso2:
        return CountrySignal(iso2, ConfidenceTier.HIGH, ADDRESS_SCORE, CountrySource.ADDRESS)
    for phone in phones:
        iso2 = country_from_phone(phone)
        if iso2:
            return CountrySignal(iso2, ConfidenceTier.HIGH, PHONE_SCORE, CountrySource.PHONE)
    iso2 = country_from_domain(domain)
    if iso2:
        return CountrySignal(iso2, ConfidenceTier.WEAK, TLD_SCORE, CountrySource.TLD)
    return None


class CountryStrategy(Protocol):
    async def detect(self, snippet: str, phones: Sequence[str], domain: str) -> CountrySignal:
        ...


class LLMCountryStrategy:
    """Asks the model; anything unusable becomes :data:`UNKNOWN_COUNTRY`."""

    def __init__(self, llm: LLMClient, timeout: float = 8.0, max_snippet_chars: int = 4000) -> None:
        self.llm = llm
        self.timeout = timeout
        self.max_snippet_chars = max_snippet_chars

    async def detect(self, snippet: str, phones: Sequence[str], domain: str) -> CountrySignal:
        user = "\n".join(line for line in (
            "Determine the country where this company is located based on:",
            f"Domain: {domain}" if domain else "",
            f"Phones: {', '.join(list(phones)[:3])}" if phones else "",
            "Text snippet (contact/about page):",
            snippet[: self.max_snippet_chars],
            "",
            "Return JSON { iso2, confidence, confidenceScore }.",
        ) if line)
        try:
            raw = await asyncio.wait_for(self.llm.complete(_LLM_SYSTEM, user), timeout=self.timeout)
            data = extract_json(raw)
        except (LLMUnavailable, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("%s for %s: %s", ErrorCode.COUNTRY_LLM_UNAVAILABLE.value, domain, str(exc) or type(exc).__name__)
            return UNKNOWN_COUNTRY
        return self._to_signal(data, domain)

    @staticmethod
    def _to_signal(data: object, domain: str) -> CountrySignal:
        if not isinstance(data, dict):
            logger.warning("%s for %s: reply is not an object", ErrorCode.COUNTRY_LLM_UNAVAILABLE.value, domain)
            return UNKNOWN_COUNTRY
        iso2 = data.get("iso2")
        if not isinstance(iso2, str) or not _ISO2_RE.match(iso2.strip().upper()):
            return UNKNOWN_COUNTRY
        score = data.get("confidenceScore")
        if isinstance(score, bool) or not isinstance(score, (int, float)) or not 0 <= score <= 1:
            score = _DEFAULT_LLM_SCORE
        return CountrySignal(iso2.strip().upper(), ConfidenceTier.LLM, float(score), CountrySource.LLM)


class CountryInferenceEngine:
    """Heuristics first; the optional LLM strategy only when they find nothing."""

    def __init__(self, llm_strategy: Optional[CountryStrategy] = None) -> None:
        self.llm_strategy = llm_strategy

    async def infer(
        self,
        addresses: Sequence[str],
        phones: Sequence[str],
        domain: str,
        text_snippet: Optional[str] = None,
    ) -> CountrySignal:
        signal = infer_heuristic(addresses, phones, domain)
        if signal is not None:
            return signal
        if self.llm_strategy is None or not text_snippet or not text_snippet.strip():
            return UNKNOWN_COUNTRY
        return await self.llm_strategy.detect(text_snippet, phones, domain)


def merge_country(current: Optional[CountrySignal], new: Optional[CountrySignal]) -> Optional[CountrySignal]:
    """
    Keep the stronger of two signals.

    *new* wins only with a strictly higher tier, or the same tier and a
    strictly higher score; unknown signals never win.
    """
    if new is None or not new.is_known:
        return current
    if current is None or not current.is_known:
        return new
    if new.tier.rank > current.tier.rank:
        return new
    if new.tier.rank == current.tier.rank and new.score > current.score:
        return new
    return current


__all__ = [
    "CountryInferenceEngine",
    "CountryStrategy",
    "LLMCountryStrategy",
    "country_from_addresses",
    "country_from_domain",
    "country_from_phone",
    "infer_heuristic",
    "merge_country",
]
