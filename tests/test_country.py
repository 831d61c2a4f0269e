# tests/test_country.py
import asyncio

import pytest

from contact_scout.country import CountryInferenceEngine, LLMCountryStrategy, infer_heuristic, merge_country
from contact_scout.country.engine import country_from_addresses, country_from_domain, country_from_phone
from contact_scout.crawler.models import UNKNOWN_COUNTRY, ConfidenceTier, CountrySignal, CountrySource
from contact_scout.errors import LLMUnavailable


class FakeLLM:
    def __init__(self, reply=None, error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = 0

    async def complete(self, system: str, user: str) -> str:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply


@pytest.mark.asyncio()
async def test_dialing_code_gives_high_phone_signal():
    signal = await CountryInferenceEngine().infer([], ["+380501234567"], "example.com")
    assert signal.to_dict() == {
        "iso2": "UA", "confidenceTier": "HIGH", "confidenceScore": 0.9, "source": "PHONE",
    }


@pytest.mark.asyncio()
async def test_cctld_gives_weak_tld_signal():
    signal = await CountryInferenceEngine().infer([], [], "example.de")
    assert (signal.iso2, signal.tier, signal.source) == ("DE", ConfidenceTier.WEAK, CountrySource.TLD)


@pytest.mark.asyncio()
async def test_address_beats_phone_and_tld():
    signal = await CountryInferenceEngine().infer(["Hauptstr. 5, 10115 Berlin, Deutschland"], ["+380501234567"], "acme.pl")
    assert (signal.iso2, signal.source, signal.score) == ("DE", CountrySource.ADDRESS, 0.95)


@pytest.mark.asyncio()
async def test_nothing_known_without_llm_is_unknown():
    signal = await CountryInferenceEngine().infer([], ["0301234567"], "acme.com", text_snippet="hello")
    assert signal == UNKNOWN_COUNTRY
    assert not signal.is_known


def test_lookups():
    assert country_from_addresses(["Unit 4, Leeds, United Kingdom"]) == "GB"
    assert country_from_addresses(["Please contact us today"]) is None
    assert country_from_phone("+44 20 7946 0958") == "GB"
    assert country_from_phone("+1 415 555 0100") == "US"
    assert country_from_phone("0441234567") is None
    assert country_from_domain("shop.acme.co.uk") == "GB"
    assert country_from_domain("acme.com") is None
    assert country_from_domain("acme.io") is None
    assert country_from_domain("localhost") is None


def test_infer_heuristic_none_when_no_table_matches():
    assert infer_heuristic([], [], "acme.com") is None


@pytest.mark.asyncio()
async def test_llm_fallback_used_only_when_heuristics_fail():
    llm = FakeLLM(reply='```json\n{"iso2": "pl", "confidence": "HIGH", "confidenceScore": 0.8}\n```')
    engine = CountryInferenceEngine(LLMCountryStrategy(llm))

    signal = await engine.infer([], [], "acme.com", text_snippet="Biuro w Warszawie")
    assert (signal.iso2, signal.tier, signal.source, signal.score) == ("PL", ConfidenceTier.LLM, CountrySource.LLM, 0.8)

    await engine.infer([], [], "acme.de", text_snippet="Biuro w Warszawie")
    assert llm.calls == 1


@pytest.mark.asyncio()
async def test_llm_skipped_without_snippet():
    llm = FakeLLM(reply='{"iso2": "PL"}')
    signal = await CountryInferenceEngine(LLMCountryStrategy(llm)).infer([], [], "acme.com", text_snippet="  ")
    assert signal == UNKNOWN_COUNTRY
    assert llm.calls == 0


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "llm",
    [
        FakeLLM(error=LLMUnavailable("Missing OPENAI_API_KEY")),
        FakeLLM(reply="I am not sure"),
        FakeLLM(reply='{"iso2": "Poland"}'),
        FakeLLM(reply='{"iso2": null}'),
        FakeLLM(reply='{"iso2": "PL"}', delay=0.5),
    ],
)
async def test_llm_failures_degrade_to_unknown(llm):
    strategy = LLMCountryStrategy(llm, timeout=0.1)
    signal = await CountryInferenceEngine(strategy).infer([], [], "acme.com", text_snippet="text")
    assert signal == UNKNOWN_COUNTRY


@pytest.mark.asyncio()
async def test_llm_bad_score_defaults():
    strategy = LLMCountryStrategy(FakeLLM(reply='{"iso2": "FR", "confidenceScore": 7}'))
    signal = await strategy.detect("Bureau à Lyon", [], "acme.com")
    assert (signal.iso2, signal.score) == ("FR", 0.5)


HIGH_UA = CountrySignal("UA", ConfidenceTier.HIGH, 0.9, CountrySource.PHONE)
HIGH_DE = CountrySignal("DE", ConfidenceTier.HIGH, 0.95, CountrySource.ADDRESS)
WEAK_DE = CountrySignal("DE", ConfidenceTier.WEAK, 0.6, CountrySource.TLD)
LLM_PL = CountrySignal("PL", ConfidenceTier.LLM, 0.99, CountrySource.LLM)


def test_merge_country_tier_upward_only():
    assert merge_country(HIGH_UA, WEAK_DE) is HIGH_UA
    assert merge_country(HIGH_UA, LLM_PL) is HIGH_UA
    assert merge_country(WEAK_DE, HIGH_UA) is HIGH_UA
    assert merge_country(LLM_PL, WEAK_DE) is WEAK_DE


def test_merge_country_same_tier_needs_higher_score():
    assert merge_country(HIGH_UA, HIGH_DE) is HIGH_DE
    assert merge_country(HIGH_DE, HIGH_UA) is HIGH_DE
    same = CountrySignal("PL", ConfidenceTier.HIGH, 0.95, CountrySource.PHONE)
    assert merge_country(HIGH_DE, same) is HIGH_DE


def test_merge_country_unknown_never_wins():
    assert merge_country(WEAK_DE, UNKNOWN_COUNTRY) is WEAK_DE
    assert merge_country(None, UNKNOWN_COUNTRY) is None
    assert merge_country(None, WEAK_DE) is WEAK_DE
