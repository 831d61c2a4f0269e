# tests/test_classifier.py
import asyncio

import pytest

from contact_scout.classifier import (
    FallbackPageClassifier,
    HeuristicPageClassifier,
    LLMPageClassifier,
    build_classifier,
    classify_heuristic,
    rank_links,
)
from contact_scout.crawler.models import PageContent, PageType
from contact_scout.errors import LLMUnavailable
from contact_scout.extractor import extract_facts
from contact_scout.parser.html_parser import PageSummary, summarize_page


class ScriptedLLM:
    def __init__(self, reply=None, error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts = []

    async def complete(self, system: str, user: str) -> str:
        self.prompts.append(user)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply


def summary(url="https://acme.de/page", **kwargs) -> PageSummary:
    return PageSummary(url=url, **kwargs)


@pytest.mark.parametrize(
    "page, expected",
    [
        (summary(title="Contact us"), PageType.CONTACT),
        (summary(url="https://acme.de/kontakt"), PageType.CONTACT),
        (summary(headings=("Get in touch",)), PageType.CONTACT),
        (summary(email_count=1, phone_count=2), PageType.CONTACT),
        (summary(title="About us"), PageType.ABOUT),
        (summary(url="https://acme.de/ueber-uns"), PageType.ABOUT),
        (summary(headings=("Our story",)), PageType.ABOUT),
        (summary(headings=("Our products",)), PageType.PRODUCTS),
        (summary(first_paragraph="Browse the full catalog of drills"), PageType.PRODUCTS),
        (summary(title="News", email_count=1), PageType.OTHER),
    ],
)
def test_heuristic_rules(page, expected):
    assert classify_heuristic(page).page_type is expected


def test_heuristic_other_has_lower_confidence():
    assert classify_heuristic(summary(title="Blog")).confidence < classify_heuristic(summary(title="Contact")).confidence


def test_summarize_page_is_bounded_digest():
    body = (
        "<html><head><title> Kontakt </title></head><body>"
        + "".join(f"<h2>Section {i}</h2>" for i in range(10))
        + "<p>short</p><p>" + "x" * 500 + "</p>"
        + '<a href="mailto:office@acme.de">mail</a></body></html>'
    )
    page = PageContent(url="https://acme.de/kontakt", body=body)
    digest = summarize_page(page, extract_facts(body))
    assert digest.title == "Kontakt"
    assert len(digest.headings) == 5
    assert len(digest.first_paragraph) == 300
    assert digest.email_count == 1
    assert "URL path: /kontakt" in digest.as_prompt()


@pytest.mark.asyncio()
async def test_llm_classifier_parses_fenced_json():
    llm = ScriptedLLM(reply='Sure!\n```json\n{"pageType": "about", "confidence": 0.9, "evidence": ["a", "b", "c", "d"]}\n```')
    result = await LLMPageClassifier(llm).classify(summary(title="Firma"))
    assert result.page_type is PageType.ABOUT
    assert result.confidence == 0.9
    assert result.evidence == ("a", "b", "c")
    assert "Title: Firma" in llm.prompts[0]


@pytest.mark.asyncio()
async def test_llm_classifier_rejects_unknown_type():
    with pytest.raises(LLMUnavailable):
        await LLMPageClassifier(ScriptedLLM(reply='{"pageType": "PRICING"}')).classify(summary())


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "llm",
    [
        ScriptedLLM(error=LLMUnavailable("down")),
        ScriptedLLM(reply="no idea"),
        ScriptedLLM(reply='{"pageType": "ABOUT"}', delay=0.5),
        ScriptedLLM(error=RuntimeError("boom")),
    ],
)
async def test_fallback_answers_with_heuristic_on_any_failure(llm):
    classifier = FallbackPageClassifier(LLMPageClassifier(llm), HeuristicPageClassifier(), timeout=0.1)
    result = await classifier.classify(summary(title="Contact"))
    assert result.page_type is PageType.CONTACT


@pytest.mark.asyncio()
async def test_fallback_prefers_primary_answer():
    llm = ScriptedLLM(reply='{"pageType": "PRODUCTS", "confidence": 0.8}')
    classifier = FallbackPageClassifier(LLMPageClassifier(llm), timeout=1.0)
    result = await classifier.classify(summary(title="Contact"))
    assert result.page_type is PageType.PRODUCTS


def test_build_classifier_without_llm_is_heuristic():
    assert isinstance(build_classifier(None), HeuristicPageClassifier)
    assert isinstance(build_classifier(ScriptedLLM(reply="{}")), FallbackPageClassifier)


def test_rank_links_contact_then_about_in_discovery_order():
    links = [
        "https://acme.de/blog",
        "https://acme.de/about",
        "https://acme.de/team",
        "https://acme.de/contact",
        "https://acme.de/p/42",
        "https://acme.de/kontakt",
    ]
    anchors = {"https://acme.de/team": "Who we are", "https://acme.de/p/42": "Contact us"}
    candidates, overflow = rank_links(links, anchors)
    assert candidates == [
        "https://acme.de/contact",
        "https://acme.de/p/42",
        "https://acme.de/kontakt",
        "https://acme.de/about",
        "https://acme.de/team",
    ]
    assert overflow == ["https://acme.de/blog"]


def test_rank_links_does_not_match_inside_words():
    candidates, overflow = rank_links(["https://acme.de/contactless-payments", "https://acme.de/aboutique"])
    assert candidates == []
    assert len(overflow) == 2
