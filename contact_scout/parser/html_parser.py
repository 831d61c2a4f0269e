# === FILE: contact_scout/parser/html_parser.py ===
"""Compact page digests for the page classifier.

The classifier never sees a full page body. It gets a :class:`PageSummary`:

* title — document <title> text or ``""`` if absent.
* headings — the first few h1/h2/h3 texts, in that order.
* first_paragraph — the first non-trivial ``<p>`` text, truncated.
* email_count / phone_count — how many contacts the extractor found.

Adding optional fields to :class:`PageSummary` is backward-compatible; the
LLM prompt and the keyword heuristic both read it through
:meth:`PageSummary.as_prompt` and :meth:`PageSummary.keyword_text`.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from contact_scout.crawler.models import ExtractedFacts, PageContent

__all__: Sequence[str] = ("PageSummary", "summarize_page")

_MAX_H1 = 3
_MAX_H2 = 5
_MAX_H3 = 5
_MAX_PARAGRAPH = 300
_MIN_PARAGRAPH = 20


@dataclass(slots=True, frozen=True)
class PageSummary:
    """Lightweight, bounded representation of an analyzed page."""

    url: str
    title: str = ""
    headings: tuple[str, ...] = field(default_factory=tuple)
    first_paragraph: str = ""
    email_count: int = 0
    phone_count: int = 0

    @property
    def path(self) -> str:
        return urlparse(self.url).path.lower()

    def keyword_text(self) -> str:
        """Lower-cased text the heuristic classifier matches keywords against."""
        return " ".join([self.title, *self.headings, self.first_paragraph]).lower()

    def as_prompt(self) -> str:
        parts: list[str] = []
        if self.url:
            parts.append(f"URL path: {self.path or '/'}")
        if self.title:
            parts.append(f"Title: {self.title}")
        if self.headings:
            parts.append(f"Headings: {' | '.join(self.headings)}")
        if self.first_paragraph:
            parts.append(f"First paragraph: {self.first_paragraph}")
        if self.email_count:
            parts.append(f"Emails found: {self.email_count}")
        if self.phone_count:
            parts.append(f"Phones found: {self.phone_count}")
        return "\n".join(parts)


def _texts(soup: BeautifulSoup, name: str, limit: int) -> list[str]:
    found: list[str] = []
    for tag in soup.find_all(name):
        text = " ".join(tag.get_text(" ", strip=True).split())
        if text:
            found.append(text)
        if len(found) >= limit:
            break
    return found


def summarize_page(page: PageContent, facts: ExtractedFacts) -> PageSummary:
    """Build the classifier digest for *page* from its body and extracted facts."""
    soup = BeautifulSoup(page.body, "html.parser")
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()

    title_tag = soup.find("title")
    title = " ".join(title_tag.get_text(" ", strip=True).split()) if title_tag else ""

    headings = (
        _texts(soup, "h1", _MAX_H1) + _texts(soup, "h2", _MAX_H2) + _texts(soup, "h3", _MAX_H3)
    )

    first_paragraph = ""
    for text in _texts(soup, "p", 20):
        if len(text) >= _MIN_PARAGRAPH:
            first_paragraph = text[:_MAX_PARAGRAPH]
            break

    return PageSummary(
        url=page.url,
        title=title,
        headings=tuple(headings),
        first_paragraph=first_paragraph,
        email_count=len(facts.emails),
        phone_count=len(facts.phones),
    )
