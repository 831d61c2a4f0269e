# contact_scout/extractor/emails.py
"""
Email extraction with a blacklist of placeholder, generated and platform addresses.
"""
from __future__ import annotations

import re
from typing import FrozenSet, Iterable
from urllib.parse import unquote

from bs4 import BeautifulSoup
from bs4.element import Tag

EMAIL_RE = re.compile(r"(?<![\w.%+-])[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,24}(?![A-Za-z0-9-])")

PLACEHOLDER_DOMAINS: FrozenSet[str] = frozenset({
    "example.com", "example.org", "example.net", "example.de", "test.com", "domain.com",
    "yourdomain.com", "yoursite.com", "yourcompany.com", "mysite.com", "website.com",
    "email.com", "company.com", "mail.com", "localhost",
})

PLATFORM_DOMAINS: FrozenSet[str] = frozenset({
    "sentry.io", "wixpress.com", "wix.com", "squarespace.com", "shopify.com", "godaddy.com",
    "wordpress.com", "wordpress.org", "cloudflare.com", "w3.org", "schema.org",
    "googleapis.com", "gstatic.com", "amazonaws.com", "sentry-next.wixpress.com",
})

GENERATED_LOCAL_PARTS: FrozenSet[str] = frozenset({
    "noreply", "no-reply", "no_reply", "donotreply", "do-not-reply", "do_not_reply",
    "mailer-daemon", "postmaster", "bounce", "bounces", "your", "yourname", "name", "email", "user",
})

FILE_SUFFIXES: FrozenSet[str] = frozenset({
    "png", "jpg", "jpeg", "gif", "svg", "webp", "bmp", "ico", "css", "js", "pdf",
})

_HEX_LOCAL_RE = re.compile(r"^[0-9a-f]{16,}$")


def _domain_listed(domain: str, listed: FrozenSet[str]) -> bool:
    return any(domain == d or domain.endswith("." + d) for d in listed)


def is_blacklisted(email: str) -> bool:
    local, _, domain = email.rpartition("@")
    if not local or not domain:
        return True
    if domain.rsplit(".", 1)[-1] in FILE_SUFFIXES:
        return True
    if _domain_listed(domain, PLACEHOLDER_DOMAINS) or _domain_listed(domain, PLATFORM_DOMAINS):
        return True
    base_local = local.split("+", 1)[0]
    if base_local in GENERATED_LOCAL_PARTS or base_local.startswith(("noreply", "no-reply", "donotreply")):
        return True
    return bool(_HEX_LOCAL_RE.match(base_local))


def _mailto_targets(soup: BeautifulSoup) -> Iterable[str]:
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if isinstance(href, str) and href.strip().lower().startswith("mailto:"):
            target = unquote(href.strip()[7:]).split("?", 1)[0]
            yield from target.split(",")


def extract_emails(soup: BeautifulSoup, text: str) -> frozenset[str]:
    found = set()
    for source in (text, *_mailto_targets(soup)):
        for match in EMAIL_RE.findall(source):
            email = match.strip(".").lower()
            if not is_blacklisted(email):
                found.add(email)
    return frozenset(found)


__all__ = ["extract_emails", "is_blacklisted", "EMAIL_RE"]
