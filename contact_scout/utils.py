# File: contact_scout/utils.py
"""contact_scout.utils: Утилиты для доменов, адресов главных страниц и email."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urlparse

__all__: Sequence[str] = (
    "FREEMAIL_DOMAINS",
    "email_domain",
    "homepage_for",
    "normalize_domain",
)

FREEMAIL_DOMAINS = frozenset({
    "gmail.com", "googlemail.com", "yahoo.com", "outlook.com", "hotmail.com", "live.com", "msn.com",
    "icloud.com", "me.com", "aol.com", "proton.me", "protonmail.com", "gmx.com", "gmx.de", "web.de",
    "mail.ru", "yandex.ru", "ukr.net", "i.ua", "qq.com", "163.com", "zoho.com",
})


def normalize_domain(value: str) -> str:
    """Приводит домен или URL к виду ``host`` без схемы, ``www.``, порта и пути."""
    value = (value or "").strip().lower()
    if not value:
        return ""
    if "://" not in value:
        value = "http://" + value
    host = urlparse(value).hostname or ""
    host = host.strip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


def homepage_for(domain: str) -> str:
    """Адрес главной страницы для голого домена (https)."""
    value = (domain or "").strip()
    if "://" in value:
        return value
    return f"https://{normalize_domain(value)}"


def email_domain(email: str) -> Optional[str]:
    """Домен email-адреса, если адрес похож на email."""
    _, sep, domain = (email or "").strip().lower().rpartition("@")
    if not sep or "." not in domain:
        return None
    return domain
