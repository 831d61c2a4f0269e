# contact_scout/crawler/link_extractor.py
"""
Link extraction and URL normalization utilities for ContactScout.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup
from bs4.element import Tag

_SKIP_PREFIXES = ("#", "mailto:", "javascript:", "tel:", "data:", "sms:", "whatsapp:")

_SKIP_EXTENSIONS = (
    ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".bmp", ".ico", ".tif", ".tiff",
    ".pdf", ".zip", ".rar", ".7z", ".gz", ".tar", ".tgz",
    ".mp4", ".mp3", ".avi", ".mov", ".wmv", ".webm", ".wav", ".ogg",
    ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".css", ".js", ".json", ".woff", ".woff2", ".ttf", ".eot", ".exe", ".dmg", ".apk",
)

_SKIP_PATH_PARTS = (
    "/cdn-cgi/", "/wp-content/uploads/", "/wp-includes/", "/assets/", "/static/",
    "/uploads/", "/media/", "/images/", "/img/", "/fonts/", "/feed/",
)


@dataclass(slots=True)
class ExtractedLinks:
    """Same-host links in discovery order, their anchor texts, and a sitemap hint."""

    links: List[str] = field(default_factory=list)
    sitemap_url: Optional[str] = None
    anchors: Dict[str, str] = field(default_factory=dict)


def normalize_url(url: str) -> str:
    """
    Normalize URL by lowercasing scheme, netloc and path,
    stripping the trailing slash and the fragment, collapsing to root URL.
    """
    parsed = urlparse(url.strip())
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = parsed.path.lower().rstrip("/") or "/"
    if path == "/" and not parsed.query:
        return f"{scheme}://{netloc}"
    if path == "/":
        path = ""
    return urlunparse((scheme, netloc, path, "", parsed.query, ""))


def is_content_path(path: str) -> bool:
    lower = path.lower()
    if lower.endswith(_SKIP_EXTENSIONS):
        return False
    return not any(part in lower for part in _SKIP_PATH_PARTS)


def extract_links(body: str, base_url: str) -> ExtractedLinks:
    """
    Extract internal HTTP(S) content links from a page body.

    Ignores mailto:, tel:, javascript:, fragment-only links, external hosts
    and binary/asset paths. Does not fetch the sitemap it may detect.
    """
    soup = BeautifulSoup(body, "html.parser")
    base_host = (urlparse(base_url).hostname or "").lower()
    result = ExtractedLinks()

    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.lower().startswith(_SKIP_PREFIXES):
            continue
        try:
            absolute = urljoin(base_url, raw)
            parsed = urlparse(absolute)
        except ValueError:
            # malformed href, e.g. "http://[oops/x"
            continue
        if parsed.scheme not in ("http", "https") or (parsed.hostname or "").lower() != base_host:
            continue
        if parsed.path.lower().endswith("/sitemap.xml"):
            result.sitemap_url = result.sitemap_url or absolute.split("#", 1)[0]
            continue
        if not is_content_path(parsed.path):
            continue
        norm = normalize_url(absolute)
        if norm in result.anchors:
            continue
        result.links.append(norm)
        result.anchors[norm] = " ".join(tag.get_text(" ", strip=True).split())

    for link in soup.find_all("link", href=True):
        if not isinstance(link, Tag):
            continue
        rel = link.get("rel") or []
        rels = [rel] if isinstance(rel, str) else list(rel)
        if "sitemap" not in (r.lower() for r in rels):
            continue
        href_val = link.get("href")
        if not isinstance(href_val, str):
            continue
        try:
            absolute = urljoin(base_url, href_val.strip())
            host = (urlparse(absolute).hostname or "").lower()
        except ValueError:
            continue
        if host == base_host:
            # an explicit <link rel="sitemap"> wins over a plain href
            result.sitemap_url = absolute
            break

    return result


def same_host(url: str, other: str) -> bool:
    return (urlparse(url).hostname or "").lower() == (urlparse(other).hostname or "").lower()


__all__ = ["ExtractedLinks", "extract_links", "is_content_path", "normalize_url", "same_host"]
