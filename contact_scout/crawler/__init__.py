"""Fetching, link discovery and per-site crawl orchestration."""
from contact_scout.crawler.fetcher import HTML_TYPES, XML_TYPES, Fetcher
from contact_scout.crawler.link_extractor import ExtractedLinks, extract_links, normalize_url
from contact_scout.crawler.models import CrawlResult, PageContent, SiteRequest

__all__ = [
    "CrawlResult",
    "ExtractedLinks",
    "Fetcher",
    "HTML_TYPES",
    "PageContent",
    "SiteRequest",
    "XML_TYPES",
    "extract_links",
    "normalize_url",
]
