"""Crawl engine: address resolution, page fetching and the frontier traversal."""
from link_scout.crawler.fetcher import Fetcher
from link_scout.crawler.frontier import (
    FrontierEngine,
    UrlChannel,
    UrlSender,
    VisitedSet,
    crawl_urls,
    url_channel,
)
from link_scout.crawler.link_extractor import extract_links
from link_scout.crawler.models import FetchResult
from link_scout.crawler.resolver import resolve_url

__all__ = [
    "Fetcher",
    "FetchResult",
    "FrontierEngine",
    "UrlChannel",
    "UrlSender",
    "VisitedSet",
    "crawl_urls",
    "extract_links",
    "resolve_url",
    "url_channel",
]
