# link_scout/__init__.py
"""
LinkScout package initializer.
Defines package version and exposes the crawl API and CLI.
"""
__version__ = "0.1.0"

from link_scout.crawler import FetchResult, UrlChannel, crawl_urls, resolve_url
from link_scout.filters import PatternFilter

# Expose CLI entry point
from .cli import cli

__all__ = ["__version__", "FetchResult", "UrlChannel", "crawl_urls", "resolve_url", "PatternFilter", "cli"]
