# link_scout/crawler/link_extractor.py
"""
Link extraction for LinkScout pages.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup
from bs4.element import Tag

from link_scout.crawler.resolver import resolve_url


def extract_links(html: str, base_url: str) -> List[str]:
    """
    Return every ``<a href>`` on the page resolved against *base_url*.

    Document order is preserved and duplicates are kept: deduplication
    belongs to the frontier.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        links.append(resolve_url(href_val, base_url))
    return links


__all__ = ["extract_links"]
