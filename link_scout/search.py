"""Site search producer: feeds result links of a ``site:`` web search into the frontier."""

from __future__ import annotations

import asyncio
import re
from contextlib import aclosing
from typing import AsyncIterator, List
from urllib.parse import quote, unquote

from aiohttp import ClientError, ClientSession
from bs4 import BeautifulSoup

from link_scout.config import SEARCH_USER_AGENT
from link_scout.crawler.frontier import UrlSender
from link_scout.errors import SearchError
from link_scout.logger import logger

SEARCH_URL = "https://www.google.com/search"
RESULTS_PER_PAGE = 10
RESULT_LINK_RE = re.compile(r"/url\?q=(.*?)&sa=")


def build_search_url(site: str, start: int) -> str:
    """Results page *start* (0, 10, 20, ...) of a ``site:<site>`` query."""
    query = quote(f"site:{site}", safe="")
    return f"{SEARCH_URL}?q={query}&start={start}"


def extract_result_links(html: str) -> List[str]:
    """Pull target addresses out of the ``/url?q=...&sa=`` redirect links of a results page."""
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        match = RESULT_LINK_RE.search(href)
        if match and match.group(1):
            links.append(unquote(match.group(1)))
    return links


async def iter_search_results(
    session: ClientSession,
    site: str,
    limit: int,
    *,
    delay: float = 0.5,
    user_agent: str = SEARCH_USER_AGENT,
) -> AsyncIterator[str]:
    """
    Yield up to *limit* result addresses for ``site:<site>``.

    Pages through the results ten at a time, waiting *delay* seconds between
    pages, and stops early when a page has no results.

    Raises
    ------
    SearchError
        When a results page cannot be retrieved.
    """
    fetched = 0
    start = 0
    headers = {"User-Agent": user_agent}
    while fetched < limit:
        url = build_search_url(site, start)
        try:
            async with session.get(url, headers=headers) as resp:
                if resp.status >= 400:
                    raise SearchError(f"Search backend returned HTTP {resp.status} for {url}")
                body = await resp.text()
        except (ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            raise SearchError(f"Search request failed for {url}: {exc!r}") from exc

        found = extract_result_links(body)
        if not found:
            logger.info("No more search results for %s after %d", site, fetched)
            break

        for link in found:
            if fetched >= limit:
                break
            yield link
            fetched += 1

        start += RESULTS_PER_PAGE
        if fetched < limit:
            await asyncio.sleep(delay)


async def search_site_urls(
    session: ClientSession,
    site: str,
    limit: int,
    sender: UrlSender,
    *,
    delay: float = 0.5,
    user_agent: str = SEARCH_USER_AGENT,
) -> int:
    """Send search results for *site* to the frontier; returns how many were sent.

    *sender* is closed when the search ends, successfully or not.
    """
    sent = 0
    try:
        results = iter_search_results(session, site, limit, delay=delay, user_agent=user_agent)
        async with aclosing(results) as stream:
            async for url in stream:
                sender.send(url)
                sent += 1
    finally:
        sender.close()
    logger.info("Search for %s produced %d addresses", site, sent)
    return sent


__all__ = [
    "build_search_url",
    "extract_result_links",
    "iter_search_results",
    "search_site_urls",
]
