# link_scout/crawler/fetcher.py
"""
Fetcher module: retrieves one page and extracts the addresses it links to.

A fetch is a single attempt. Whatever goes wrong (connection error, invalid
address, timeout, undecodable body) is absorbed into a result without
children so that one bad page never halts the crawl.
"""
from __future__ import annotations

from typing import Optional

from aiohttp import ClientSession, ClientTimeout

from link_scout.config import DEFAULT_USER_AGENT
from link_scout.crawler.link_extractor import extract_links
from link_scout.crawler.models import FetchResult
from link_scout.logger import logger


class Fetcher:
    """Fetches pages through a shared aiohttp session.

    Pass an existing *session* to share it with other collaborators; otherwise
    use the fetcher as an async context manager and it owns its own session.
    """

    def __init__(
        self,
        session: Optional[ClientSession] = None,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: Optional[float] = None,
    ) -> None:
        self.session = session
        self.user_agent = user_agent
        self._owns_session = session is None
        self._timeout = ClientTimeout(total=timeout) if timeout else None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(headers={"User-Agent": self.user_agent})
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch *url* and return its child addresses.

        Returns ``FetchResult(url, [])`` on any failure.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized")
        kwargs = {"headers": {"User-Agent": self.user_agent}}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        try:
            async with self.session.get(url, **kwargs) as resp:
                body = await resp.text()
            children = extract_links(body, url)
        except Exception as exc:
            logger.debug("Fetch failed %s: %r", url, exc)
            return FetchResult(url, [])
        logger.debug("Fetched %s: %d links", url, len(children))
        return FetchResult(url, children)


__all__ = ["Fetcher"]
