# File: tests/conftest.py
import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web

from link_scout.crawler.models import FetchResult
from link_scout.logger import logger


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def html_page(*hrefs: str) -> web.Response:
    links = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return web.Response(text=f"<html><body>{links}</body></html>", content_type="text/html")


class FakeFetcher:
    """In-memory fetcher: *graph* maps an address to the children found on it."""

    def __init__(
        self,
        graph: Dict[str, List[str]],
        delays: Optional[Dict[str, float]] = None,
        failing: Iterable[str] = (),
        default_delay: float = 0.0,
    ) -> None:
        self.graph = graph
        self.delays = delays or {}
        self.failing = set(failing)
        self.default_delay = default_delay
        self.calls: List[str] = []
        self.active = 0
        self.peak = 0
        self.cancelled = 0

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.delays.get(url, self.default_delay))
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.active -= 1
        if url in self.failing:
            raise RuntimeError(f"boom: {url}")
        return FetchResult(url, list(self.graph.get(url, [])))


@pytest.fixture()
def captured_logs(caplog):
    """Route the project logger (which does not propagate) into caplog."""
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=logger.name)
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest_asyncio.fixture
async def docs_site(unused_tcp_port: int) -> AsyncIterator[str]:
    """Small site:

    /            -> /docs/, /about, /docs/
    /docs/       -> intro, /docs/api
    /docs/intro  -> /, /docs/api
    /docs/api    -> /missing
    /about       -> /team
    /team        -> (nothing)
    """
    app = web.Application()

    async def root(_):
        return html_page("/docs/", "/about", "/docs/")

    async def docs(_):
        return html_page("intro", "/docs/api")

    async def intro(_):
        return html_page("/", "/docs/api")

    async def api(_):
        return html_page("/missing")

    async def about(_):
        return html_page("/team")

    async def team(_):
        return web.Response(text="<h1>Team</h1>", content_type="text/html")

    app.router.add_get("/", root)
    app.router.add_get("/docs/", docs)
    app.router.add_get("/docs/intro", intro)
    app.router.add_get("/docs/api", api)
    app.router.add_get("/about", about)
    app.router.add_get("/team", team)

    async for url in serve_app(app, unused_tcp_port):
        yield url
