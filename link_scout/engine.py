# File: link_scout/engine.py
"""link_scout.engine: wires producers, the frontier and consumers into one crawl run."""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from typing import Optional, Set

from aiohttp import ClientSession

from link_scout.config import CrawlConfig
from link_scout.crawler.fetcher import Fetcher
from link_scout.crawler.frontier import ShouldExpand, UrlSender, crawl_urls, url_channel
from link_scout.downloader import wget
from link_scout.errors import DownloadError, SearchError
from link_scout.filters import PatternFilter
from link_scout.logger import logger
from link_scout.output import OutputWriter
from link_scout.search import search_site_urls
from link_scout.utils import collect_seeds

__all__ = ["run_crawl"]


async def _run_search(session: ClientSession, config: CrawlConfig, sender: UrlSender) -> None:
    try:
        await search_site_urls(
            session,
            config.search_site,
            config.search_limit,
            sender,
            delay=config.search_delay,
            user_agent=config.search_user_agent,
        )
    except SearchError as exc:
        logger.error("Error during site search: %s", exc)
    finally:
        sender.close()


async def _download(url: str, session: ClientSession) -> None:
    try:
        await wget(url, session)
    except DownloadError as exc:
        logger.error("Error downloading: %s", exc)


async def run_crawl(config: CrawlConfig, should_expand: Optional[ShouldExpand] = None) -> int:
    """
    Run one crawl described by *config* and return the number of emitted addresses.

    Parameters
    ----------
    config : CrawlConfig
        Seeds, search producer, output and download settings.
    should_expand : callable, optional
        Traversal filter; defaults to ``PatternFilter(config.filter_patterns)``.

    Returns
    -------
    int
        How many addresses were written out.
    """
    seeds = collect_seeds(config.urls, config.input_file)
    if not seeds and config.search_site is None:
        logger.warning(
            "No initial URLs provided. Use --url, --input-file, or --search-site to specify starting URLs."
        )
        return 0

    if should_expand is None:
        should_expand = PatternFilter(config.filter_patterns)

    logger.info("Starting crawl: %d seeds, search site: %s", len(seeds), config.search_site or "-")
    seed_sender, channel = url_channel()
    downloads: Set[asyncio.Task] = set()
    search_task: Optional[asyncio.Task] = None
    writer = OutputWriter(config.output_path)

    async with ClientSession(headers={"User-Agent": config.user_agent}) as session:
        try:
            if config.search_site:
                search_task = asyncio.create_task(_run_search(session, config, seed_sender.clone()))
            with seed_sender:
                for url in seeds:
                    seed_sender.send(url)

            fetcher = Fetcher(session, user_agent=config.user_agent, timeout=config.fetch_timeout)
            stream = crawl_urls(channel, should_expand, fetcher=fetcher, max_concurrency=config.max_concurrency)
            with writer:
                async with aclosing(stream):
                    async for url in stream:
                        if config.wget and should_expand(url):
                            task = asyncio.create_task(_download(url, session))
                            downloads.add(task)
                            task.add_done_callback(downloads.discard)
                        writer.write(url)
        except BaseException:
            for task in downloads:
                task.cancel()
            raise
        finally:
            if search_task is not None and not search_task.done():
                search_task.cancel()
            pending = list(downloads)
            if search_task is not None:
                pending.append(search_task)
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    logger.info("Crawl finished: %d addresses", writer.count)
    return writer.count
