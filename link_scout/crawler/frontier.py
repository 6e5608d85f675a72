# link_scout/crawler/frontier.py
"""
Frontier engine: the concurrent, streaming traversal at the heart of LinkScout.

Candidate addresses arrive on a :class:`UrlChannel` fed by any number of
producers. Each new address is admitted once into the :class:`VisitedSet` and
fetched concurrently; every completed fetch is emitted to the caller and, when
the traversal filter allows it, its children are admitted in turn. The output
ends once every producer has closed its sender and no fetch is pending.

Emission order is fetch-completion order. Addresses are compared as plain
strings, so ``http://h/a`` and ``http://h/a/`` are two distinct pages.
"""
from __future__ import annotations

import asyncio
import threading
from collections import deque
from contextlib import aclosing
from typing import (
    AsyncIterator,
    Callable,
    Deque,
    Dict,
    FrozenSet,
    Iterable,
    Optional,
    Set,
    Union,
)

from link_scout.crawler.fetcher import Fetcher
from link_scout.crawler.models import FetchResult
from link_scout.errors import ChannelClosedError
from link_scout.logger import logger

__all__ = ("UrlChannel", "UrlSender", "VisitedSet", "FrontierEngine", "crawl_urls", "url_channel")

ShouldExpand = Callable[[str], bool]

_WAKEUP = object()


class UrlSender:
    """Producer handle of a :class:`UrlChannel`.

    The channel stays open while at least one sender is open. Senders must be
    used from coroutines running on the crawl's event loop.
    """

    def __init__(self, channel: UrlChannel) -> None:
        self._channel = channel
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, url: str) -> None:
        if self._closed:
            raise ChannelClosedError(f"sender is closed, cannot send {url!r}")
        self._channel._queue.put_nowait(url)

    def clone(self) -> UrlSender:
        """Open another sender on the same channel."""
        return self._channel.sender()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._channel._release()

    def __enter__(self) -> UrlSender:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class UrlChannel:
    """Unbounded multi-producer, single-consumer input of candidate addresses.

    The channel is closed once every sender it handed out has been closed and
    all queued addresses have been received. A channel that never had a
    sender counts as closed, so create senders before the crawl starts.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._open_senders = 0

    @classmethod
    def from_seeds(cls, seeds: Iterable[str]) -> UrlChannel:
        """Channel pre-loaded with *seeds* and already closed to new input."""
        channel = cls()
        with channel.sender() as sender:
            for url in seeds:
                sender.send(url)
        return channel

    def sender(self) -> UrlSender:
        self._open_senders += 1
        return UrlSender(self)

    @property
    def closed(self) -> bool:
        return self._open_senders == 0

    def _release(self) -> None:
        self._open_senders -= 1
        if self._open_senders == 0:
            # wake a receiver blocked on an empty queue
            self._queue.put_nowait(_WAKEUP)

    async def recv(self) -> Optional[str]:
        """Return the next address, or None once the channel is closed and drained."""
        while True:
            if self._open_senders == 0 and self._queue.empty():
                return None
            item = await self._queue.get()
            if item is _WAKEUP:
                continue
            return item


def url_channel() -> tuple[UrlSender, UrlChannel]:
    """Create a channel together with its first sender."""
    channel = UrlChannel()
    return channel.sender(), channel


class VisitedSet:
    """Addresses ever admitted during one crawl run."""

    def __init__(self) -> None:
        self._urls: Set[str] = set()
        self._lock = threading.Lock()

    def admit(self, url: str) -> bool:
        """Insert *url* unless present; True when this call admitted it."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def snapshot(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._urls)


class FrontierEngine:
    """Owns the visited set and the in-flight fetches of one crawl run.

    ``max_concurrency`` bounds the number of fetches in flight. Addresses
    admitted while the bound is reached wait in a FIFO backlog; they are
    already marked visited, so deduplication is unaffected. ``None`` leaves
    concurrency unbounded.
    """

    def __init__(
        self,
        channel: UrlChannel,
        should_expand: ShouldExpand,
        fetcher: Fetcher,
        *,
        max_concurrency: Optional[int] = None,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._channel = channel
        self._should_expand = should_expand
        self._fetcher = fetcher
        self._max_concurrency = max_concurrency
        self.visited = VisitedSet()
        self._in_flight: Dict[asyncio.Task, str] = {}
        self._backlog: Deque[str] = deque()
        # finished fetch tasks, in completion order
        self._done: asyncio.Queue = asyncio.Queue()
        self._started = False

    @property
    def in_flight(self) -> FrozenSet[str]:
        return frozenset(self._in_flight.values())

    def admit(self, url: str) -> bool:
        """Admit *url* unless already visited and dispatch (or queue) its fetch."""
        if not self.visited.admit(url):
            return False
        if self._has_free_slot():
            self._dispatch(url)
        else:
            self._backlog.append(url)
        logger.debug("Admitted %s (in flight: %d, backlog: %d)", url, len(self._in_flight), len(self._backlog))
        return True

    def _has_free_slot(self) -> bool:
        return self._max_concurrency is None or len(self._in_flight) < self._max_concurrency

    def _dispatch(self, url: str) -> None:
        task = asyncio.create_task(self._fetcher.fetch(url))
        self._in_flight[task] = url
        task.add_done_callback(self._done.put_nowait)

    def _fill_slots(self) -> None:
        while self._backlog and self._has_free_slot():
            self._dispatch(self._backlog.popleft())

    @staticmethod
    def _completed(task: asyncio.Task, url: str) -> FetchResult:
        if task.cancelled():
            return FetchResult(url, [])
        exc = task.exception()
        if exc is not None:
            logger.warning("Fetch of %s raised %r", url, exc)
            return FetchResult(url, [])
        return task.result()

    async def run(self) -> AsyncIterator[str]:
        """Drive the crawl, yielding each address once its fetch completes.

        Can only be iterated once. Closing the iterator early cancels every
        fetch still in flight.
        """
        if self._started:
            raise RuntimeError("FrontierEngine.run() can only be consumed once")
        self._started = True

        receiver: Optional[asyncio.Task] = None
        next_done: Optional[asyncio.Task] = None
        input_open = True
        try:
            while True:
                if input_open and receiver is None:
                    receiver = asyncio.create_task(self._channel.recv())
                if not input_open and not self._in_flight:
                    break
                if next_done is None:
                    next_done = asyncio.create_task(self._done.get())

                waiting = {next_done}
                if receiver is not None:
                    waiting.add(receiver)
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

                if receiver is not None and receiver in done:
                    candidate = receiver.result()
                    receiver = None
                    if candidate is None:
                        input_open = False
                        logger.debug("Input closed, %d fetches in flight", len(self._in_flight))
                    else:
                        self.admit(candidate)

                if next_done in done:
                    task = next_done.result()
                    next_done = None
                    url = self._in_flight.pop(task, None)
                    if url is None:
                        continue
                    result = self._completed(task, url)
                    self._fill_slots()
                    yield url
                    if not self._should_expand(url):
                        continue
                    for child in result.children:
                        self.admit(child)
        finally:
            pending = list(self._in_flight)
            for helper in (receiver, next_done):
                if helper is not None:
                    pending.append(helper)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            self._in_flight.clear()
            self._backlog.clear()
            logger.debug("Frontier closed after admitting %d addresses", len(self.visited))


async def crawl_urls(
    source: Union[UrlChannel, Iterable[str]],
    should_expand: ShouldExpand,
    *,
    fetcher: Optional[Fetcher] = None,
    max_concurrency: Optional[int] = None,
) -> AsyncIterator[str]:
    """
    Crawl from *source* and yield every discovered address as it is fetched.

    Parameters
    ----------
    source
        A :class:`UrlChannel` producers keep feeding, or a static list of seeds.
    should_expand
        Called once per emitted address; children are followed only when it
        returns True.
    fetcher
        Page fetcher to use. A private one with default settings is opened
        (and closed) when omitted.
    max_concurrency
        Upper bound on fetches in flight; unbounded when None.
    """
    if isinstance(source, str):
        source = [source]
    channel = source if isinstance(source, UrlChannel) else UrlChannel.from_seeds(source)

    if fetcher is not None:
        engine = FrontierEngine(channel, should_expand, fetcher, max_concurrency=max_concurrency)
        async with aclosing(engine.run()) as stream:
            async for url in stream:
                yield url
        return

    async with Fetcher() as own_fetcher:
        engine = FrontierEngine(channel, should_expand, own_fetcher, max_concurrency=max_concurrency)
        async with aclosing(engine.run()) as stream:
            async for url in stream:
                yield url
