"""Exceptions raised by LinkScout collaborators.

The crawl engine itself absorbs per-address failures; these are surfaced by
the producers and consumers around it.
"""
from __future__ import annotations


class LinkScoutError(Exception):
    """Base class for all LinkScout errors."""


class ChannelClosedError(LinkScoutError):
    """An address was sent through a sender that has already been closed."""


class SearchError(LinkScoutError):
    """The search backend could not be queried or returned unusable data."""


class DownloadError(LinkScoutError):
    """Invoking the recursive downloader failed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class OutputError(LinkScoutError):
    """The output destination could not be opened."""


__all__ = ["LinkScoutError", "ChannelClosedError", "SearchError", "DownloadError", "OutputError"]
