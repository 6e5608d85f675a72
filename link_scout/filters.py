"""Traversal filters deciding whether a page's children are followed."""
from __future__ import annotations

from typing import Iterable, Tuple


class PatternFilter:
    """Expand an address when it contains any of the configured substrings.

    Patterns are OR-combined; with no patterns nothing is expanded, so only
    the seeds themselves are fetched.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns: Tuple[str, ...] = tuple(patterns)

    def __call__(self, url: str) -> bool:
        return any(pattern in url for pattern in self.patterns)

    def __repr__(self) -> str:
        return f"<PatternFilter patterns={list(self.patterns)}>"


def expand_all(url: str) -> bool:
    """Follow every link."""
    return True


def expand_none(url: str) -> bool:
    """Never follow links: only the seeds are fetched."""
    return False


__all__ = ["PatternFilter", "expand_all", "expand_none"]
