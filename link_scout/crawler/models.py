"""
Data models for the LinkScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Fetched address and the absolute child addresses found on it, in document order."""

    url: str
    children: List[str] = field(default_factory=list)
