"""
Resolution of links found on a page into absolute addresses.
"""
from __future__ import annotations

from urllib.parse import urljoin, urlsplit


def resolve_url(href: str, base_url: str) -> str:
    """
    Join *href* onto *base_url* following RFC 3986 reference resolution.

    Surrounding whitespace is dropped before joining. Falls back to *href*
    unchanged, whitespace included, when *base_url* is not an absolute address
    or the join fails. No normalisation is applied to the result: addresses
    differing only by trailing slash, case or default port stay distinct.
    """
    try:
        base = urlsplit(base_url)
        if not base.scheme:
            return href
        return urljoin(base_url, href.strip())
    except ValueError:
        return href


__all__ = ["resolve_url"]
