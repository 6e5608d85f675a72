"""Recursive download of discovered addresses with the external ``wget`` tool."""

from __future__ import annotations

import asyncio
from typing import Sequence

from aiohttp import ClientError, ClientSession

from link_scout.errors import DownloadError
from link_scout.logger import logger

WGET_ARGS: Sequence[str] = ("--no-check-certificate", "-erobots=off", "-r")


async def is_valid_url(session: ClientSession, url: str) -> bool:
    """HEAD-check *url*, following redirects: True only for a final 2xx answer."""
    try:
        async with session.head(url, allow_redirects=True) as resp:
            return 200 <= resp.status < 300
    except (ClientError, asyncio.TimeoutError, ValueError) as exc:
        logger.debug("HEAD %s failed: %r", url, exc)
        return False


async def wget(url: str, session: ClientSession, executable: str = "wget") -> None:
    """
    Download *url* recursively into the current directory.

    Raises
    ------
    DownloadError
        If the address does not answer a HEAD request with 2xx, the tool is
        missing, or it exits with a non-zero status.
    """
    if not await is_valid_url(session, url):
        raise DownloadError(url, "Invalid URL")

    try:
        proc = await asyncio.create_subprocess_exec(
            executable,
            *WGET_ARGS,
            url,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise DownloadError(url, f"cannot run {executable}: {exc}") from exc

    _, stderr = await proc.communicate()
    if proc.returncode != 0:
        logger.warning("%s failed with status %s: %s", executable, proc.returncode,
                       stderr.decode("utf-8", errors="replace").strip())
        raise DownloadError(url, f"{executable} failed with status {proc.returncode}")
    logger.debug("Downloaded %s", url)


__all__ = ["wget", "is_valid_url", "WGET_ARGS"]
