# File: tests/test_downloader.py
from __future__ import annotations

import sys
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import ClientSession, web

from conftest import serve_app
from link_scout.downloader import WGET_ARGS, is_valid_url, wget
from link_scout.errors import DownloadError


@pytest_asyncio.fixture
async def file_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def ok(_):
        return web.Response(text="<h1>ok</h1>", content_type="text/html")

    async def moved(_):
        raise web.HTTPFound("/ok")

    async def moved_away(_):
        raise web.HTTPFound("/missing")

    app.router.add_get("/ok", ok)
    app.router.add_get("/moved", moved)
    app.router.add_get("/moved-away", moved_away)
    async for url in serve_app(app, unused_tcp_port):
        yield url


def fake_tool(tmp_path: Path, exit_code: int) -> str:
    """Executable that records its arguments and exits with *exit_code*."""
    script = tmp_path / "fake-wget"
    script.write_text(
        f"#!{sys.executable}\n"
        "import sys, pathlib\n"
        "pathlib.Path(__file__).with_suffix('.args').write_text('\\n'.join(sys.argv[1:]))\n"
        "sys.stderr.write('simulated failure')\n"
        f"sys.exit({exit_code})\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    return str(script)


@pytest.mark.asyncio()
async def test_is_valid_url(file_server: str):
    async with ClientSession() as session:
        assert await is_valid_url(session, f"{file_server}/ok")
        assert await is_valid_url(session, f"{file_server}/moved")
        assert not await is_valid_url(session, f"{file_server}/moved-away")
        assert not await is_valid_url(session, f"{file_server}/missing")
        assert not await is_valid_url(session, "not a url")


@pytest.mark.asyncio()
async def test_wget_invokes_tool(file_server: str, tmp_path: Path):
    tool = fake_tool(tmp_path, 0)
    async with ClientSession() as session:
        await wget(f"{file_server}/ok", session, executable=tool)

    args = (tmp_path / "fake-wget.args").read_text().splitlines()
    assert args == [*WGET_ARGS, f"{file_server}/ok"]


@pytest.mark.asyncio()
async def test_wget_nonzero_exit_raises(file_server: str, tmp_path: Path):
    tool = fake_tool(tmp_path, 4)
    async with ClientSession() as session:
        with pytest.raises(DownloadError, match="status 4"):
            await wget(f"{file_server}/ok", session, executable=tool)


@pytest.mark.asyncio()
async def test_wget_rejects_invalid_url(file_server: str, tmp_path: Path):
    tool = fake_tool(tmp_path, 0)
    async with ClientSession() as session:
        with pytest.raises(DownloadError, match="Invalid URL"):
            await wget(f"{file_server}/missing", session, executable=tool)
    assert not (tmp_path / "fake-wget.args").exists()


@pytest.mark.asyncio()
async def test_wget_missing_tool(file_server: str, tmp_path: Path):
    async with ClientSession() as session:
        with pytest.raises(DownloadError, match="cannot run"):
            await wget(f"{file_server}/ok", session, executable=str(tmp_path / "no-such-tool"))


@pytest.mark.asyncio()
async def test_wget_follows_redirect_before_download(file_server: str, tmp_path: Path):
    tool = fake_tool(tmp_path, 0)
    async with ClientSession() as session:
        await wget(f"{file_server}/moved", session, executable=tool)

    args = (tmp_path / "fake-wget.args").read_text().splitlines()
    assert args[-1] == f"{file_server}/moved"
