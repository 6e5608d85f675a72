# File: tests/test_resolver.py
import pytest

from link_scout.crawler.resolver import resolve_url


@pytest.mark.parametrize(
    "href,base,expected",
    [
        ("/x", "https://h/a/b", "https://h/x"),
        ("x", "https://h/a/b", "https://h/a/x"),
        ("https://other/y", "https://h/a/b", "https://other/y"),
        ("//cdn.example/lib.js", "https://h/a/b", "https://cdn.example/lib.js"),
        ("?page=2", "https://h/a/b", "https://h/a/b?page=2"),
        ("#top", "https://h/a/b", "https://h/a/b#top"),
        ("../c", "https://h/a/b/", "https://h/a/c"),
        ("  /padded  ", "https://h/a/b", "https://h/padded"),
    ],
)
def test_resolve_relative_forms(href, base, expected):
    assert resolve_url(href, base) == expected


def test_absolute_href_ignores_base():
    assert resolve_url("https://other/y", "not a url at all") == "https://other/y"


@pytest.mark.parametrize("base", ["", "relative/path", "www.example.com/page"])
def test_unparseable_base_returns_href(base):
    assert resolve_url("x", base) == "x"


def test_bad_base_never_raises():
    # unbalanced IPv6 bracket makes urlsplit raise ValueError
    assert resolve_url("/x", "http://[::1/page") == "/x"


def test_no_normalisation():
    assert resolve_url("/a/", "https://h/") != resolve_url("/a", "https://h/")
    assert resolve_url("/A", "https://h/") == "https://h/A"


def test_fallback_keeps_href_verbatim():
    assert resolve_url("  x  ", "relative/path") == "  x  "
    assert resolve_url(" /x", "http://[::1/page") == " /x"
