# File: tests/test_utils.py
import pytest

from rag_navigator.utils import normalize_page_url, request_target, robots_url_for


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("HTTPS://Example.COM", "https://example.com/"),
        ("https://x.com:443/a", "https://x.com/a"),
        ("http://x.com:80/", "http://x.com/"),
        ("http://x.com:443/", "http://x.com:443/"),
        ("https://x.com:8443/a?b=1#c", "https://x.com:8443/a?b=1#c"),
        ("  https://x.com/path  ", "https://x.com/path"),
        ("https://user:pw@x.com:443/", "https://user:pw@x.com/"),
    ],
)
def test_normalize_page_url(raw, expected):
    assert normalize_page_url(raw) == expected


@pytest.mark.parametrize("raw", ["", "javascript:void(0)", "mailto:a@b.c", "/relative/path", "https://", "https://x.com:99999/"])
def test_normalize_page_url_rejects(raw):
    with pytest.raises(ValueError):
        normalize_page_url(raw)


def test_robots_helpers():
    assert robots_url_for("https://x.com:8443/sitemaps/s.xml?x=1") == "https://x.com:8443/robots.txt"
    assert request_target("https://x.com") == "/"
    assert request_target("https://x.com/a/b?c=d#frag") == "/a/b?c=d"
