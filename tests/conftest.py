# File: tests/conftest.py
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Tuple, Union

import pytest
import pytest_asyncio
from aiohttp import web

from rag_navigator.config import NavigatorConfig
from rag_navigator.logger import LOGGER_NAME

XML = "application/xml"
HTML = "text/html"
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


def urlset(*locs: str) -> str:
    """Leaf sitemap listing *locs*."""
    entries = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{entries}</urlset>'


def sitemapindex(*locs: str) -> str:
    """Sitemap index listing *locs*."""
    entries = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="{SITEMAP_NS}">{entries}</sitemapindex>'


class FakeSite:
    """In-memory website served by aiohttp; unknown paths answer 404."""

    def __init__(self) -> None:
        self.base = ""
        self.pages: Dict[str, Tuple[int, Union[str, bytes], str]] = {}
        self.failures: Dict[str, List[int]] = {}
        self.hits: List[str] = []
        self.user_agents: List[Optional[str]] = []

    def url(self, path: str) -> str:
        return f"{self.base}{path}"

    def add(self, path: str, body: Union[str, bytes], *, status: int = 200, content_type: str = HTML) -> str:
        """Serve *body* at *path*; bytes are sent as-is, *content_type* may carry a charset."""
        self.pages[path] = (status, body, content_type)
        return self.url(path)

    def fail_first(self, path: str, *statuses: int) -> None:
        """Answer the next requests for *path* with *statuses*, in order, before the page itself."""
        self.failures.setdefault(path, []).extend(statuses)

    def hit_count(self, path: str) -> int:
        return self.hits.count(path)

    async def handle(self, request: web.Request) -> web.Response:
        self.hits.append(request.path)
        self.user_agents.append(request.headers.get("User-Agent"))
        pending = self.failures.get(request.path)
        if pending:
            return web.Response(status=pending.pop(0), text="try again")
        entry = self.pages.get(request.path)
        if entry is None:
            return web.Response(status=404, text="not found")
        status, body, content_type = entry
        if isinstance(body, bytes):
            return web.Response(status=status, body=body, headers={"Content-Type": content_type})
        return web.Response(status=status, text=body, content_type=content_type)


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def fake_site(unused_tcp_port: int) -> AsyncIterator[FakeSite]:
    site = FakeSite()
    app = web.Application()
    app.router.add_route("GET", "/{tail:.*}", site.handle)
    async for base in _serve_app(app, unused_tcp_port):
        site.base = base
        yield site


@pytest.fixture()
def fast_config() -> NavigatorConfig:
    """Config without politeness delays so crawls finish quickly."""
    return NavigatorConfig(
        user_agent="TestAgent/1.0",
        fetch_delay=0,
        sitemap_fetch_delay=0,
        timeout=2.0,
    )


@pytest.fixture()
def delay_recorder():
    """Async stand-in for polite_delay that records requested pauses instead of sleeping."""
    calls: List[float] = []

    async def record(seconds: float) -> None:
        calls.append(seconds)

    record.calls = calls  # type: ignore[attr-defined]
    return record


@pytest.fixture()
def project_log(caplog):
    """caplog wired to the project logger, which does not propagate to root."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    yield caplog
    lg.removeHandler(caplog.handler)
