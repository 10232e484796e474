# File: rag_navigator/utils.py
"""rag_navigator.utils: URL helpers and the politeness pause shared by the crawler."""

from __future__ import annotations

import asyncio
from typing import Sequence
from urllib.parse import urlsplit, urlunsplit

from rag_navigator.logger import logger

__all__: Sequence[str] = (
    "normalize_page_url",
    "origin_of",
    "robots_url_for",
    "request_target",
    "polite_delay",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_page_url(url: str) -> str:
    """Validate an http(s) URL and return it in canonical form.

    Scheme and host are lower-cased, the scheme's default port is dropped and
    an empty path becomes ``/``; query and fragment are kept. Raises ValueError when the URL cannot be fetched.
    """
    raw = url.strip()
    if not raw:
        raise ValueError("empty URL")
    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as exc:
        raise ValueError(str(exc)) from exc
    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise ValueError(f"unsupported scheme {parts.scheme!r}" if scheme else "missing scheme")
    host = (parts.hostname or "").lower()
    if not host:
        raise ValueError("missing host")

    netloc = host
    if ":" in host:
        netloc = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    if parts.username or parts.password:
        userinfo = parts.username or ""
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    normalized = urlunsplit((scheme, netloc, parts.path or "/", parts.query, parts.fragment))
    logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def origin_of(url: str) -> str:
    """``scheme://netloc`` part of *url*."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, "", "", ""))


def robots_url_for(url: str) -> str:
    return f"{origin_of(url)}/robots.txt"


def request_target(url: str) -> str:
    """Path plus query, the part of a URL robots.txt rules are matched against."""
    parts = urlsplit(url)
    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


async def polite_delay(seconds: float) -> None:
    """Pause before the next outbound request; zero or negative means no pause."""
    if seconds > 0:
        await asyncio.sleep(seconds)
