# rag_navigator/crawler/robots.py
"""
robots.txt handling: a rules parser and the gate that turns a site's
robots.txt into an allow/deny decision for page URLs.

The gate fails open. When robots.txt cannot be fetched, is empty, cannot be
parsed, or parsing is switched off, the decision is :class:`RobotsUnavailable`
and every URL is allowed.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, List, Optional, Protocol, Tuple, Union

from rag_navigator.crawler.fetcher import FetchError, Fetcher
from rag_navigator.logger import get_logger
from rag_navigator.utils import request_target, robots_url_for

log = get_logger("robots")


class RobotsRules(Protocol):
    sitemaps: List[str]

    def can_fetch(self, user_agent: str, path: str) -> bool: ...

    def crawl_delay(self, user_agent: str) -> Optional[float]: ...


RulesFactory = Callable[[str], RobotsRules]


@lru_cache(maxsize=256)
def _rule_regex(pattern: str) -> re.Pattern[str]:
    """``*`` matches any run of characters, a trailing ``$`` anchors the end."""
    anchored = pattern.endswith("$")
    body = pattern[:-1] if anchored else pattern
    regex = ".*".join(re.escape(part) for part in body.split("*"))
    return re.compile(regex + ("$" if anchored else ""))


def _specificity(pattern: str) -> int:
    return len(pattern.replace("*", "").replace("$", ""))


@dataclass
class _Group:
    agents: List[str] = field(default_factory=list)
    rules: List[Tuple[bool, str]] = field(default_factory=list)  # (allow, pattern)
    crawl_delay: Optional[float] = None

    @property
    def has_body(self) -> bool:
        return bool(self.rules) or self.crawl_delay is not None

    def allows(self, path: str) -> bool:
        """Longest matching pattern decides; allow beats disallow at equal length."""
        matches = [(_specificity(pattern), allow) for allow, pattern in self.rules if _rule_regex(pattern).match(path)]
        if not matches:
            return True
        return max(matches)[1]


class RobotsTxtRules:
    """
    Parses robots.txt (RFC 9309).

    The group naming the longest prefix of the user-agent applies, else the
    ``*`` group. An empty Disallow allows every path; paths no rule matches
    are allowed. ``Sitemap`` lines are collected regardless of group.
    """

    def __init__(self, text: str) -> None:
        self._groups: List[_Group] = []
        self.sitemaps: List[str] = []
        self._parse(text)

    def can_fetch(self, user_agent: str, path: str) -> bool:
        group = self._group_for(user_agent)
        return True if group is None else group.allows(path)

    def crawl_delay(self, user_agent: str) -> Optional[float]:
        group = self._group_for(user_agent)
        return None if group is None else group.crawl_delay

    def _parse(self, text: str) -> None:
        current: Optional[_Group] = None
        for raw in text.splitlines():
            key, _, value = raw.split("#", 1)[0].partition(":")
            key, value = key.strip().lower(), value.strip()
            if not key:
                continue
            if key == "sitemap":
                if value:
                    self.sitemaps.append(value)
            elif key == "user-agent":
                # consecutive user-agent lines share one group
                if current is None or current.has_body:
                    current = _Group()
                    self._groups.append(current)
                current.agents.append(value.lower())
            elif key in ("allow", "disallow", "crawl-delay"):
                if current is None:
                    current = _Group(agents=["*"])
                    self._groups.append(current)
                if key == "crawl-delay":
                    try:
                        current.crawl_delay = float(value)
                    except ValueError:
                        log.debug("Ignoring bad Crawl-delay value %r", value)
                elif value:
                    current.rules.append((key == "allow", value))

    def _group_for(self, user_agent: str) -> Optional[_Group]:
        ua = user_agent.lower()
        best: Optional[_Group] = None
        best_len = 0
        fallback: Optional[_Group] = None
        for group in self._groups:
            for agent in group.agents:
                if agent == "*":
                    fallback = fallback or group
                elif ua.startswith(agent) and len(agent) > best_len:
                    best, best_len = group, len(agent)
        return best or fallback


@dataclass(frozen=True)
class RobotsAvailable:
    """Parsed rules for the crawler's user-agent."""

    rules: RobotsRules
    user_agent: str

    def is_allowed(self, url: str) -> bool:
        return self.rules.can_fetch(self.user_agent, request_target(url))


@dataclass(frozen=True)
class RobotsUnavailable:
    """No usable rules; everything is allowed."""

    reason: str

    def is_allowed(self, url: str) -> bool:
        return True


RobotsDecision = Union[RobotsAvailable, RobotsUnavailable]


class RobotsGate:
    """Fetches robots.txt once per crawl and resolves it into a RobotsDecision.

    ``rules_factory`` builds a rules object from robots.txt text. Passing None
    means no parser is available: the decision is always RobotsUnavailable.
    """

    def __init__(self, fetcher: Fetcher, user_agent: str, rules_factory: Optional[RulesFactory] = RobotsTxtRules) -> None:
        self.fetcher = fetcher
        self.user_agent = user_agent
        self.rules_factory = rules_factory

    async def resolve(self, site_url: str) -> RobotsDecision:
        robots_url = robots_url_for(site_url)
        text = await self._fetch(robots_url)

        if self.rules_factory is None:
            if text:
                log.warning(
                    "robots.txt fetched from %s but robots parsing is disabled; "
                    "all sitemap URLs will be attempted",
                    robots_url,
                )
            return RobotsUnavailable("robots parsing disabled")

        if not text:
            log.info("robots.txt not found or empty at %s, proceeding without rules", robots_url)
            return RobotsUnavailable("robots.txt unavailable")

        try:
            rules = self.rules_factory(text)
        except Exception as exc:
            log.error("Could not parse robots.txt from %s: %s", robots_url, exc)
            return RobotsUnavailable(f"robots.txt parse error: {exc}")

        log.debug("Loaded robots.txt rules from %s", robots_url)
        self._report(robots_url, rules)
        return RobotsAvailable(rules=rules, user_agent=self.user_agent)

    def _report(self, robots_url: str, rules: RobotsRules) -> None:
        delay = rules.crawl_delay(self.user_agent)
        if delay is not None:
            log.info(
                "robots.txt at %s asks %s for a Crawl-delay of %s s; fixed politeness delays are used instead",
                robots_url,
                self.user_agent,
                delay,
            )
        if rules.sitemaps:
            log.info("robots.txt at %s lists %d sitemap(s): %s", robots_url, len(rules.sitemaps), ", ".join(rules.sitemaps))

    async def _fetch(self, robots_url: str) -> Optional[str]:
        try:
            text = await self.fetcher.get_text(robots_url)
        except FetchError as exc:
            if exc.status is not None:
                log.debug("robots.txt %s -> HTTP %s", robots_url, exc.status)
            else:
                log.warning("Error loading robots.txt %s: %s", robots_url, exc)
            return None
        return text if text.strip() else None


__all__ = [
    "RobotsTxtRules",
    "RobotsRules",
    "RulesFactory",
    "RobotsAvailable",
    "RobotsUnavailable",
    "RobotsDecision",
    "RobotsGate",
]
