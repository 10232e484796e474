# File: tests/test_engine.py
# Session facade and the OpenAI-backed answerer, without network access
from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from conftest import XML, urlset
from rag_navigator.answering import AnswerError, AnswerResult, OpenAIAnswerer, build_messages
from rag_navigator.config import NavigatorConfig
from rag_navigator.crawler.models import CrawlResult
from rag_navigator.engine import CONTEXT_SEPARATOR, NavigatorSession, NoIndexedContentError, start_query


class FakeCrawler:
    """Stands in for SitemapCrawler; returns queued results in order."""

    results: list = []
    runs: list = []

    def __init__(self, config):
        self.config = config

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None

    async def run(self, sitemap_url):
        FakeCrawler.runs.append(sitemap_url)
        return FakeCrawler.results.pop(0)


class FakeAnswerer:
    def __init__(self, answer="An answer", confidence=0.8):
        self.calls = []
        self.result = AnswerResult(answer=answer, confidence=confidence)

    async def answer(self, query, context):
        self.calls.append((query, context))
        return self.result


def crawled(pages: dict, errors=()):
    return CrawlResult(indexed_urls=list(pages), errors=list(errors), contents=dict(pages))


@pytest.fixture()
def session():
    FakeCrawler.results = []
    FakeCrawler.runs = []
    return NavigatorSession(NavigatorConfig(), answerer=FakeAnswerer(), crawler_factory=FakeCrawler)


# --------------------------------------------------------------------------- #
#                               Session                                       #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_index_stores_content_in_order(session):
    FakeCrawler.results.append(crawled({"https://a.test/1": "one", "https://a.test/2": "two"}))

    result = await session.index("https://a.test/sitemap.xml")

    assert FakeCrawler.runs == ["https://a.test/sitemap.xml"]
    assert session.last_result is result
    assert session.indexed_urls == ["https://a.test/1", "https://a.test/2"]
    assert session.context() == f"one{CONTEXT_SEPARATOR}two"
    assert CONTEXT_SEPARATOR == "\n\n---\n\n"


@pytest.mark.asyncio()
async def test_content_map_is_read_only(session):
    FakeCrawler.results.append(crawled({"https://a.test/1": "one"}))
    await session.index("https://a.test/sitemap.xml")

    with pytest.raises(TypeError):
        session.content_map["https://a.test/x"] = "x"  # type: ignore[index]


@pytest.mark.asyncio()
async def test_reindex_replaces_content(session):
    FakeCrawler.results.append(crawled({"https://a.test/1": "one"}))
    FakeCrawler.results.append(crawled({"https://b.test/1": "uno"}))

    await session.index("https://a.test/sitemap.xml")
    await session.index("https://b.test/sitemap.xml")

    assert dict(session.content_map) == {"https://b.test/1": "uno"}


@pytest.mark.asyncio()
async def test_ask_passes_context_and_lists_sources(session):
    FakeCrawler.results.append(crawled({"https://a.test/1": "one", "https://a.test/2": "two"}))
    await session.index("https://a.test/sitemap.xml")

    answer = await session.ask("What?")

    assert session.answerer.calls == [("What?", f"one{CONTEXT_SEPARATOR}two")]
    assert answer.to_dict() == {
        "answer": "An answer",
        "confidence": 0.8,
        "sources": ["https://a.test/1", "https://a.test/2"],
    }


@pytest.mark.asyncio()
async def test_ask_before_index(session):
    with pytest.raises(NoIndexedContentError):
        await session.ask("What?")
    assert session.answerer.calls == []


@pytest.mark.asyncio()
async def test_ask_after_empty_crawl(session):
    FakeCrawler.results.append(CrawlResult.failed("Failed to parse sitemap(s): boom"))
    await session.index("https://a.test/sitemap.xml")

    with pytest.raises(NoIndexedContentError):
        await session.ask("What?")


@pytest.mark.asyncio()
async def test_ask_blank_query(session):
    FakeCrawler.results.append(crawled({"https://a.test/1": "one"}))
    await session.index("https://a.test/sitemap.xml")

    with pytest.raises(ValueError):
        await session.ask("  ")


@pytest.mark.asyncio()
async def test_reset(session):
    FakeCrawler.results.append(crawled({"https://a.test/1": "one"}))
    await session.index("https://a.test/sitemap.xml")

    session.reset()

    assert session.indexed_urls == []
    assert session.last_result is None
    with pytest.raises(NoIndexedContentError):
        await session.ask("What?")


@pytest.mark.asyncio()
async def test_start_query_on_local_site(fast_config, fake_site):
    fake_site.add("/page", "<body><article>Opening hours are nine to five.</article></body>")
    fake_site.add("/sitemap.xml", urlset(fake_site.url("/page")), content_type=XML)
    answerer = FakeAnswerer(answer="Nine to five")

    result, answer = await start_query(fast_config, fake_site.url("/sitemap.xml"), "When open?", answerer)

    assert result.indexed_urls == [fake_site.url("/page")]
    assert answer.answer == "Nine to five"
    assert answer.sources == [fake_site.url("/page")]
    assert answerer.calls == [("When open?", "Opening hours are nine to five.")]


# --------------------------------------------------------------------------- #
#                              OpenAI answerer                                #
# --------------------------------------------------------------------------- #


class FakeCompletions:
    def __init__(self, content=None, error=None, choices=True):
        self.content = content
        self.error = error
        self.choices = choices
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        if not self.choices:
            return SimpleNamespace(choices=[])
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_build_messages():
    messages = build_messages("Why?", "Because.")
    assert messages[0]["role"] == "system"
    assert messages[1] == {"role": "user", "content": "Context: Because.\n\nQuery: Why?\n\nAnswer:"}


@pytest.mark.asyncio()
async def test_openai_answerer_request_and_reply():
    completions = FakeCompletions(json.dumps({"answer": "Yes", "confidence": 0.75}))
    config = NavigatorConfig(llm_model="test-model", llm_temperature=0.0)

    result = await OpenAIAnswerer(config, client=fake_client(completions)).answer("Q?", "ctx")

    assert result == AnswerResult(answer="Yes", confidence=0.75)
    assert completions.kwargs["model"] == "test-model"
    assert completions.kwargs["temperature"] == 0.0
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["messages"] == build_messages("Q?", "ctx")


@pytest.mark.asyncio()
@pytest.mark.parametrize("raw,expected", [(1.7, 1.0), (-0.2, 0.0), (1, 1.0)])
async def test_confidence_is_clamped(raw, expected):
    completions = FakeCompletions(json.dumps({"answer": "A", "confidence": raw}))
    result = await OpenAIAnswerer(NavigatorConfig(), client=fake_client(completions)).answer("Q", "C")
    assert result.confidence == expected


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "completions",
    [
        FakeCompletions("not json"),
        FakeCompletions(json.dumps({"answer": "A"})),
        FakeCompletions(json.dumps({"confidence": 0.5})),
        FakeCompletions(choices=False),
        FakeCompletions(error=APIConnectionError(request=httpx.Request("POST", "https://llm.test/v1"))),
    ],
)
async def test_unusable_replies_raise_answer_error(completions):
    with pytest.raises(AnswerError):
        await OpenAIAnswerer(NavigatorConfig(), client=fake_client(completions)).answer("Q", "C")
