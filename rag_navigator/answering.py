# File: rag_navigator/answering.py
"""Answer questions against indexed site content with an LLM.

The crawler never talks to the model. The session hands the concatenated page
text to any :class:`ContextAnswerer`; :class:`OpenAIAnswerer` is the default,
backed by an OpenAI-compatible chat-completions endpoint. The API key is read
by the SDK from ``OPENAI_API_KEY``.
"""
from __future__ import annotations

import json
from typing import Any, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError, field_validator

from rag_navigator.config import NavigatorConfig
from rag_navigator.logger import get_logger

log = get_logger("answering")

SYSTEM_PROMPT = (
    "You are an expert at answering questions based on provided context. "
    "Reply with a JSON object with two keys: \"answer\" (string) and "
    "\"confidence\" (number from 0 to 1 describing how well the context supports the answer)."
)


class AnswerError(RuntimeError):
    """The model could not produce a usable answer."""


class AnswerResult(BaseModel):
    answer: str
    confidence: float = Field(ge=0.0, le=1.0)

    @field_validator("confidence", mode="before")
    def _clamp(cls, v: Any) -> Any:
        if isinstance(v, (int, float)):
            return min(1.0, max(0.0, float(v)))
        return v


class ContextAnswerer(Protocol):
    async def answer(self, query: str, context: str) -> AnswerResult: ...


def build_messages(query: str, context: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Context: {context}\n\nQuery: {query}\n\nAnswer:"},
    ]


class OpenAIAnswerer:
    """ContextAnswerer using ``openai.AsyncOpenAI`` chat completions in JSON mode."""

    def __init__(self, config: NavigatorConfig, client: Optional[AsyncOpenAI] = None) -> None:
        self.config = config
        if client is None:
            base_url = str(config.llm_base_url) if config.llm_base_url else None
            client = AsyncOpenAI(base_url=base_url, timeout=config.timeout * 6)
        self._client = client

    async def answer(self, query: str, context: str) -> AnswerResult:
        try:
            completion = await self._client.chat.completions.create(
                model=self.config.llm_model,
                messages=build_messages(query, context),
                temperature=self.config.llm_temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            log.error("LLM call failed: %s", exc)
            raise AnswerError(f"LLM call failed: {exc}") from exc

        if not completion.choices:
            raise AnswerError("LLM returned no choices")
        raw = completion.choices[0].message.content or ""
        try:
            result = AnswerResult.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            log.error("Unusable LLM reply %r: %s", raw[:200], exc)
            raise AnswerError(f"LLM reply is not a valid answer: {exc}") from exc
        log.debug("Answer with confidence %.2f", result.confidence)
        return result
