# === FILE: rag_navigator/config.py ===
"""
Loading and validation of the RAG Navigator configuration.
Pydantic describes the schema; YAML or JSON files feed it.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Final, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)

#: Hard cap on the number of page URLs taken from the sitemap tree.
MAX_URLS_TO_INDEX: Final[int] = 50
#: Pause before every page content fetch.
FETCH_DELAY_MS: Final[int] = 250
#: Pause before every sitemap fetch except the root one.
SITEMAP_FETCH_DELAY_MS: Final[int] = 100
#: Shorter pages fall back to the denoised body text.
MIN_CONTENT_LENGTH: Final[int] = 100
DEFAULT_USER_AGENT: Final[str] = "RAGNavigatorBot/1.0"


class NavigatorConfig(BaseModel):
    """Settings for one indexing session."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header and robots.txt agent.")
    max_urls: int = Field(MAX_URLS_TO_INDEX, ge=1, description="Hard limit on page URLs per crawl.")
    fetch_delay: float = Field(FETCH_DELAY_MS / 1000, ge=0, description="Delay before each page fetch (seconds).")
    sitemap_fetch_delay: float = Field(
        SITEMAP_FETCH_DELAY_MS / 1000, ge=0, description="Delay before each non-root sitemap fetch (seconds)."
    )
    timeout: float = Field(10.0, gt=0, description="Timeout for a single request (seconds).")
    retry_times: int = Field(0, ge=0, description="Extra attempts on 5xx/429 and transport errors.")
    respect_robots: bool = Field(True, description="Parse robots.txt and skip disallowed pages.")
    min_content_length: int = Field(MIN_CONTENT_LENGTH, ge=0, description="Below this the denoised body is used.")

    llm_model: str = Field("gpt-4o-mini", min_length=1, description="Chat model used to answer questions.")
    llm_base_url: Optional[HttpUrl] = Field(None, description="OpenAI-compatible endpoint; None = default.")
    llm_temperature: float = Field(0.2, ge=0, le=2)

    @field_validator("user_agent", "llm_model", mode="before")
    def _strip(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> NavigatorConfig:
    """
    Read YAML or JSON and return a validated NavigatorConfig.

    With *path* None, ``configs/default.yaml`` is used when it exists and the
    built-in defaults otherwise. An explicit path that does not exist raises
    FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return NavigatorConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return NavigatorConfig(**data)


__all__ = [
    "NavigatorConfig",
    "load_config",
    "ValidationError",
    "MAX_URLS_TO_INDEX",
    "FETCH_DELAY_MS",
    "SITEMAP_FETCH_DELAY_MS",
    "MIN_CONTENT_LENGTH",
    "DEFAULT_USER_AGENT",
]
