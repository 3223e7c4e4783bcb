"""OpenRouter chat backend: the OpenAI SDK pointed at https://openrouter.ai/api/v1."""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from openai import OpenAI

from codebook_outline.llm.base import Message

log = logging.getLogger(__name__)

DEFAULT_OPENROUTER_MODEL = "openai/gpt-4o-mini"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Shown on openrouter.ai usage pages
APP_HEADERS = {"X-Title": "codebook-outline"}

MODEL_ENV_VARS = ("OPENROUTER_MODEL", "CODEBOOK_OUTLINE_LLM_MODEL")


def _load_env_file() -> None:
    """Load the first .env found in cwd or the repo root (OPENROUTER_API_KEY usually lives there)."""
    for path in (Path.cwd() / ".env", Path(__file__).resolve().parents[2] / ".env"):
        if path.is_file():
            load_dotenv(path)
            return


def _model_from_env() -> str | None:
    for var in MODEL_ENV_VARS:
        if os.environ.get(var):
            return os.environ[var]
    return None


class OpenRouterBackend:
    """
    Model precedence: the per-call model, then default_model (from codebook_tools.py via
    get_client), then OPENROUTER_MODEL / CODEBOOK_OUTLINE_LLM_MODEL, then gpt-4o-mini.
    The HTTP client is created on the first request, so building a backend never needs a key.
    """

    def __init__(self, api_key: str | None = None, base_url: str | None = None, default_model: str | None = None):
        _load_env_file()
        self._api_key = api_key or os.environ.get("OPENROUTER_API_KEY", "")
        self._base_url = base_url or OPENROUTER_BASE_URL
        self._default_model = default_model or _model_from_env() or DEFAULT_OPENROUTER_MODEL
        self._client: Any = None

    @property
    def name(self) -> str:
        return "openrouter"

    @property
    def default_model(self) -> str:
        return self._default_model

    def _openai(self) -> OpenAI:
        if self._client is None:
            if not self._api_key:
                raise ValueError("OPENROUTER_API_KEY is not set (environment or .env); or pass api_key=...")
            self._client = OpenAI(base_url=self._base_url, api_key=self._api_key, default_headers=APP_HEADERS)
        return self._client

    def complete(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> str:
        model = model or self._default_model
        log.debug("openrouter: %s, %d message(s)", model, len(messages))
        try:
            resp = self._openai().chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            log.warning("openrouter: request to %s failed: %s", model, e)
            raise
        if not resp.choices or not resp.choices[0].message.content:
            return ""
        return resp.choices[0].message.content.strip()
