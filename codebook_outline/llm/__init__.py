"""
Chat models for section summaries and code Q&A.

    from codebook_outline.llm import get_client, build_messages

    client = get_client(tool="summary")   # model from codebook_tools.py
    text = client.complete(build_messages("Section text: ...", system="Summarize for engineers."))

Callers (explain_section, answer_question) also take a client argument, so any
LLMBackend can be passed in instead.
"""

import os
from typing import Any, Callable

from codebook_outline.llm.base import LLMBackend, Message, build_messages
from codebook_outline.llm.openrouter import OpenRouterBackend

__all__ = ["LLMBackend", "Message", "OpenRouterBackend", "build_messages", "get_client", "PROVIDERS"]

PROVIDERS: dict[str, Callable[..., LLMBackend]] = {
    "openrouter": OpenRouterBackend,
}


def get_client(provider: str | None = None, model: str | None = None, tool: str | None = None, **kwargs: Any) -> LLMBackend:
    """
    Backend for a tool. model wins; otherwise the tool's model from codebook_tools.py
    (see config.get_llm_model). provider defaults to CODEBOOK_OUTLINE_LLM_PROVIDER or openrouter.
    Extra kwargs (api_key, base_url) go to the backend.
    """
    from codebook_outline.config import get_llm_model

    name = provider or os.environ.get("CODEBOOK_OUTLINE_LLM_PROVIDER", "openrouter")
    if name not in PROVIDERS:
        raise KeyError(f"Unknown LLM provider: {name}. Available: {list(PROVIDERS)}")
    return PROVIDERS[name](default_model=model or get_llm_model(tool), **kwargs)
