import json
from pathlib import Path

import pytest

from codebook_outline.models import Chapter

STRUCTURAL_TEXT = """Chapter 5 Structural Design

5.1 Scope
This chapter covers the structural design of buildings.

5.1.2 Basis
Design shall be based on limit states.

5.2 Loads: dead loads shall be determined per 5.2.1 and live loads per Table 4.
5.2.1 Dead Loads
Dead loads include the weight of walls and partitions.

5.3 Combinations
Load combinations shall follow the factored method.
"""

STRUCTURAL_OUTLINE = [
    {
        "number": 5,
        "title": "Structural Design",
        "sections": [
            {"code": "5.1", "title": "Scope"},
            {"code": "5.1.2", "title": "Basis"},
            {"code": "5.2", "title": "Loads"},
            {"code": "5.2.1", "title": "Dead Loads"},
            {"code": "5.3", "title": "Combinations"},
            {"code": "5.9", "title": "Seismic Provisions"},
        ],
    }
]


class FakeLLM:
    """Records calls and returns a canned reply (or raises it when it is an exception)."""

    def __init__(self, reply: str | Exception = ""):
        self.reply = reply
        self.calls: list[dict] = []

    def complete(self, messages, *, model=None, max_tokens=4096, temperature=0.0) -> str:
        self.calls.append({"messages": messages, "max_tokens": max_tokens, "temperature": temperature})
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    @property
    def name(self) -> str:
        return "fake"


@pytest.fixture
def raw_text() -> str:
    return STRUCTURAL_TEXT


@pytest.fixture
def chapters() -> list[Chapter]:
    return [Chapter.model_validate(c) for c in STRUCTURAL_OUTLINE]


@pytest.fixture
def document_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "fire2016"
    folder.mkdir()
    (folder / "outline.json").write_text(json.dumps(STRUCTURAL_OUTLINE), encoding="utf-8")
    (folder / "text.txt").write_text(STRUCTURAL_TEXT, encoding="utf-8")
    return folder


@pytest.fixture
def config_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config and tools files into tmp_path; returns the config file path."""
    config_path = tmp_path / ".codebook_outline.json"
    monkeypatch.setenv("CODEBOOK_OUTLINE_CONFIG", str(config_path))
    monkeypatch.setenv("CODEBOOK_OUTLINE_TOOLS", str(tmp_path / "codebook_tools.py"))
    return config_path
