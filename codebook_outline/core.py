"""
Minimal shared primitives for loading code documents (outline + raw text).
No CLI, no Typer. Used by the tool modules and the public API.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from codebook_outline.backends import get_backend_for
from codebook_outline.models import Chapter
from codebook_outline.normalize import BoundedCache
from codebook_outline.path_utils import resolve_document_paths

log = logging.getLogger(__name__)

_CHAPTERS = TypeAdapter(list[Chapter])


class DocumentTextCache(BoundedCache[str]):
    """Extracted document text keyed by resolved file path (PDF extraction is slow)."""


def parse_outline(data: Any) -> list[Chapter]:
    """Validate outline data: a list of chapters, or {"chapters": [...]}."""
    if isinstance(data, dict):
        data = data.get("chapters", [])
    return _CHAPTERS.validate_python(data)


def load_outline(outline_path: Path) -> list[Chapter]:
    """Load and validate a document outline from JSON."""
    with open(outline_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    chapters = parse_outline(data)
    log.debug("Loaded %d chapters from %s", len(chapters), outline_path)
    return chapters


def load_document_text(text_path: Path, cache: DocumentTextCache | None = None) -> str:
    """Extract raw text with the backend for the file's suffix, through cache when given."""
    text_path = Path(text_path).resolve()

    def _extract() -> str:
        backend = get_backend_for(text_path)()
        log.info("Extracting text from %s (%s backend)", text_path.name, backend.name)
        return backend.extract_text(text_path)

    if cache is None:
        return _extract()
    return cache.get_or_create(str(text_path), _extract)


def load_document(path: Path, cache: DocumentTextCache | None = None) -> tuple[list[Chapter], str]:
    """Resolve a document path and load (chapters, raw text)."""
    outline_path, text_path = resolve_document_paths(path)
    return load_outline(outline_path), load_document_text(text_path, cache)
