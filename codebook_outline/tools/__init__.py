"""Single-job tools: one module per tool (outline, read, search, evidence, explain, ask, config)."""

from pathlib import Path
from typing import Optional

from codebook_outline.config import get_default_document_path

NO_DOCUMENT_MESSAGE = (
    "No document path: set a current document (config add-document, config set-current) or pass a path."
)


def resolve_path_or_current(path: Optional[Path]) -> Path:
    """Return path, or the current document folder from config. Raises ValueError if neither."""
    if path is not None:
        return path
    current = get_default_document_path(None)
    if current is None:
        raise ValueError(NO_DOCUMENT_MESSAGE)
    return current
