"""Text backends: each turns a document file into raw text for the outline engine."""

from pathlib import Path

from codebook_outline.backends.base import TextBackend
from codebook_outline.backends.plain_text_backend import PlainTextBackend

__all__ = ["TextBackend", "PlainTextBackend", "get_backend", "get_backend_for"]


def _pymupdf_backend() -> type[TextBackend]:
    # PyMuPDF is imported on first PDF
    from codebook_outline.backends.pymupdf_backend import PyMuPDFBackend

    return PyMuPDFBackend


REGISTRY = {
    "text": lambda: PlainTextBackend,
    "pymupdf": _pymupdf_backend,
}

SUFFIX_BACKENDS = {
    ".txt": "text",
    ".md": "text",
    ".pdf": "pymupdf",
}


def get_backend(name: str) -> type[TextBackend]:
    """Return backend class for the given name. Raises KeyError if unknown."""
    if name not in REGISTRY:
        raise KeyError(f"Unknown backend: {name}. Available: {list(REGISTRY)}")
    return REGISTRY[name]()


def get_backend_for(path: Path) -> type[TextBackend]:
    """Return the backend class for a file, chosen by suffix. Raises KeyError if unsupported."""
    suffix = Path(path).suffix.lower()
    if suffix not in SUFFIX_BACKENDS:
        raise KeyError(f"No text backend for '{suffix}' files. Supported: {sorted(SUFFIX_BACKENDS)}")
    return get_backend(SUFFIX_BACKENDS[suffix])
