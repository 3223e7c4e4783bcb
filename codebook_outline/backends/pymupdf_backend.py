"""PyMuPDF-based PDF text extraction: page-ordered plain text with [Page N] markers."""

import logging
import re
from pathlib import Path

import fitz  # PyMuPDF

from codebook_outline.backends.base import TextBackend

log = logging.getLogger(__name__)

TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")
BLANK_LINES_RE = re.compile(r"\n{3,}")
MULTI_SPACE_RE = re.compile(r" {2,}")


def _clean_page_text(text: str) -> str:
    """Drop trailing spaces, cap blank lines at one and collapse space runs."""
    text = TRAILING_SPACE_RE.sub("\n", text)
    text = BLANK_LINES_RE.sub("\n\n", text)
    text = MULTI_SPACE_RE.sub(" ", text)
    return text.strip()


def _page_text(page: fitz.Page) -> str:
    """Join the page's text lines in reading order; each line ends with a newline."""
    parts: list[str] = []
    blocks = page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)["blocks"]
    for block in blocks:
        if "lines" not in block:
            continue
        for line in block["lines"]:
            text = "".join(span.get("text", "") for span in line["spans"])
            if text.strip():
                parts.append(text)
                parts.append("\n")
    return "".join(parts)


class PyMuPDFBackend(TextBackend):
    """Extract text from every page; pages are emitted as '[Page N]\\n<text>' joined by blank lines."""

    suffixes = (".pdf",)

    def extract_text(self, path: Path) -> str:
        path = Path(path)
        pages: list[str] = []
        try:
            doc = fitz.open(path)
        except RuntimeError as e:
            # FileDataError / EmptyFileError for broken or empty PDFs
            raise ValueError(f"Cannot read PDF '{path.name}': {e}") from e
        with doc:
            for page_num in range(len(doc)):
                page_text = _clean_page_text(_page_text(doc[page_num]))
                pages.append(f"[Page {page_num + 1}]\n{page_text}")
            log.info("Extracted %d pages from %s", len(pages), path.name)
        return "\n\n".join(pages)

    @property
    def name(self) -> str:
        return "pymupdf"
