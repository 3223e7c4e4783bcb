"""Plain-text backend: documents already extracted to .txt or .md."""

from pathlib import Path

from codebook_outline.backends.base import TextBackend


class PlainTextBackend(TextBackend):
    suffixes = (".txt", ".md")

    def extract_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8", errors="replace")

    @property
    def name(self) -> str:
        return "text"
