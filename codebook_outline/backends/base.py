"""Abstract interface for document text extraction backends."""

from abc import ABC, abstractmethod
from pathlib import Path


class TextBackend(ABC):
    """Interface that each text backend must implement."""

    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def extract_text(self, path: Path) -> str:
        """
        Return the raw text of the document at path.

        - No structural markup is added beyond what the source carries
          (PDF backends may insert page markers such as "[Page 3]")
        - Raise OSError (or a subclass) when the file cannot be read
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier (e.g. 'pymupdf')."""
        ...
