"""
Outline tool: list the outline tree of a code document. Independent, atomic.
"""

from pathlib import Path
from typing import List, Optional

from codebook_outline.core import load_outline
from codebook_outline.outline import build_outline, filter_chapters, list_outline
from codebook_outline.path_utils import resolve_document_paths
from codebook_outline.tools import resolve_path_or_current


def run(path: Optional[Path] = None, depth: int = 2, term: str = "") -> List[str]:
    """Resolve path (or current document from config), build the outline, return formatted lines (filtered by term)."""
    outline_path, _ = resolve_document_paths(resolve_path_or_current(path))
    chapters, _ = build_outline(load_outline(outline_path))
    return list_outline(filter_chapters(chapters, term), max_depth=depth)
