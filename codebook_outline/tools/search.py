"""
Search tool: best document/chapter/section for a query across all registered documents.
"""

from pathlib import Path
from typing import Dict, List, Optional

from codebook_outline.config import get_all_document_paths
from codebook_outline.core import load_outline
from codebook_outline.models import Chapter, SearchTarget
from codebook_outline.path_utils import resolve_document_paths
from codebook_outline.search import find_best_match


def load_corpus(paths: Dict[str, Path]) -> Dict[str, List[Chapter]]:
    """Outlines of the given documents (name -> chapters). Text is not loaded."""
    corpus = {}
    for name, path in paths.items():
        outline_path, _ = resolve_document_paths(path)
        corpus[name] = load_outline(outline_path)
    return corpus


def run(query: str = "", paths: Optional[Dict[str, Path]] = None) -> Optional[SearchTarget]:
    """Search paths (default: every registered document). Returns None when nothing matches."""
    if paths is None:
        paths = get_all_document_paths()
    return find_best_match(load_corpus(paths), query)
