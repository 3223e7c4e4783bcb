"""
Read tool: exact text of a section, found by code or title query. Independent, atomic.
"""

from pathlib import Path
from typing import Optional

from codebook_outline.core import load_document
from codebook_outline.locate import locate_section
from codebook_outline.models import OutlineNode, SectionSpan
from codebook_outline.outline import build_outline, find_node
from codebook_outline.tools import resolve_path_or_current


def run(path: Optional[Path] = None, query: str = "") -> tuple[OutlineNode, SectionSpan]:
    """
    Resolve path (or current document), find the first outline node matching query and
    locate its text. Raises ValueError if no node matches; SectionNotFoundError if the
    node's heading does not occur in the document text.
    """
    chapters, raw_text = load_document(resolve_path_or_current(path))
    outlines, _ = build_outline(chapters)
    node = find_node(outlines, query)
    if node is None:
        raise ValueError(f"No section found matching '{query}'")
    return node, locate_section(node, raw_text)
