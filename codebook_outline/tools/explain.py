"""
Explain tool: section text plus summary (LLM, or local fallback) for a section query.
"""

from pathlib import Path
from typing import Optional

from codebook_outline.core import load_document
from codebook_outline.explain import explain_section
from codebook_outline.llm import LLMBackend
from codebook_outline.models import SectionExplanation
from codebook_outline.outline import build_outline, find_node
from codebook_outline.tools import resolve_path_or_current


def run(
    path: Optional[Path] = None,
    query: str = "",
    use_llm: bool = True,
    client: Optional[LLMBackend] = None,
) -> SectionExplanation:
    """Raises ValueError if no outline node matches query."""
    chapters, raw_text = load_document(resolve_path_or_current(path))
    outlines, _ = build_outline(chapters)
    node = find_node(outlines, query)
    if node is None:
        raise ValueError(f"No section found matching '{query}'")
    return explain_section(node, raw_text, client=client, use_llm=use_llm)
