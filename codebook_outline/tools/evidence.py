"""
Evidence tool: keywords and ranked evidence snippets for a question in one document.
"""

from pathlib import Path
from typing import List, Optional

from codebook_outline.core import load_document
from codebook_outline.evidence import collect_evidence
from codebook_outline.keywords import extract_keywords
from codebook_outline.models import EvidenceCandidate
from codebook_outline.tools import resolve_path_or_current


def run(path: Optional[Path] = None, question: str = "", max_results: int = 6) -> tuple[List[str], List[EvidenceCandidate]]:
    """Resolve path (or current document); return (keywords, evidence) for question."""
    _, raw_text = load_document(resolve_path_or_current(path))
    keywords = extract_keywords(question)
    return keywords, collect_evidence(raw_text, keywords, max_results=max_results)
