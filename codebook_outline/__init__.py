"""
codebook-outline: outline, exact section text and cited evidence for building code documents.

Use as a library:

    from codebook_outline import load_code_document
    doc = load_code_document("codes/fire2016")
    span = doc.locate(doc.find("5.2"))

Or run the CLI:

    codebook-outline read 5.2 codes/fire2016
"""

from codebook_outline.api import CodeDocument, load_code_document
from codebook_outline.evidence import collect_evidence, find_keyword_snippets, find_nearby_section_reference
from codebook_outline.keywords import extract_keywords
from codebook_outline.locate import SectionNotFoundError, locate_section
from codebook_outline.models import Chapter, EvidenceCandidate, HeadingEntry, OutlineNode, SectionSpan
from codebook_outline.normalize import NormalizedViewCache, build_normalized_view
from codebook_outline.outline import build_chapter_tree, build_outline, get_section_level
from codebook_outline.search import find_best_match, score_match

__all__ = [
    "CodeDocument",
    "load_code_document",
    "Chapter",
    "HeadingEntry",
    "OutlineNode",
    "SectionSpan",
    "EvidenceCandidate",
    "SectionNotFoundError",
    "NormalizedViewCache",
    "build_normalized_view",
    "get_section_level",
    "build_chapter_tree",
    "build_outline",
    "locate_section",
    "extract_keywords",
    "collect_evidence",
    "find_keyword_snippets",
    "find_nearby_section_reference",
    "score_match",
    "find_best_match",
]
