"""
"Jump to best match" navigation across a corpus of code documents.

Every document, chapter and section label is scored against the query with tiered
string matching plus a per-level boost; the single highest score wins and ties keep
the first candidate seen. Candidates whose label does not match at all (and, for
sections, whose code is not the one named in the query) get no boost and score 0.
"""

import re
from typing import Iterable, Mapping

from codebook_outline.models import Chapter, SearchTarget
from codebook_outline.normalize import normalize_search_text

SECTION_CODE_IN_QUERY_RE = re.compile(r"\b\d+(?:\.\d+)+\b", re.ASCII)

SCORE_EXACT = 200
SCORE_PREFIX = 130
SCORE_CONTAINS = 80

DOCUMENT_BOOST = 40
CHAPTER_BOOST = 70
SECTION_BOOST = 90
SECTION_CODE_BOOST = 120


def score_match(label: str | None, term: str) -> int:
    """200 for equality, 130 when label starts with term, 80 when it contains it, else 0 (both normalized)."""
    normalized = normalize_search_text(label)
    term = normalize_search_text(term)
    if not normalized or not term:
        return 0
    if normalized == term:
        return SCORE_EXACT
    if normalized.startswith(term):
        return SCORE_PREFIX
    if term in normalized:
        return SCORE_CONTAINS
    return 0


def detect_section_code(query: str | None) -> str:
    """First dotted number in the query ('see 10.2.3 exits' -> '10.2.3'), or ''."""
    match = SECTION_CODE_IN_QUERY_RE.search(str(query or ""))
    return match.group(0) if match else ""


def _boosted(score: int, boost: int) -> int:
    return score + boost if score > 0 else 0


def _is_exact(target: SearchTarget, term: str) -> bool:
    chapter_label = f"chapter {target.chapter_number}" if target.chapter_number is not None else ""
    section_label = f"{target.section_code} {target.section_title}".strip()
    values = [target.document, chapter_label, section_label, target.section_code, target.section_title]
    return any(normalize_search_text(v) == term for v in values if normalize_search_text(v))


def find_best_match(corpus: Mapping[str, Iterable[Chapter]], query: str) -> SearchTarget | None:
    """
    Best document/chapter/section for query across corpus (document name -> chapters).
    Returns None for a blank query or when no candidate scores above zero.
    """
    raw_query = (query or "").strip()
    term = normalize_search_text(raw_query)
    if not term:
        return None
    section_code = normalize_search_text(detect_section_code(raw_query))

    best: SearchTarget | None = None

    def _consider(score: int, **fields) -> None:
        nonlocal best
        if score > 0 and (best is None or score > best.score):
            best = SearchTarget(score=score, term=raw_query, **fields)

    for name, chapters in corpus.items():
        _consider(_boosted(score_match(name, term), DOCUMENT_BOOST), document=name)
        for chapter in chapters:
            _consider(
                _boosted(score_match(f"Chapter {chapter.number} {chapter.title}", term), CHAPTER_BOOST),
                document=name,
                chapter_number=chapter.number,
            )
            for section in chapter.sections:
                label = f"{section.code or ''} {section.title or ''}".strip()
                score = score_match(label, term)
                if section_code and section.code and normalize_search_text(section.code) == section_code:
                    score += SECTION_CODE_BOOST
                score = _boosted(score, SECTION_BOOST)
                _consider(
                    score,
                    document=name,
                    chapter_number=chapter.number,
                    section_code=section.code or "",
                    section_title=section.title or "",
                )

    if best is None or best.score <= 0:
        return None
    best.exact_match = _is_exact(best, term)
    return best
