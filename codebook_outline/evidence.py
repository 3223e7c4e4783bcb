"""
Evidence snippets for questions over a code document's raw text.

Each keyword (in order) contributes at most one snippet around its first
case-insensitive occurrence. Occurrences are bucketed by offset // bucket_width and a
bucket yields only one snippet, so synonyms landing in the same paragraph do not
produce near-duplicates. Results follow keyword order, not document order.
"""

import re
from typing import Iterable

from codebook_outline.keywords import extract_keywords
from codebook_outline.models import EvidenceCandidate
from codebook_outline.normalize import WHITESPACE_RE

SNIPPET_RADIUS = 280
SNIPPET_BUCKET_WIDTH = 180
MAX_SNIPPETS = 3

EVIDENCE_RADIUS = 330
EVIDENCE_BUCKET_WIDTH = 220
MAX_EVIDENCE = 6

REFERENCE_LOOKBEHIND = 900
REFERENCE_LOOKAHEAD = 120

# "Section 4.2" wins over a bare dotted number; the last hit in the window is the closest
SECTION_REFERENCE_PATTERNS = (
    re.compile(r"section\s+([0-9]{1,4}(?:\.[0-9]{1,4}){0,4})", re.IGNORECASE | re.ASCII),
    re.compile(r"\b([0-9]{1,4}(?:\.[0-9]{1,4}){1,5})\b", re.ASCII),
)


def _check_window(radius: int, bucket_width: int, max_results: int) -> None:
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    if bucket_width < 1:
        raise ValueError(f"bucket_width must be >= 1, got {bucket_width}")
    if max_results < 0:
        raise ValueError(f"max_results must be >= 0, got {max_results}")


def slice_snippet_around(text: str | None, match_index: int, radius: int = 240) -> str:
    """Raw text in [match_index - radius, match_index + radius), whitespace collapsed and trimmed."""
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    source = str(text or "")
    if not source:
        return ""
    start = max(0, match_index - radius)
    end = min(len(source), match_index + radius)
    return WHITESPACE_RE.sub(" ", source[start:end]).strip()


def _lower_with_offsets(source: str) -> tuple[str, list[int]]:
    """Lowercase source; offsets[i] is the raw index of lowered char i (lower() may lengthen a char)."""
    chars: list[str] = []
    offsets: list[int] = []
    for i, ch in enumerate(source):
        folded = ch.lower()
        chars.append(folded)
        offsets.extend([i] * len(folded))
    return "".join(chars), offsets


def _first_hits(source: str, keywords: Iterable[str], bucket_width: int) -> Iterable[int]:
    """Yield the first raw offset of each keyword whose bucket has not been used yet."""
    lower, offsets = _lower_with_offsets(source)
    used_buckets: set[int] = set()
    for keyword in keywords:
        keyword = str(keyword or "").lower()
        if not keyword:
            continue
        idx = lower.find(keyword)
        if idx < 0:
            continue
        found_at = offsets[idx]
        bucket = found_at // bucket_width
        if bucket in used_buckets:
            continue
        used_buckets.add(bucket)
        yield found_at


def find_keyword_snippets(
    raw_text: str | None,
    keywords: Iterable[str],
    radius: int = SNIPPET_RADIUS,
    bucket_width: int = SNIPPET_BUCKET_WIDTH,
    max_results: int = MAX_SNIPPETS,
) -> list[str]:
    """Plain snippets (no section labels) for keywords, at most max_results."""
    _check_window(radius, bucket_width, max_results)
    source = str(raw_text or "")
    snippets: list[str] = []
    if not source or max_results == 0:
        return snippets
    for found_at in _first_hits(source, keywords, bucket_width):
        snippet = slice_snippet_around(source, found_at, radius)
        if snippet:
            snippets.append(snippet)
        if len(snippets) >= max_results:
            break
    return snippets


def find_nearby_section_reference(raw_text: str | None, index: int) -> str:
    """Closest section-like reference in the 900 characters before (and 120 after) index, or ''."""
    source = str(raw_text or "")
    if not source:
        return ""
    start = max(0, index - REFERENCE_LOOKBEHIND)
    end = min(len(source), index + REFERENCE_LOOKAHEAD)
    window = source[start:end]
    for pattern in SECTION_REFERENCE_PATTERNS:
        matches = pattern.findall(window)
        if matches:
            ref = matches[-1].strip()
            if ref:
                return ref
    return ""


def collect_evidence(
    raw_text: str | None,
    question_or_keywords: str | Iterable[str],
    radius: int = EVIDENCE_RADIUS,
    bucket_width: int = EVIDENCE_BUCKET_WIDTH,
    max_results: int = MAX_EVIDENCE,
) -> list[EvidenceCandidate]:
    """
    Evidence candidates for a question (keywords are extracted) or a keyword list:
    one snippet per accepted keyword hit, labelled with the nearest section reference.
    """
    _check_window(radius, bucket_width, max_results)
    source = str(raw_text or "")
    if isinstance(question_or_keywords, str):
        keywords = extract_keywords(question_or_keywords)
    else:
        keywords = list(question_or_keywords)
    evidence: list[EvidenceCandidate] = []
    if not source or not keywords or max_results == 0:
        return evidence
    for found_at in _first_hits(source, keywords, bucket_width):
        snippet = slice_snippet_around(source, found_at, radius)
        if not snippet:
            continue
        evidence.append(
            EvidenceCandidate(section=find_nearby_section_reference(source, found_at), snippet=snippet)
        )
        if len(evidence) >= max_results:
            break
    return evidence
