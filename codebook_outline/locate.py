"""
Locate the verbatim text of an outline node inside a document's raw extracted text.

Start: first heading candidate ('code title', 'code-title', code, title) found as a
literal substring of the normalized text. End: the next dotted section code after the
heading that is neither the node's own code nor one of its sub-codes; capped at
MAX_SECTION_CHARS normalized characters when there is none. The returned text is
always a slice of the raw text, never rebuilt from the normalized view.
"""

import logging
import re

from codebook_outline.models import OutlineNode, SectionSpan
from codebook_outline.normalize import NormalizedViewCache, get_view, normalize_search_text

log = logging.getLogger(__name__)

MAX_SECTION_CHARS = 12000
MIN_CANDIDATE_LEN = 2

SECTION_CODE_RE = re.compile(r"\b\d+(?:\.\d+){1,6}\b", re.ASCII)


class SectionNotFoundError(LookupError):
    """Raised when none of a node's heading candidates occurs in the document text."""

    def __init__(self, node: OutlineNode, message: str | None = None):
        self.node = node
        super().__init__(message or f"Section text not found for '{node.label}'")


def heading_candidates(node: OutlineNode) -> list[str]:
    """Normalized heading strings to look for, in priority order (blanks dropped)."""
    code = normalize_search_text(node.code)
    title = normalize_search_text(node.title)
    raw = [f"{code} {title}", f"{code}-{title}", code, title]
    return [c for c in (normalize_search_text(r) for r in raw) if c]


def _find_end(normalized: str, scan_start: int, code: str) -> int:
    """Normalized index of the first foreign section code at or after scan_start, or -1."""
    for match in SECTION_CODE_RE.finditer(normalized, scan_start):
        token = match.group(0)
        if code and (token == code or token.startswith(code + ".")):
            continue
        return match.start()
    return -1


def locate_section(
    node: OutlineNode,
    raw_text: str,
    cache: NormalizedViewCache | None = None,
    cache_key: str | None = None,
) -> SectionSpan:
    """
    Return the SectionSpan of node in raw_text.
    Raises SectionNotFoundError when no heading candidate matches (or the slice is blank);
    a span capped for lack of an end boundary has truncated=True.
    """
    view = get_view(raw_text, cache, key=cache_key)
    if not view.normalized:
        raise SectionNotFoundError(node, f"Document text is empty; cannot locate '{node.label}'")

    start = -1
    used_heading = ""
    for candidate in heading_candidates(node):
        if len(candidate) < MIN_CANDIDATE_LEN:
            continue
        found = view.normalized.find(candidate)
        if found != -1:
            start = found
            used_heading = candidate
            break
    if start == -1:
        log.info("locate: no heading candidate for '%s' in text", node.label)
        raise SectionNotFoundError(node)

    code = normalize_search_text(node.code)
    scan_start = start + max(len(used_heading), len(code))
    end = _find_end(view.normalized, scan_start, code)
    truncated = end == -1
    if truncated:
        end = min(len(view.normalized), start + MAX_SECTION_CHARS)
        log.debug("locate: no end boundary for '%s'; capped at %d chars", node.label, end - start)

    start_offset = view.index_map[start]
    end_offset = view.index_map[end] if end < len(view.index_map) else len(view.source)
    section_text = view.source[start_offset:end_offset].strip()
    if not section_text:
        raise SectionNotFoundError(node, f"Section text for '{node.label}' is empty")

    return SectionSpan(
        section_text=section_text,
        matched_heading=used_heading,
        start_offset=start_offset,
        end_offset=end_offset,
        truncated=truncated,
    )
