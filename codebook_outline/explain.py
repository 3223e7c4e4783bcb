"""
Section explanations: the located section text plus a short summary.

The summary comes from the LLM when one is reachable and falls back to a local
summary built from the section text. When the section heading is not found in the
document the explanation says so and carries no section text.
"""

import logging

from codebook_outline.llm import LLMBackend, build_messages, get_client
from codebook_outline.locate import SectionNotFoundError, locate_section
from codebook_outline.models import OutlineNode, SectionExplanation
from codebook_outline.normalize import WHITESPACE_RE, NormalizedViewCache

log = logging.getLogger(__name__)

LOCAL_SUMMARY_CHARS = 700

SUMMARY_SYSTEM_PROMPT = (
    "You summarize sections of building codes for engineers. Use only the section text given. "
    "Keep mandatory requirements, limits and exceptions; do not invent clauses."
)


def build_local_section_summary(section_text: str, node: OutlineNode) -> str:
    """Summary without an LLM: the section label and the first 700 characters of its text."""
    cleaned = WHITESPACE_RE.sub(" ", section_text or "").strip()
    snippet = cleaned if len(cleaned) <= LOCAL_SUMMARY_CHARS else cleaned[:LOCAL_SUMMARY_CHARS].strip() + "…"
    return (
        f"Section {node.label} sets requirements and guidance for this part of the code. "
        f"Key extracted text: {snippet}"
    )


def not_found_explanation(node: OutlineNode) -> SectionExplanation:
    return SectionExplanation(
        found=False,
        summary_text=(
            f"Exact section text could not be extracted for {node.label}. This section appears to "
            f"cover requirements and guidance for {node.title or node.label}; open the full document "
            "to review all mandatory clauses and tables."
        ),
    )


def summarize_section(section_text: str, node: OutlineNode, client: LLMBackend | None = None) -> str:
    """LLM summary of section_text; the local summary when the LLM fails or returns nothing."""
    local = build_local_section_summary(section_text, node)
    try:
        backend = client or get_client(tool="summary")
        summary = backend.complete(
            build_messages(f"Section: {node.label}\n\nSection text:\n{section_text}", system=SUMMARY_SYSTEM_PROMPT),
            max_tokens=800,
        )
    except Exception as e:
        log.warning("summary: LLM unavailable for '%s', using local summary: %s", node.label, e)
        return local
    return summary.strip() or local


def explain_section(
    node: OutlineNode,
    raw_text: str,
    client: LLMBackend | None = None,
    cache: NormalizedViewCache | None = None,
    use_llm: bool = True,
    cache_key: str | None = None,
) -> SectionExplanation:
    """Locate node's text and summarize it. Never returns fabricated section text."""
    try:
        span = locate_section(node, raw_text, cache=cache, cache_key=cache_key)
    except SectionNotFoundError:
        return not_found_explanation(node)
    if use_llm:
        summary = summarize_section(span.section_text, node, client)
    else:
        summary = build_local_section_summary(span.section_text, node)
    return SectionExplanation(
        found=True,
        section_text=span.section_text,
        summary_text=summary,
        matched_heading=span.matched_heading,
        truncated=span.truncated,
    )
