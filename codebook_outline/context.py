"""
Question context for the code Q&A model: per-document outline lines for the
chapters and sections a question touches, keyword snippets and numbered citation
candidates. All text comes verbatim from the document.
"""

from codebook_outline.evidence import collect_evidence, find_keyword_snippets
from codebook_outline.keywords import extract_keywords
from codebook_outline.models import Chapter, EvidenceCandidate
from codebook_outline.normalize import normalize_search_text

MAX_CONTEXT_CHAPTERS = 20
MAX_RELEVANT_SECTIONS = 6


def relevant_sections(chapter: Chapter, keywords: list[str]) -> list[str]:
    """'code title' labels of the chapter's sections that contain any keyword (at most 6)."""
    labels = []
    for section in chapter.sections:
        label = f"{section.code or ''} {section.title or ''}".strip()
        normalized = normalize_search_text(label)
        if any(keyword in normalized for keyword in keywords):
            labels.append(label)
        if len(labels) >= MAX_RELEVANT_SECTIONS:
            break
    return labels


def outline_lines(chapters: list[Chapter], keywords: list[str]) -> list[str]:
    lines = []
    for chapter in chapters[:MAX_CONTEXT_CHAPTERS]:
        chapter_title = f"Chapter {chapter.number}: {chapter.title}"
        sections = relevant_sections(chapter, keywords)
        if sections:
            lines.append(f"- {chapter_title}\n  Relevant sections: {' | '.join(sections)}")
        else:
            lines.append(f"- {chapter_title}")
    return lines


def format_evidence_block(evidence: list[EvidenceCandidate]) -> str:
    if not evidence:
        return "Evidence snippets found: 0"
    items = "\n\n".join(
        f"[Citation Candidate {i}] Section: {item.section or 'not-labeled'} | Text: {item.snippet}"
        for i, item in enumerate(evidence, start=1)
    )
    return f"Evidence snippets found: {len(evidence)}\n{items}"


def build_question_context(
    name: str,
    chapters: list[Chapter],
    raw_text: str,
    question: str,
) -> tuple[str, list[EvidenceCandidate]]:
    """
    Context block for one document plus the evidence it contains.
    The evidence list is returned separately so callers can tell whether the
    document addresses the question at all.
    """
    keywords = extract_keywords(question)
    snippets = find_keyword_snippets(raw_text, keywords)
    evidence = collect_evidence(raw_text, keywords)

    outline = "\n".join(outline_lines(chapters, keywords)) or "- No chapter outline available."
    parts = [f"Code: {name}", "", "Outline:", outline]
    if snippets:
        parts += ["", "Extracted code text snippets:"]
        parts.append("\n\n".join(f"{i}) {s}" for i, s in enumerate(snippets, start=1)))
    parts += ["", format_evidence_block(evidence)]
    return "\n".join(parts), evidence
