"""
Answer questions from the selected code documents.

Context and evidence are built locally; the LLM only phrases the answer and must cite
the evidence it was given. When no selected document yields any evidence the answer
is "Not addressed" and the LLM is not called.
"""

import json
import logging
import re
from typing import Mapping

from pydantic import ValidationError

from codebook_outline.context import build_question_context
from codebook_outline.llm import LLMBackend, build_messages, get_client
from codebook_outline.models import Chapter, Citation, QAAnswer

log = logging.getLogger(__name__)

NOT_ADDRESSED = "Not addressed in the selected code(s)"
NOT_ADDRESSED_PREFIX_RE = re.compile(r"^Not addressed in the selected code\(s\)\.?\s*", re.IGNORECASE)
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

MAX_CONTEXT_CHARS = 120000
MAX_POINTS = 8
MAX_LIST_ITEMS = 6

SYSTEM_PROMPT = (
    "You are an expert building code assistant. Use only the provided selected code context for "
    "citations. If the selected context includes citation candidates relevant to the question, treat "
    "it as addressed and cite those sections. Do not output contradictory results (e.g. not addressed "
    "while citing selected sections). If truly not addressed, set addressedInSelectedCodes=false and "
    "suggest better code selections from the available code names."
)

ANSWER_SCHEMA = """{
  "addressedInSelectedCodes": boolean,
  "directAnswer": string,
  "points": [{"statement": string, "citations": [{"codeName": string, "chapter": string, "section": string, "evidence": string}]}],
  "assumptions": string[],
  "checkInPdf": string[],
  "suggestedCodesIfNotAddressed": [{"codeName": string, "why": string}]
}"""

ANSWER_RULES = f"""Rules:
- If not addressed, directAnswer must explicitly include: "{NOT_ADDRESSED}".
- If addressedInSelectedCodes=true, provide section-level citations from selected code names.
- Never mark not addressed when you cite sections from selected codes.
- Keep chapter/section values concise (e.g. "10", "10.2.3").
- suggestedCodesIfNotAddressed should be empty when addressedInSelectedCodes=true."""


class AnswerParseError(ValueError):
    """Raised when the LLM reply holds no usable answer."""


def build_prompt(question: str, contexts: list[str], selected: list[str], all_names: list[str]) -> str:
    combined = "\n\n-----\n\n".join(contexts)[:MAX_CONTEXT_CHARS]
    selected_list = " | ".join(selected) or "Not provided"
    available_list = " | ".join(all_names) or selected_list
    return (
        f"User question:\n{question}\n\n"
        f"Selected code names:\n{selected_list}\n\n"
        f"All available code names:\n{available_list}\n\n"
        f"Selected code context:\n{combined}\n\n"
        f"Return strict JSON exactly in this schema:\n{ANSWER_SCHEMA}\n\n{ANSWER_RULES}"
    )


def parse_answer(raw: str) -> QAAnswer:
    """Parse the first JSON object in the reply into a QAAnswer."""
    match = JSON_OBJECT_RE.search(raw or "")
    if not match:
        raise AnswerParseError("LLM reply contains no JSON object")
    try:
        return QAAnswer.model_validate(json.loads(match.group(0)))
    except (json.JSONDecodeError, ValidationError) as e:
        raise AnswerParseError(f"LLM reply is not a valid answer: {e}") from e


def _cites_selected(citation: Citation, selected: set[str]) -> bool:
    name = citation.code_name.strip().lower()
    if not name:
        return False
    return name in selected or any(name in s or s in name for s in selected)


def reconcile_answer(answer: QAAnswer, selected_names: list[str]) -> QAAnswer:
    """
    Make 'addressed' agree with the citations: an answer citing a selected document (or
    pointing to one in check_in_pdf) is addressed. Not-addressed answers carry the
    explicit "Not addressed" text; addressed ones have it stripped. Lists are capped.
    """
    selected = {n.strip().lower() for n in selected_names if n.strip()}
    points = [p for p in answer.points if p.statement.strip()][:MAX_POINTS]
    for point in points:
        point.citations = [
            c for c in point.citations if c.code_name or c.chapter or c.section or c.evidence
        ]
    check_in_pdf = [s.strip() for s in answer.check_in_pdf if s.strip()][:MAX_LIST_ITEMS]

    addressed = answer.addressed
    if not addressed:
        cited = any(_cites_selected(c, selected) for p in points for c in p.citations)
        pointed = any(name in line.lower() for line in check_in_pdf for name in selected)
        addressed = cited or pointed

    direct = answer.direct_answer.strip()
    if addressed:
        direct = NOT_ADDRESSED_PREFIX_RE.sub("", direct).strip() or direct
        suggestions = []
    else:
        if NOT_ADDRESSED not in direct:
            direct = f"{NOT_ADDRESSED}. {direct}".strip()
        suggestions = [s for s in answer.suggested_codes if s.code_name.strip()][:MAX_LIST_ITEMS]

    return QAAnswer(
        addressed=addressed,
        direct_answer=direct,
        points=points,
        assumptions=[a.strip() for a in answer.assumptions if a.strip()][:MAX_LIST_ITEMS],
        check_in_pdf=check_in_pdf,
        suggested_codes=suggestions,
    )


def answer_question(
    question: str,
    documents: Mapping[str, tuple[list[Chapter], str]],
    all_names: list[str] | None = None,
    client: LLMBackend | None = None,
) -> QAAnswer:
    """
    Answer question from documents (name -> (chapters, raw text)).
    Raises ValueError for a blank question or an empty selection, AnswerParseError when
    the LLM reply is unusable.
    """
    question = (question or "").strip()
    if not question:
        raise ValueError("Question is required.")
    if not documents:
        raise ValueError("Select at least one code document first.")
    selected = list(documents)

    contexts = []
    evidence_count = 0
    for name, (chapters, raw_text) in documents.items():
        context, evidence = build_question_context(name, chapters, raw_text, question)
        contexts.append(context)
        evidence_count += len(evidence)
    log.info("qa: %d evidence snippets across %d document(s)", evidence_count, len(selected))

    if evidence_count == 0:
        return QAAnswer(addressed=False, direct_answer=f"{NOT_ADDRESSED}.")

    backend = client or get_client(tool="qa")
    prompt = build_prompt(question, contexts, selected, all_names or selected)
    raw = backend.complete(build_messages(prompt, system=SYSTEM_PROMPT), temperature=0.1)
    answer = parse_answer(raw)
    if not answer.direct_answer.strip() and not answer.points:
        raise AnswerParseError("LLM returned an empty answer.")
    return reconcile_answer(answer, selected)


def format_citation_line(citation: Citation) -> str:
    refs = [citation.code_name.strip() or "Code"]
    if citation.chapter.strip():
        refs.append(f"Chapter {citation.chapter.strip()}")
    if citation.section.strip():
        refs.append(f"Section {citation.section.strip()}")
    line = "- " + " | ".join(refs)
    evidence = citation.evidence.strip()
    return f"{line}: {evidence}" if evidence else line


def format_answer(answer: QAAnswer, selected_names: list[str]) -> str:
    """Plain-text rendering of an answer for terminals and logs."""
    lines: list[str] = []
    if not answer.addressed:
        lines += [f"{NOT_ADDRESSED}.", ""]
    if answer.direct_answer:
        lines += ["Direct answer:", answer.direct_answer, ""]
    if answer.points:
        lines.append("Detailed points with citations:")
        for i, point in enumerate(answer.points, start=1):
            lines.append(f"{i}) {point.statement.strip()}")
            if point.citations:
                lines += [format_citation_line(c) for c in point.citations]
            else:
                lines.append("- Citation: Not explicitly cited")
            lines.append("")
    if not answer.addressed and answer.suggested_codes:
        lines.append("Suggested code(s) to select:")
        for item in answer.suggested_codes:
            lines.append(f"- {item.code_name}: {item.why}" if item.why else f"- {item.code_name}")
        lines.append("")
    if answer.assumptions:
        lines += ["Assumptions:", *[f"- {a}" for a in answer.assumptions], ""]
    if answer.check_in_pdf:
        lines += ["Check in PDF:", *[f"- {c}" for c in answer.check_in_pdf], ""]
    lines.append("Selected sources:")
    lines += [f"- {name}" for name in selected_names]
    return "\n".join(lines).strip()
