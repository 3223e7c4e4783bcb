"""
Public API: work with a code document from code.

    from codebook_outline import load_code_document
    doc = load_code_document("codes/fire2016")
    node = doc.find("5.2")
    span = doc.locate(node)          # raises SectionNotFoundError when the heading is absent
    evidence = doc.evidence("what are the fire rating requirements for doors")
"""

from dataclasses import dataclass, field
from pathlib import Path

from codebook_outline.core import DocumentTextCache, load_document
from codebook_outline.evidence import collect_evidence, find_keyword_snippets
from codebook_outline.explain import explain_section
from codebook_outline.keywords import extract_keywords
from codebook_outline.llm import LLMBackend
from codebook_outline.locate import locate_section
from codebook_outline.models import (
    Chapter,
    ChapterOutline,
    EvidenceCandidate,
    OutlineNode,
    SectionExplanation,
    SectionSpan,
)
from codebook_outline.normalize import NormalizedViewCache
from codebook_outline.outline import build_outline, filter_chapters, find_node


@dataclass
class CodeDocument:
    """
    Outline and raw text of one document. The outline tree is built once; the
    normalized view of the text is built on first use and shared by later calls.
    """

    name: str
    chapters: list[Chapter]
    raw_text: str
    view_cache: NormalizedViewCache = field(default_factory=lambda: NormalizedViewCache(capacity=1))
    outline: list[ChapterOutline] = field(init=False)
    nodes: dict[str, OutlineNode] = field(init=False)

    def __post_init__(self) -> None:
        self.outline, self.nodes = build_outline(self.chapters)

    def find(self, query: str) -> OutlineNode | None:
        """First node whose code equals query, else whose label contains it."""
        return find_node(self.outline, query)

    def filter(self, term: str) -> list[ChapterOutline]:
        return filter_chapters(self.outline, term)

    def locate(self, node: OutlineNode | str) -> SectionSpan:
        """Span of a node (or node key). Raises SectionNotFoundError, or KeyError for an unknown key."""
        if isinstance(node, str):
            node = self.nodes[node]
        return locate_section(node, self.raw_text, cache=self.view_cache, cache_key=self.name)

    def keyword_snippets(self, question: str) -> list[str]:
        return find_keyword_snippets(self.raw_text, extract_keywords(question))

    def evidence(self, question: str, max_results: int = 6) -> list[EvidenceCandidate]:
        return collect_evidence(self.raw_text, question, max_results=max_results)

    def explain(self, node: OutlineNode, client: LLMBackend | None = None, use_llm: bool = True) -> SectionExplanation:
        return explain_section(node, self.raw_text, client=client, cache=self.view_cache, use_llm=use_llm, cache_key=self.name)


def load_code_document(
    path: str | Path,
    name: str | None = None,
    text_cache: DocumentTextCache | None = None,
) -> CodeDocument:
    """
    Load a document folder (outline.json + text source) as a CodeDocument.

    Args:
        path: Document folder, its outline.json or its text file.
        name: Document name (default: folder name).
        text_cache: Optional cache of extracted texts shared across loads.
    """
    chapters, raw_text = load_document(Path(path), text_cache)
    resolved = Path(path).resolve()
    folder = resolved if resolved.is_dir() else resolved.parent
    return CodeDocument(name=name or folder.name, chapters=chapters, raw_text=raw_text)
