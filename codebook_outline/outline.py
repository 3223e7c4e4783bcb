"""
Build the outline tree of a code document from its flat heading list.

Nesting depth comes from the section code:
  'Division'                    -> 1
  '5.2' / '5.2.3' in chapter 5  -> segments - 1 (1 / 2), never below 1
  '7.1.4' in chapter 5          -> segments (3)
  'A.3.1' (appendix)            -> segments (3)
  blank or anything else        -> 1

The tree is built in one ordered pass with a stack of open ancestors. Input is never
validated or reordered: out-of-order codes give a best-effort tree.
"""

import re
from typing import Iterable

from codebook_outline.models import Chapter, ChapterOutline, OutlineNode

NUMERIC_CODE_RE = re.compile(r"^\d+(\.\d+)+$", re.ASCII)
APPENDIX_CODE_RE = re.compile(r"^[A-Z](\.\d+)+$", re.ASCII)


def get_section_level(code: str | None, chapter_number: int | str | None) -> int:
    """Infer nesting level (>= 1) of a heading from its code and its chapter number."""
    if not code:
        return 1
    normalized = str(code).strip()
    if not normalized:
        return 1
    if normalized.lower() == "division":
        return 1
    if NUMERIC_CODE_RE.match(normalized):
        segments = normalized.split(".")
        if segments[0] == str(chapter_number):
            return max(1, len(segments) - 1)
        return len(segments)
    if APPENDIX_CODE_RE.match(normalized):
        return len(normalized.split("."))
    return 1


def build_chapter_tree(chapter: Chapter, chapter_key: str, node_index: dict[str, OutlineNode] | None = None) -> list[OutlineNode]:
    """
    Convert a chapter's ordered headings into root nodes. For each entry, pop the stack
    while its top is at the same or a deeper level; the entry is a root if the stack is
    then empty, else a child of the top. When node_index is given, every node is
    registered there by key.
    """
    roots: list[OutlineNode] = []
    stack: list[OutlineNode] = []

    for index, section in enumerate(chapter.sections):
        code = (section.code or "").strip()
        node = OutlineNode(
            key=f"{chapter_key}-node-{index}",
            code=code,
            title=(section.title or "").strip(),
            level=get_section_level(code, chapter.number),
            chapter_number=chapter.number,
            chapter_title=chapter.title,
        )
        if node_index is not None:
            node_index[node.key] = node

        while stack and stack[-1].level >= node.level:
            stack.pop()

        if stack:
            parent = stack[-1]
            node.parent_key = parent.key
            parent.children.append(node)
        else:
            roots.append(node)

        stack.append(node)

    return roots


def build_outline(chapters: Iterable[Chapter]) -> tuple[list[ChapterOutline], dict[str, OutlineNode]]:
    """Build every chapter's tree. Returns (chapter outlines, node key -> node)."""
    node_index: dict[str, OutlineNode] = {}
    outlines = []
    for i, chapter in enumerate(chapters):
        key = f"chapter-{i}"
        outlines.append(
            ChapterOutline(
                key=key,
                number=chapter.number,
                title=chapter.title,
                nodes=build_chapter_tree(chapter, key, node_index),
            )
        )
    return outlines, node_index


def iter_nodes(nodes: Iterable[OutlineNode]) -> Iterable[OutlineNode]:
    """Depth-first, document-order walk over nodes and their descendants."""
    for node in nodes:
        yield node
        yield from iter_nodes(node.children)


def filter_outline(nodes: list[OutlineNode], term: str) -> list[OutlineNode]:
    """
    Keep nodes whose 'code title' label contains term, plus ancestors of matching
    nodes (with only their matching children). Returns copies; input is untouched.
    """
    term = (term or "").strip().lower()
    if not term:
        return nodes
    kept = []
    for node in nodes:
        label = f"{node.code} {node.title}".lower()
        child_matches = filter_outline(node.children, term)
        if term in label or child_matches:
            kept.append(node.model_copy(update={"children": child_matches}))
    return kept


def filter_chapters(chapters: list[ChapterOutline], term: str) -> list[ChapterOutline]:
    """Filter chapter outlines; a chapter whose own label matches keeps its whole tree."""
    term = (term or "").strip().lower()
    if not term:
        return chapters
    kept = []
    for chapter in chapters:
        if term in chapter.label.lower():
            kept.append(chapter)
            continue
        nodes = filter_outline(chapter.nodes, term)
        if nodes:
            kept.append(chapter.model_copy(update={"nodes": nodes}))
    return kept


def find_node(chapters: list[ChapterOutline], query: str) -> OutlineNode | None:
    """
    First node (document order) whose code equals query, else whose 'code title' label
    contains it (case-insensitive). None if nothing matches.
    """
    query = (query or "").strip().lower()
    if not query:
        return None
    nodes = [n for ch in chapters for n in iter_nodes(ch.nodes)]
    for node in nodes:
        if node.code.lower() == query:
            return node
    for node in nodes:
        if query in f"{node.code} {node.title}".lower():
            return node
    return None


def list_outline(chapters: list[ChapterOutline], max_depth: int = 2) -> list[str]:
    """Return formatted outline lines: chapters at depth 1, their nodes below."""
    lines = []

    def _recurse(nodes: list[OutlineNode], current_depth: int) -> None:
        if current_depth > max_depth:
            return
        for node in nodes:
            indent = "  " * (current_depth - 1)
            lines.append(f"{indent}- {node.label or 'Untitled'}")
            _recurse(node.children, current_depth + 1)

    for chapter in chapters:
        lines.append(f"- {chapter.label}")
        _recurse(chapter.nodes, 2)
    return lines
