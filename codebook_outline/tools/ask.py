"""
Ask tool: answer a question from the selected code documents.
"""

from pathlib import Path
from typing import Dict, Optional

from codebook_outline.config import get_all_document_paths, get_selected_document_paths
from codebook_outline.core import DocumentTextCache, load_document
from codebook_outline.llm import LLMBackend
from codebook_outline.models import QAAnswer
from codebook_outline.qa import answer_question


def run(
    question: str,
    paths: Optional[Dict[str, Path]] = None,
    client: Optional[LLMBackend] = None,
    cache: Optional[DocumentTextCache] = None,
) -> tuple[QAAnswer, list[str]]:
    """
    Answer question from paths (default: the selected documents in config).
    Returns (answer, selected document names). Raises ValueError when nothing is selected.
    """
    all_names = list(get_all_document_paths())
    if paths is None:
        paths = get_selected_document_paths()
    if not paths:
        raise ValueError("No documents selected: register documents with config add-document.")
    documents = {name: load_document(path, cache) for name, path in paths.items()}
    return answer_question(question, documents, all_names or list(paths), client=client), list(paths)
