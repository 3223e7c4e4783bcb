"""Resolve a document path to its outline and text files. No CLI (typer) dependency."""

from pathlib import Path

OUTLINE_FILENAME = "outline.json"
TEXT_FILENAME = "text.txt"
TEXT_SUFFIXES = (".txt", ".md")
PDF_SUFFIX = ".pdf"


def _find_text_file(folder: Path) -> Path | None:
    """text.txt if present, else the largest .txt/.md file, else the largest .pdf."""
    preferred = folder / TEXT_FILENAME
    if preferred.is_file():
        return preferred
    texts = [p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in TEXT_SUFFIXES]
    if texts:
        return max(texts, key=lambda p: p.stat().st_size)
    pdfs = [p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == PDF_SUFFIX]
    if pdfs:
        return max(pdfs, key=lambda p: p.stat().st_size)
    return None


def resolve_document_paths(path: Path) -> tuple[Path, Path]:
    """
    Resolve a path (document folder, outline.json or the text file) to (outline_path, text_path).
    Raises ValueError with a message if the outline or a text source is not found.
    """
    path = Path(path).resolve()
    if path.is_file():
        folder = path.parent
        if path.name == OUTLINE_FILENAME:
            outline_path = path
            text_path = _find_text_file(folder)
        else:
            if path.suffix.lower() not in (*TEXT_SUFFIXES, PDF_SUFFIX):
                raise ValueError(f"Unsupported text source '{path.name}': use a .txt, .md or .pdf file")
            outline_path = folder / OUTLINE_FILENAME
            text_path = path
    elif path.is_dir():
        folder = path
        outline_path = folder / OUTLINE_FILENAME
        text_path = _find_text_file(folder)
    else:
        raise ValueError(f"Not a document folder or file: {path}")

    if not outline_path.is_file():
        raise ValueError(f"{OUTLINE_FILENAME} not found in {folder}")
    if text_path is None:
        raise ValueError(f"No .txt, .md or .pdf text source found in {folder}")
    return outline_path, text_path
