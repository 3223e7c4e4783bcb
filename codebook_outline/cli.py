"""
CLI entry point: outline, section text, evidence and Q&A for code documents.

    codebook-outline outline path/to/document        # outline tree
    codebook-outline read "5.2" path/to/document     # exact section text
    codebook-outline search "fire doors"             # best match across registered documents
    codebook-outline keywords "what are the fire rating requirements for doors"
    codebook-outline evidence "fire rating of doors" path/to/document
    codebook-outline explain "5.2" path/to/document
    codebook-outline ask "minimum exit width?"       # Q&A over selected documents
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from codebook_outline.keywords import extract_keywords
from codebook_outline.locate import SectionNotFoundError
from codebook_outline.qa import AnswerParseError, format_answer
from codebook_outline.tools import ask as ask_tool
from codebook_outline.tools import evidence as evidence_tool
from codebook_outline.tools import explain as explain_tool
from codebook_outline.tools import outline as outline_tool
from codebook_outline.tools import read as read_tool
from codebook_outline.tools import search as search_tool
from codebook_outline.tools.config import config_app

app = typer.Typer(
    name="codebook-outline",
    help="Navigate building code documents: outline, exact section text, evidence and Q&A.",
)
app.add_typer(config_app, name="config")

PATH_HELP = "Path to document folder, outline.json or text file (default: current document)"


@app.callback()
def _main(verbose: bool = typer.Option(False, "-v", "--verbose", help="Print diagnostic info")) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(1)


@app.command("outline")
def outline_cmd(
    path: Optional[Path] = typer.Argument(None, help=PATH_HELP, path_type=Path),
    depth: int = typer.Option(3, "--depth", "-d", help="Max depth to display (chapters are depth 1)"),
    term: str = typer.Option("", "--filter", "-f", help="Only show entries whose label contains this text"),
) -> None:
    """Show the outline tree built from the document's heading list."""
    try:
        lines = outline_tool.run(path, depth=depth, term=term)
    except ValueError as e:
        _fail(str(e))
    if not lines:
        typer.echo("No outline entries.")
        return
    for line in lines:
        typer.echo(line)


@app.command("read")
def read_cmd(
    query: str = typer.Argument(..., help="Section code (e.g. 5.2) or part of its title"),
    path: Optional[Path] = typer.Argument(None, help=PATH_HELP, path_type=Path),
) -> None:
    """Print the exact text of a section."""
    try:
        node, span = read_tool.run(path, query)
    except SectionNotFoundError as e:
        _fail(f"Not found: {e}")
    except ValueError as e:
        _fail(str(e))
    typer.echo(f"[{node.label}] matched '{span.matched_heading}' at {span.start_offset}-{span.end_offset}", err=True)
    if span.truncated:
        typer.echo("Warning: no end boundary found; section text was capped.", err=True)
    typer.echo(span.section_text)


@app.command("search")
def search_cmd(query: str = typer.Argument(..., help="Search query (document, chapter, section code or title)")) -> None:
    """Jump to the best matching document, chapter or section across registered documents."""
    try:
        target = search_tool.run(query)
    except ValueError as e:
        _fail(str(e))
    if target is None:
        _fail("No matching code, chapter, or section found.")
    if target.notice:
        typer.echo(target.notice, err=True)
    parts = [target.document]
    if target.chapter_number is not None:
        parts.append(f"Chapter {target.chapter_number}")
    if target.section_code or target.section_title:
        parts.append(f"{target.section_code} {target.section_title}".strip())
    typer.echo(f"{' > '.join(parts)} (score {target.score})")


@app.command("keywords")
def keywords_cmd(
    question: str = typer.Argument(..., help="Free-text question"),
    max_terms: int = typer.Option(24, "--max-terms", "-n", help="Maximum number of terms"),
) -> None:
    """Show the search terms extracted from a question."""
    try:
        terms = extract_keywords(question, max_terms=max_terms)
    except ValueError as e:
        _fail(str(e))
    for term in terms:
        typer.echo(term)


@app.command("evidence")
def evidence_cmd(
    question: str = typer.Argument(..., help="Free-text question"),
    path: Optional[Path] = typer.Argument(None, help=PATH_HELP, path_type=Path),
    max_results: int = typer.Option(6, "--max", "-n", help="Maximum number of snippets"),
) -> None:
    """Show ranked evidence snippets for a question, each with its nearest section reference."""
    try:
        keywords, evidence = evidence_tool.run(path, question, max_results=max_results)
    except ValueError as e:
        _fail(str(e))
    typer.echo(f"Keywords: {', '.join(keywords) or '(none)'}", err=True)
    if not evidence:
        typer.echo("Evidence snippets found: 0")
        return
    for i, item in enumerate(evidence, start=1):
        typer.echo(f"[{i}] Section: {item.section or 'not-labeled'}")
        typer.echo(f"    {item.snippet}")


@app.command("explain")
def explain_cmd(
    query: str = typer.Argument(..., help="Section code (e.g. 5.2) or part of its title"),
    path: Optional[Path] = typer.Argument(None, help=PATH_HELP, path_type=Path),
    no_llm: bool = typer.Option(False, "--no-llm", help="Use the local summary only"),
) -> None:
    """Explain a section: summary plus the exact section text."""
    try:
        result = explain_tool.run(path, query, use_llm=not no_llm)
    except ValueError as e:
        _fail(str(e))
    typer.echo(result.summary_text)
    if result.found:
        typer.echo("")
        typer.echo(result.section_text)


@app.command("ask")
def ask_cmd(question: str = typer.Argument(..., help="Question to answer from the selected documents")) -> None:
    """Answer a question from the selected documents (config select), with citations."""
    try:
        answer, selected = ask_tool.run(question)
    except AnswerParseError as e:
        _fail(f"Unable to generate answer: {e}")
    except ValueError as e:
        _fail(str(e))
    typer.echo(format_answer(answer, selected))


def main() -> None:
    """Entry point for the codebook-outline console script."""
    app()


if __name__ == "__main__":
    main()
