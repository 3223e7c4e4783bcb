"""
Config tool: CLI subapp only. Implementation in codebook_outline.config.
"""

from typing import List

import typer

from codebook_outline import config as config_module

config_app = typer.Typer(help="Document registry, current document and Q&A selection.")


@config_app.command("show")
def _show() -> None:
    """Show config and the resolved current document and selection."""
    data = config_module.get_config()
    cf = data.get("_config_file", "")
    if data.get("_no_file", False):
        typer.echo(f"Config file: {cf} (not found; using defaults)")
    else:
        typer.echo(f"Config file: {cf}")
    typer.echo(f"Documents: {data.get('documents', {})}")
    typer.echo(f"Current document: {data.get('current_document')}")
    typer.echo(f"Resolved current document path: {data.get('_resolved_current_document_path')}")
    typer.echo(f"Selected for Q&A: {data.get('_resolved_selected_documents', [])}")
    tools = config_module.load_tools_config()
    tools_path = config_module.get_tools_config_path()
    typer.echo(f"Tools config: {tools_path} (exists: {tools_path.exists()})")
    typer.echo(f"LLM model: {tools.get('llm_model', '(default)')}")


@config_app.command("add-document")
def _add_document(
    name: str = typer.Argument(..., help="Name for this document (unique in registry)"),
    path: str = typer.Argument(..., help="Path to document folder (relative to config file dir)"),
) -> None:
    """Add or update a document. Path must resolve to a folder with outline.json and a text source."""
    result = config_module.add_document(name, path)
    if not result["ok"]:
        typer.echo(result["error"], err=True)
        raise typer.Exit(1)
    typer.echo(f"Added document '{name}' -> {path}")
    typer.echo(f"Resolved: {result.get('resolved_path', '')} (text: {result.get('text_path', '')})")


@config_app.command("remove-document")
def _remove_document(name: str = typer.Argument(..., help="Document name")) -> None:
    """Remove a document from the registry and the selection."""
    result = config_module.remove_document(name)
    if not result["ok"]:
        typer.echo(result["error"], err=True)
        raise typer.Exit(1)
    typer.echo(f"Removed document '{name}'.")


@config_app.command("set-current")
def _set_current(name: str = typer.Argument(None, help="Document name (omit to clear)")) -> None:
    """Set the current document (used when path is omitted in outline/read/evidence/explain)."""
    result = config_module.set_current_document(name)
    if not result["ok"]:
        typer.echo(result["error"], err=True)
        raise typer.Exit(1)
    typer.echo(f"Current document: {name}")
    typer.echo(f"Resolved path: {result['config'].get('_resolved_current_document_path')}")


@config_app.command("select")
def _select(names: List[str] = typer.Argument(None, help="Document names for Q&A (none = all)")) -> None:
    """Select the documents used by ask."""
    result = config_module.select_documents(list(names or []))
    if not result["ok"]:
        typer.echo(result["error"], err=True)
        raise typer.Exit(1)
    typer.echo(f"Selected for Q&A: {result['config'].get('_resolved_selected_documents', [])}")


@config_app.command("set-llm-model")
def _set_llm_model(
    model_id: str = typer.Argument(..., help="OpenRouter model id (e.g. openai/gpt-4o-mini, anthropic/claude-3-haiku)"),
) -> None:
    """Set the default LLM model. Writes codebook_tools.py (or edit that file directly)."""
    result = config_module.set_llm_model(model_id)
    if not result["ok"]:
        typer.echo(result["error"], err=True)
        raise typer.Exit(1)
    typer.echo(f"LLM model set to: {result.get('llm_model', model_id)}")
    for tool, model in result.get("overridden_by", {}).items():
        typer.echo(f"Note: LLM_MODELS[{tool!r}] = {model!r} still applies to '{tool}'", err=True)


@config_app.command("path")
def _path() -> None:
    """Print the config file path in use."""
    typer.echo(config_module.get_config_path())
