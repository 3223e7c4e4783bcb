"""
Config: document registry (name -> document folder), current document and the documents
selected for question answering, stored in .codebook_outline.json. Paths are relative
to the config file directory. Document names are unique and user-chosen.

Tool settings (LLM models per tool) live in codebook_tools.py at the repo root.
"""

import ast
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from codebook_outline.path_utils import resolve_document_paths

CONFIG_FILENAME = ".codebook_outline.json"
TOOLS_CONFIG_FILENAME = "codebook_tools.py"
DEFAULT_LLM_MODEL = "openai/gpt-4o-mini"


def _find_repo_root() -> Path | None:
    """Walk up from package dir to find a directory containing pyproject.toml or the config file."""
    start = Path(__file__).resolve().parent
    for parent in [start, *start.parents]:
        if (parent / "pyproject.toml").exists() or (parent / CONFIG_FILENAME).exists():
            return parent
    return None


def get_config_path() -> Path:
    """Path to the config file. Env CODEBOOK_OUTLINE_CONFIG wins; else cwd; else repo root; else cwd for create."""
    env_path = os.environ.get("CODEBOOK_OUTLINE_CONFIG")
    if env_path:
        return Path(env_path).resolve()
    cwd_file = (Path.cwd() / CONFIG_FILENAME).resolve()
    if cwd_file.exists():
        return cwd_file
    repo = _find_repo_root()
    if repo is not None:
        return repo / CONFIG_FILENAME
    return cwd_file


def _default_config() -> Dict[str, Any]:
    return {
        "documents": {},
        "current_document": None,
        "selected_documents": [],
    }


def _find_config_file() -> Path | None:
    """Return path to an existing config file, or None."""
    env_path = os.environ.get("CODEBOOK_OUTLINE_CONFIG")
    if env_path:
        p = Path(env_path).resolve()
        return p if p.exists() else None
    for d in [Path.cwd(), *Path.cwd().parents]:
        cf = (d / CONFIG_FILENAME).resolve()
        if cf.exists():
            return cf
    repo = _find_repo_root()
    if repo is not None:
        rp = (repo / CONFIG_FILENAME).resolve()
        if rp.exists():
            return rp
    return None


def _config_base_path() -> Path:
    """Directory to resolve relative document paths from (config file dir or cwd)."""
    p = _find_config_file() or get_config_path()
    if p.exists():
        return p.parent
    return Path.cwd()


def load_config() -> Dict[str, Any]:
    """Load config from file or return defaults. Unknown keys are dropped on save."""
    path = _find_config_file()
    if path is None:
        out = _default_config()
        out["_config_file"] = str(get_config_path())
        out["_no_file"] = True
        return out
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        out = _default_config()
        out["_config_file"] = str(path)
        out["_load_error"] = True
        return out
    if not isinstance(data.get("documents"), dict):
        data["documents"] = {}
    if "current_document" not in data:
        data["current_document"] = None
    if not isinstance(data.get("selected_documents"), list):
        data["selected_documents"] = []
    data["_config_file"] = str(path)
    data["_no_file"] = False
    return data


def save_config(data: Dict[str, Any]) -> None:
    """Save config. Only writes documents, current_document, selected_documents."""
    path = data.get("_config_file")
    path = Path(path) if path else get_config_path()
    to_save = {
        "documents": data.get("documents", {}),
        "current_document": data.get("current_document"),
        "selected_documents": data.get("selected_documents", []),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_save, f, indent=2)


def _writable_config() -> Dict[str, Any]:
    data = load_config()
    if data.get("_no_file") or data.get("_load_error"):
        config_file = data["_config_file"]
        data = _default_config()
        data["_config_file"] = config_file
    return data


def get_document_path(name: str) -> Optional[Path]:
    """Resolve document name to its folder. Returns None if not in registry or path invalid."""
    data = load_config()
    documents = data.get("documents", {})
    if not name or name not in documents:
        return None
    candidate = (_config_base_path() / documents[name]).resolve()
    try:
        outline_path, _ = resolve_document_paths(candidate)
    except ValueError:
        return None
    return outline_path.parent


def get_default_document_path(name: Optional[str] = None) -> Optional[Path]:
    """
    Resolve to a document folder for outline/read/evidence/explain.
    If name is given, resolve that document. If None: use current_document, or the single
    registered document; else None.
    """
    if name:
        return get_document_path(name)
    data = load_config()
    current = data.get("current_document")
    if current and get_document_path(current) is not None:
        return get_document_path(current)
    documents = list(data.get("documents", {}))
    if len(documents) == 1:
        return get_document_path(documents[0])
    return None


def get_all_document_paths() -> Dict[str, Path]:
    """Every registered document that resolves, in registry order."""
    out: Dict[str, Path] = {}
    for name in load_config().get("documents", {}):
        path = get_document_path(name)
        if path is not None:
            out[name] = path
    return out


def get_selected_document_paths() -> Dict[str, Path]:
    """Documents selected for question answering; all registered documents when none are selected."""
    selected = load_config().get("selected_documents") or []
    all_paths = get_all_document_paths()
    if not selected:
        return all_paths
    return {name: all_paths[name] for name in selected if name in all_paths}


def add_document(name: str, path: str) -> Dict[str, Any]:
    """Add or update a document in the registry. name must be non-empty; path validated. Saves config."""
    name = (name or "").strip()
    if not name:
        return {"ok": False, "error": "Document name cannot be empty.", "config": get_config()}
    data = _writable_config()
    candidate = (Path(data["_config_file"]).parent / path).resolve()
    try:
        outline_path, text_path = resolve_document_paths(candidate)
    except ValueError as e:
        return {"ok": False, "error": str(e), "config": get_config()}
    data["documents"][name] = path
    save_config(data)
    return {
        "ok": True,
        "config": get_config(),
        "resolved_path": str(outline_path.parent),
        "text_path": str(text_path),
    }


def remove_document(name: str) -> Dict[str, Any]:
    """Remove a document from the registry, the selection and current_document."""
    data = _writable_config()
    if name not in data["documents"]:
        return {"ok": False, "error": f"Document '{name}' not in registry.", "config": get_config()}
    del data["documents"][name]
    data["selected_documents"] = [d for d in data["selected_documents"] if d != name]
    if data.get("current_document") == name:
        data["current_document"] = None
    save_config(data)
    return {"ok": True, "config": get_config()}


def set_current_document(name: Optional[str]) -> Dict[str, Any]:
    """Set current_document (used when no path is given to outline/read/evidence). None clears it."""
    data = _writable_config()
    if name is not None and name not in data["documents"]:
        return {"ok": False, "error": f"Document '{name}' not in registry. Add it with config add-document.", "config": get_config()}
    data["current_document"] = name
    save_config(data)
    return {"ok": True, "config": get_config()}


def select_documents(names: List[str]) -> Dict[str, Any]:
    """Set the documents used for question answering. An empty list selects all documents."""
    data = _writable_config()
    unknown = [n for n in names if n not in data["documents"]]
    if unknown:
        return {"ok": False, "error": f"Not in registry: {', '.join(unknown)}", "config": get_config()}
    data["selected_documents"] = list(dict.fromkeys(names))
    save_config(data)
    return {"ok": True, "config": get_config()}


def get_config() -> Dict[str, Any]:
    """Full config with resolved current document and selection."""
    data = load_config()
    path = get_default_document_path(None)
    data["_resolved_current_document_path"] = str(path) if path else None
    data["_resolved_selected_documents"] = list(get_selected_document_paths())
    return data


# ---------------------------------------------------------------------------
# Tools config (codebook_tools.py)
# ---------------------------------------------------------------------------

def get_tools_config_path() -> Path:
    """Env CODEBOOK_OUTLINE_TOOLS wins; else codebook_tools.py in cwd; else at the repo root."""
    env_path = os.environ.get("CODEBOOK_OUTLINE_TOOLS")
    if env_path:
        return Path(env_path).resolve()
    cwd_file = (Path.cwd() / TOOLS_CONFIG_FILENAME).resolve()
    if cwd_file.exists():
        return cwd_file
    repo = _find_repo_root()
    if repo is not None:
        return repo / TOOLS_CONFIG_FILENAME
    return cwd_file


def load_tools_config() -> Dict[str, Any]:
    """
    Read LLM_MODEL and LLM_MODELS from codebook_tools.py without executing it
    (top-level literal assignments only). Returns {"llm_model", "llm_models"}.
    """
    out: Dict[str, Any] = {"llm_model": DEFAULT_LLM_MODEL, "llm_models": {}}
    path = get_tools_config_path()
    if not path.is_file():
        return out
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    for stmt in tree.body:
        if not isinstance(stmt, ast.Assign) or len(stmt.targets) != 1:
            continue
        target = stmt.targets[0]
        if not isinstance(target, ast.Name):
            continue
        if target.id == "LLM_MODEL":
            out["llm_model"] = ast.literal_eval(stmt.value)
        elif target.id == "LLM_MODELS":
            out["llm_models"] = dict(ast.literal_eval(stmt.value))
    return out


def get_llm_model(tool: Optional[str] = None) -> Optional[str]:
    """
    Model for a tool from codebook_tools.py: LLM_MODELS[tool], then LLM_MODELS["default"],
    then LLM_MODEL. None when there is no tools file (backend and env defaults apply).
    """
    if not get_tools_config_path().is_file():
        return None
    tools = load_tools_config()
    models = tools["llm_models"]
    return (tool and models.get(tool)) or models.get("default") or tools["llm_model"]


_LLM_MODEL_LINE_RE = re.compile(r'^LLM_MODEL\s*=.*$', re.MULTILINE)


def set_llm_model(model_id: str) -> Dict[str, Any]:
    """
    Set LLM_MODEL in codebook_tools.py (created if missing). Entries of LLM_MODELS that
    still win over it for some tools are returned under "overridden_by".
    """
    model_id = (model_id or "").strip()
    if not model_id:
        return {"ok": False, "error": "Model id cannot be empty."}
    path = get_tools_config_path()
    line = f"LLM_MODEL = {model_id!r}"
    if path.is_file():
        text = path.read_text(encoding="utf-8")
        if _LLM_MODEL_LINE_RE.search(text):
            text = _LLM_MODEL_LINE_RE.sub(line, text, count=1)
        else:
            text = text.rstrip("\n") + "\n\n" + line + "\n"
    else:
        text = "# codebook-outline tools config.\n\n" + line + "\n"
    path.write_text(text, encoding="utf-8")
    result = {"ok": True, "llm_model": model_id, "path": str(path)}
    overrides = {k: v for k, v in load_tools_config()["llm_models"].items() if v != model_id}
    if overrides:
        result["overridden_by"] = overrides
    return result
