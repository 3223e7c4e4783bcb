import json
import shutil
from pathlib import Path

from codebook_outline import config
from codebook_outline.llm import get_client


class TestDocumentRegistry:
    def test_defaults_without_file(self, config_env) -> None:
        data = config.load_config()
        assert data["documents"] == {}
        assert data["_no_file"]
        assert config.get_config_path() == config_env.resolve()

    def test_add_document(self, config_env, document_dir) -> None:
        result = config.add_document("fire2016", "fire2016")
        assert result["ok"]
        assert result["resolved_path"] == str(document_dir.resolve())
        assert json.loads(config_env.read_text())["documents"] == {"fire2016": "fire2016"}
        # single registered document is used when no current document is set
        assert config.get_default_document_path(None) == document_dir.resolve()

    def test_add_invalid_document(self, config_env, tmp_path) -> None:
        (tmp_path / "empty").mkdir()
        result = config.add_document("empty", "empty")
        assert not result["ok"]
        assert "outline.json not found" in result["error"]
        assert not config.add_document("  ", "fire2016")["ok"]

    def test_current_and_selection(self, config_env, document_dir) -> None:
        config.add_document("fire2016", "fire2016")
        assert not config.set_current_document("missing")["ok"]
        assert config.set_current_document("fire2016")["ok"]
        assert not config.select_documents(["fire2016", "missing"])["ok"]
        result = config.select_documents(["fire2016", "fire2016"])
        assert result["config"]["selected_documents"] == ["fire2016"]
        assert list(config.get_selected_document_paths()) == ["fire2016"]

    def test_remove_document_clears_references(self, config_env, document_dir) -> None:
        config.add_document("fire2016", "fire2016")
        config.set_current_document("fire2016")
        config.select_documents(["fire2016"])
        assert config.remove_document("fire2016")["ok"]
        data = config.load_config()
        assert data["documents"] == {}
        assert data["current_document"] is None
        assert data["selected_documents"] == []
        assert not config.remove_document("fire2016")["ok"]

    def test_empty_selection_means_all(self, config_env, document_dir) -> None:
        config.add_document("fire2016", "fire2016")
        assert config.get_selected_document_paths() == {"fire2016": document_dir.resolve()}


class TestToolsConfig:
    def test_defaults(self, config_env) -> None:
        tools = config.load_tools_config()
        assert tools == {"llm_model": config.DEFAULT_LLM_MODEL, "llm_models": {}}
        assert config.get_llm_model("qa") is None

    def test_set_llm_model(self, config_env) -> None:
        assert config.set_llm_model("anthropic/claude-3-haiku")["ok"]
        assert config.load_tools_config()["llm_model"] == "anthropic/claude-3-haiku"
        assert config.set_llm_model("openai/gpt-4o")["ok"]
        assert config.load_tools_config()["llm_model"] == "openai/gpt-4o"
        assert not config.set_llm_model(" ")["ok"]

    def test_per_tool_models(self, config_env, tmp_path) -> None:
        (tmp_path / "codebook_tools.py").write_text(
            'LLM_MODEL = "base/model"\nLLM_MODELS = {"qa": "qa/model"}\n', encoding="utf-8"
        )
        assert get_client(tool="qa").default_model == "qa/model"
        assert get_client(tool="summary").default_model == "base/model"
        assert get_client(model="explicit/model").default_model == "explicit/model"

    def test_set_llm_model_applies_to_every_tool_with_shipped_file(self, config_env, tmp_path) -> None:
        shipped = Path(__file__).resolve().parents[1] / "codebook_tools.py"
        shutil.copyfile(shipped, tmp_path / "codebook_tools.py")
        result = config.set_llm_model("anthropic/claude-3-haiku")
        assert result["ok"]
        assert "overridden_by" not in result
        assert config.get_llm_model("summary") == "anthropic/claude-3-haiku"
        assert config.get_llm_model("qa") == "anthropic/claude-3-haiku"

    def test_set_llm_model_reports_overrides(self, config_env, tmp_path) -> None:
        (tmp_path / "codebook_tools.py").write_text(
            'LLM_MODEL = "base/model"\nLLM_MODELS = {"default": "pinned/model"}\n', encoding="utf-8"
        )
        result = config.set_llm_model("anthropic/claude-3-haiku")
        assert result["ok"]
        assert result["overridden_by"] == {"default": "pinned/model"}
        assert config.get_llm_model("qa") == "pinned/model"
