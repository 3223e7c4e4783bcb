# codebook-outline tools config (how tools run). Edit as needed.
# Read by codebook_outline.config.load_tools_config(); only literal assignments are used.

# Default model for every tool without its own entry in LLM_MODELS.
# `codebook-outline config set-llm-model <id>` rewrites this line.
LLM_MODEL = "openai/gpt-4o-mini"

# Optional per-tool overrides. Keys are tool names ("summary", "qa"); a "default" key
# would take precedence over LLM_MODEL for all tools.
LLM_MODELS = {
    # "summary": "anthropic/claude-3-haiku",
    # "qa": "openai/gpt-4o",
}
