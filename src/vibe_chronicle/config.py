"""Tool registry and path resolution for session sources."""

import os
from dataclasses import dataclass
from pathlib import Path

DEBOUNCE_SECONDS = 2.0


@dataclass(frozen=True)
class ToolConfig:
    """One supported AI coding assistant."""

    id: str  # used in the database and the API
    name: str  # display name
    default_path: Path
    importer: str  # key into the orchestrator's adapter mapping
    enabled: bool = True


def get_claude_code_path() -> Path:
    """Return the path to Claude Code's projects directory."""
    env = os.environ.get("VIBE_CHRONICLE_CLAUDE_PATH")
    if env:
        return Path(env)

    return Path.home() / ".claude" / "projects"


def get_codex_path() -> Path:
    """Return the path to Codex CLI's sessions directory."""
    env = os.environ.get("VIBE_CHRONICLE_CODEX_PATH")
    if env:
        return Path(env)

    return Path.home() / ".codex" / "sessions"


def get_gemini_path() -> Path:
    """Return the path to Gemini CLI's per-project tmp directory."""
    env = os.environ.get("VIBE_CHRONICLE_GEMINI_PATH")
    if env:
        return Path(env)

    return Path.home() / ".gemini" / "tmp"


def get_data_dir() -> Path:
    """Return the directory holding the chronicle database."""
    env = os.environ.get("VIBE_CHRONICLE_HOME")
    if env:
        return Path(env)

    return Path.home() / ".vibe-chronicle"


def get_db_path() -> Path:
    return get_data_dir() / "chronicle.db"


def _disabled_tool_ids() -> set[str]:
    value = os.environ.get("VIBE_CHRONICLE_DISABLED_TOOLS", "")
    return {part.strip() for part in value.split(",") if part.strip()}


def get_tools() -> list[ToolConfig]:
    """Return every supported tool, with paths resolved from the environment."""
    disabled = _disabled_tool_ids()
    tools = [
        ToolConfig(id="claude", name="Claude Code", default_path=get_claude_code_path(), importer="claude"),
        ToolConfig(id="codex", name="Codex", default_path=get_codex_path(), importer="codex"),
        ToolConfig(id="gemini", name="Gemini", default_path=get_gemini_path(), importer="gemini"),
    ]
    return [
        ToolConfig(t.id, t.name, t.default_path, t.importer, enabled=t.id not in disabled)
        for t in tools
    ]


def get_tool(tool_id: str) -> ToolConfig | None:
    for tool in get_tools():
        if tool.id == tool_id:
            return tool
    return None


def get_enabled_tools() -> list[ToolConfig]:
    return [t for t in get_tools() if t.enabled]
