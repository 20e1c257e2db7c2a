"""Shared test fixtures for vibe-chronicle."""

import json

import pytest

from vibe_chronicle.config import ToolConfig
from vibe_chronicle.storage import SQLiteStore


def _write_jsonl(path, entries):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(json.dumps(e) for e in entries), encoding="utf-8")
    return path


@pytest.fixture
def store(tmp_path):
    """A fresh SQLite store in a temporary directory."""
    db = SQLiteStore(tmp_path / "data" / "chronicle.db")
    yield db
    db.close()


@pytest.fixture
def tmp_claude_dir(tmp_path):
    """Create a synthetic Claude Code projects directory.

    Includes:
    - A summary entry
    - User text as a plain string and as content blocks
    - Assistant text + thinking blocks
    - tool_use-only assistant entry (no text, content is None)
    - Skipped entry types and one malformed line
    """
    projects = tmp_path / "claude" / "projects"
    project_dir = projects / "-Users-testuser-dev-myapp"

    lines = [
        json.dumps({"type": "summary", "summary": "Refactor the auth module"}),
        json.dumps({
            "type": "user",
            "uuid": "uuid-001",
            "message": {"role": "user", "content": "Help me refactor the auth module"},
            "timestamp": "2025-01-20T10:00:00Z",
        }),
        json.dumps({
            "type": "assistant",
            "uuid": "uuid-002",
            "message": {"role": "assistant", "content": [
                {"type": "thinking", "thinking": "First pass"},
                {"type": "text", "text": "Let me read the code."},
                {"type": "thinking", "thinking": "Split validation from refresh"},
                {"type": "text", "text": "Starting with auth.ts"},
            ]},
            "timestamp": "2025-01-20T10:00:30Z",
        }),
        json.dumps({"type": "file-history-snapshot", "files": [{"path": "/src/auth.ts"}]}),
        "{not valid json",
        json.dumps({
            "type": "assistant",
            "message": {"role": "assistant", "content": [
                {"type": "tool_use", "id": "toolu_001", "name": "Read", "input": {"file_path": "/src/auth.ts"}},
            ]},
            "timestamp": "2025-01-20T10:01:00Z",
        }),
        "",
        json.dumps({"type": "progress", "data": {"type": "hook_progress"}}),
    ]
    project_dir.mkdir(parents=True)
    (project_dir / "session-001.jsonl").write_text("\n".join(lines), encoding="utf-8")

    return projects


@pytest.fixture
def tmp_codex_dir(tmp_path):
    """Create a synthetic Codex sessions tree (nested by date)."""
    sessions = tmp_path / "codex" / "sessions"
    _write_jsonl(sessions / "2025" / "01" / "22" / "rollout-2025-01-22-abc123.jsonl", [
        {
            "type": "session_meta",
            "timestamp": "2025-01-22T08:00:00Z",
            "payload": {"id": "abc123", "cwd": "/Users/testuser/dev/api-server"},
        },
        {
            "type": "response_item",
            "timestamp": "2025-01-22T08:00:01Z",
            "payload": {"type": "message", "role": "user", "content": [
                {"type": "input_text", "text": "<environment_context>\n  <cwd>/Users/testuser</cwd>\n</environment_context>"},
            ]},
        },
        {
            "type": "response_item",
            "timestamp": "2025-01-22T08:00:05Z",
            "payload": {"type": "message", "role": "user", "content": [
                {"type": "input_text", "text": "Why is /api/users returning 500?"},
            ]},
        },
        {
            "type": "response_item",
            "timestamp": "2025-01-22T08:00:10Z",
            "payload": {"type": "reasoning", "summary": []},
        },
        {
            "type": "response_item",
            "timestamp": "2025-01-22T08:00:20Z",
            "payload": {"type": "message", "role": "assistant", "content": [
                {"type": "output_text", "output_text": "The query is missing a join."},
                {"type": "output_text", "text": "Let me check the logs."},
            ]},
        },
        {"type": "event_msg", "timestamp": "2025-01-22T08:00:21Z", "payload": {"type": "token_count"}},
    ])
    return sessions


@pytest.fixture
def tmp_gemini_dir(tmp_path):
    """Create a synthetic Gemini CLI tmp directory with one chats folder."""
    base = tmp_path / "gemini" / "tmp"
    chats = base / "9f86d081884c7d659a2feaa0c55ad015" / "chats"
    chats.mkdir(parents=True)

    document = {
        "sessionId": "gem-session-001",
        "projectHash": "9f86d081884c7d659a2feaa0c55ad015",
        "startTime": "2025-02-01T09:00:00Z",
        "lastUpdated": "2025-02-01T09:05:00Z",
        "messages": [
            {"id": "m1", "type": "user", "content": "/src/app.py", "timestamp": "2025-02-01T09:00:00Z"},
            {
                "id": "m2",
                "type": "user",
                "content": "What does this do?\n--- Content from referenced files ---\nprint('hi')",
                "timestamp": "2025-02-01T09:00:10Z",
            },
            {"type": "info", "content": "Request cancelled."},
            {
                "id": "m4",
                "type": "gemini",
                "content": "It prints a greeting.",
                "timestamp": "2025-02-01T09:00:20Z",
                "thoughts": [
                    {"subject": "Reading the file", "description": "It has a single print call."},
                    {"subject": "", "description": "Answer briefly."},
                ],
            },
        ],
    }
    (chats / "session-2025-02-01T09-00-gem1.json").write_text(json.dumps(document), encoding="utf-8")
    (chats / "logs.json").write_text("[]", encoding="utf-8")
    return base


@pytest.fixture
def tools(tmp_claude_dir, tmp_codex_dir, tmp_gemini_dir):
    """Tool configs pointed at the synthetic source trees."""
    return [
        ToolConfig(id="claude", name="Claude Code", default_path=tmp_claude_dir, importer="claude"),
        ToolConfig(id="codex", name="Codex", default_path=tmp_codex_dir, importer="codex"),
        ToolConfig(id="gemini", name="Gemini", default_path=tmp_gemini_dir, importer="gemini"),
    ]


@pytest.fixture
def write_jsonl():
    """Return a helper that writes a list of entries as a JSONL file."""
    return _write_jsonl
