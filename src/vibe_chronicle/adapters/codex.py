"""Codex CLI session adapter.

Reads ~/.codex/sessions/, searched recursively for JSONL files named
``<label>-<session id>.jsonl``. Each line is an envelope of the form
``{"type": ..., "timestamp": ..., "payload": {...}}``:
- "session_meta": ``payload.cwd`` names the working directory.
- "response_item": a user or assistant turn when ``payload.role`` is one of
  those; ``payload.content`` is a list of parts carrying ``text`` or
  ``output_text``.
"""

import logging
from pathlib import Path
from typing import Iterable

from ..core import Message, Session
from ..parsing import parse_jsonl_file
from .base import SessionAdapter
from .utils import generate_message_id, truncate

logger = logging.getLogger(__name__)

ENVIRONMENT_CONTEXT_MARKER = "<environment_context>"


class CodexAdapter(SessionAdapter):
    """Adapter for Codex CLI JSONL rollouts."""

    name = "codex"

    def iter_session_files(self, source_dir: Path) -> Iterable[Path]:
        return sorted(source_dir.rglob("*.jsonl"))

    def import_file(self, path: Path) -> bool:
        session_id = session_id_from_filename(path)
        if self.store.session_exists(session_id):
            return False

        result = parse_jsonl_file(path)
        if not result.records:
            return False

        cwd = None
        summary = None
        first_ts = last_ts = None
        messages = []

        for i, entry in enumerate(result.records):
            if not isinstance(entry, dict):
                continue

            entry_type = entry.get("type", "")
            timestamp = entry.get("timestamp")
            payload = entry.get("payload")
            if not isinstance(payload, dict):
                payload = {}

            if timestamp:
                if first_ts is None:
                    first_ts = timestamp
                last_ts = timestamp

            if entry_type == "session_meta":
                if isinstance(payload.get("cwd"), str) and payload["cwd"]:
                    cwd = payload["cwd"]

            elif entry_type == "response_item":
                role = payload.get("role", "")
                if role not in ("user", "assistant"):
                    continue

                content = _extract_text(payload.get("content"))

                # The first user turn is usually the injected environment block
                if role == "user" and not summary and content:
                    if not content.startswith(ENVIRONMENT_CONTEXT_MARKER):
                        summary = truncate(content)

                messages.append(Message(
                    id=generate_message_id(session_id, i),
                    session_id=session_id,
                    type=role,
                    content=content,
                    timestamp=timestamp,
                    position=i,
                ))

        self._save(Session(
            id=session_id,
            tool=self.name,
            project=project_name_from_cwd(cwd),
            project_path=cwd,
            started_at=first_ts,
            ended_at=last_ts,
            summary=summary,
        ), messages)
        return True


def session_id_from_filename(path: Path) -> str:
    """``rollout-2025-01-01-abc123.jsonl`` -> ``abc123``."""
    return Path(path).stem.split("-")[-1]


def project_name_from_cwd(cwd: str | None) -> str:
    if not isinstance(cwd, str) or not cwd:
        return "unknown"
    return cwd.rstrip("/").split("/")[-1] or cwd


def _extract_text(content) -> str | None:
    if not isinstance(content, list):
        return None

    text_parts = []
    for part in content:
        if isinstance(part, dict):
            text = part.get("text") or part.get("output_text") or ""
            if text:
                text_parts.append(text)
    return "\n".join(text_parts) if text_parts else None
