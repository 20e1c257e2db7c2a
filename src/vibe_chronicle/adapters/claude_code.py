"""Claude Code session adapter.

Reads ~/.claude/projects/, where each project directory holds one JSONL file
per session. The directory name encodes the project path with hyphens
(``-Users-alice-dev-myapp``); the file stem is the session id.

JSONL entry types:
- "user" / "assistant": become messages. ``message.content`` is either a
  string or a list of typed blocks; "text" blocks are joined into the
  content and the last "thinking" block becomes the reasoning text.
- "summary": sets the session summary.
- Everything else (progress, system, file-history-snapshot, ...) is skipped.
"""

import logging
from pathlib import Path
from typing import Iterable

from ..core import Message, Session
from ..parsing import parse_jsonl_file
from .base import SessionAdapter
from .utils import extract_project_name, generate_message_id, truncate

logger = logging.getLogger(__name__)


class ClaudeCodeAdapter(SessionAdapter):
    """Adapter for Claude Code JSONL transcripts."""

    name = "claude"

    def iter_session_files(self, source_dir: Path) -> Iterable[Path]:
        for project_dir in sorted(source_dir.iterdir()):
            if not project_dir.is_dir():
                continue
            yield from sorted(project_dir.glob("*.jsonl"))

    def import_file(self, path: Path) -> bool:
        session_id = path.stem
        if self.store.session_exists(session_id):
            return False

        result = parse_jsonl_file(path)
        if not result.records:
            return False

        summary = None
        first_ts = last_ts = None
        messages = []

        for i, entry in enumerate(result.records):
            if not isinstance(entry, dict):
                continue

            entry_type = entry.get("type", "")
            timestamp = entry.get("timestamp")

            if entry_type == "summary" and isinstance(entry.get("summary"), str):
                summary = truncate(entry["summary"]) or None

            if timestamp:
                if first_ts is None:
                    first_ts = timestamp
                last_ts = timestamp

            if entry_type in ("user", "assistant"):
                content, thinking = _extract_content(entry)
                messages.append(Message(
                    id=entry.get("uuid") or generate_message_id(session_id, i),
                    session_id=session_id,
                    type=entry_type,
                    content=content,
                    thinking=thinking,
                    timestamp=timestamp,
                    position=i,
                ))

        self._save(Session(
            id=session_id,
            tool=self.name,
            project=extract_project_name(path.parent.name),
            project_path=str(path.parent),
            started_at=first_ts,
            ended_at=last_ts,
            summary=summary,
        ), messages)
        return True


def _extract_content(entry: dict) -> tuple[str | None, str | None]:
    """Return (content, thinking) for a user or assistant entry."""
    message = entry.get("message")
    if isinstance(message, dict):
        raw = message.get("content")
        if isinstance(raw, str):
            return raw, None
        if not isinstance(raw, list):
            return None, None

        text_parts = []
        thinking = None
        for block in raw:
            if not isinstance(block, dict):
                continue
            block_type = block.get("type")
            if block_type == "text":
                text_parts.append(block.get("text") or "")
            elif block_type == "thinking":
                thinking = block.get("thinking") or ""
        return ("\n".join(text_parts) if text_parts else None), thinking

    # Older transcripts put plain text at the top level
    content = entry.get("content")
    return (content if isinstance(content, str) else None), None
