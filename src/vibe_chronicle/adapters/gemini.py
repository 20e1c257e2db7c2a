"""Gemini CLI session adapter.

Reads ~/.gemini/tmp/<project hash>/chats/session-*.json. Each file is one
JSON document with ``sessionId``, ``projectHash``, ``startTime``,
``lastUpdated`` and an embedded ``messages`` list. Message ``type`` is
"user", "gemini" (mapped to assistant) or "info" (dropped). Model reasoning
is stored separately as a ``thoughts`` list of subject/description pairs.
"""

import logging
from pathlib import Path
from typing import Iterable

from ..core import Message, Session
from ..parsing import parse_json_file
from .base import SessionAdapter
from .utils import generate_message_id, truncate

logger = logging.getLogger(__name__)

REFERENCED_FILES_MARKER = "--- Content from referenced files ---"
DEFAULT_SUMMARY = "Gemini session"

_ROLE_MAP = {"user": "user", "gemini": "assistant", "assistant": "assistant"}


class GeminiAdapter(SessionAdapter):
    """Adapter for Gemini CLI JSON session documents."""

    name = "gemini"

    def iter_session_files(self, source_dir: Path) -> Iterable[Path]:
        for project_dir in sorted(source_dir.iterdir()):
            chats_dir = project_dir / "chats"
            try:
                if not chats_dir.is_dir():
                    continue
                files = sorted(chats_dir.glob("session-*.json"))
            except PermissionError as e:
                logger.warning("Skipping unreadable Gemini directory %s: %s", project_dir, e)
                continue
            yield from files

    def import_file(self, path: Path) -> bool:
        result = parse_json_file(path)
        if not result.records:
            return False

        data = result.records[0]
        if not isinstance(data, dict):
            logger.warning("Unexpected Gemini session shape in %s", path)
            return False

        session_id = data.get("sessionId") or path.stem
        if self.store.session_exists(session_id):
            return False

        raw_messages = data.get("messages")
        if not isinstance(raw_messages, list) or not raw_messages:
            return False

        project_hash = data.get("projectHash") or "unknown"
        summary = None
        messages = []

        for i, entry in enumerate(raw_messages):
            if not isinstance(entry, dict):
                continue

            msg_type = _ROLE_MAP.get(entry.get("type", ""))
            if msg_type is None:
                # "info" and other status entries
                continue

            content = _extract_text(entry.get("content"))

            if msg_type == "user" and not summary and content:
                summary = summary_from_prompt(content)

            messages.append(Message(
                id=entry.get("id") or generate_message_id(session_id, i),
                session_id=session_id,
                type=msg_type,
                content=content,
                thinking=format_thoughts(entry.get("thoughts")),
                timestamp=entry.get("timestamp"),
                position=i,
            ))

        timestamps = [m.timestamp for m in messages if m.timestamp]
        self._save(Session(
            id=session_id,
            tool=self.name,
            project=f"gemini-{project_hash[:8]}",
            started_at=data.get("startTime") or (timestamps[0] if timestamps else None),
            ended_at=data.get("lastUpdated") or (timestamps[-1] if timestamps else None),
            summary=summary or DEFAULT_SUMMARY,
        ), messages)
        return True


def summary_from_prompt(content: str) -> str | None:
    """Strip attached file contents from a prompt; ignore bare file paths."""
    cleaned = content.split(REFERENCED_FILES_MARKER)[0].strip()
    if not cleaned or cleaned.startswith("/"):
        return None
    return truncate(cleaned)


def format_thoughts(thoughts) -> str | None:
    """Render ``[{"subject": ..., "description": ...}]`` as markdown paragraphs."""
    if not isinstance(thoughts, list):
        return None

    parts = []
    for thought in thoughts:
        if not isinstance(thought, dict):
            continue
        subject = thought.get("subject") or ""
        description = thought.get("description") or ""
        if subject:
            parts.append(f"**{subject}**\n{description}")
        elif description:
            parts.append(description)
    return "\n\n".join(parts) if parts else None


def _extract_text(content) -> str | None:
    # Newer CLI versions store content as a list of {"text": ...} parts
    if isinstance(content, list):
        texts = [part.get("text", "") for part in content if isinstance(part, dict)]
        content = "\n".join(t for t in texts if t)
    return content if isinstance(content, str) and content else None
