"""SQLite persistence for imported sessions and messages.

The import pipeline only depends on the three-method ``SessionStore``
protocol; ``SQLiteStore`` is the implementation used by the CLI and API.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Protocol

from .core import Message, Session

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    tool TEXT NOT NULL,
    project TEXT,
    project_path TEXT,
    started_at TEXT,
    ended_at TEXT,
    message_count INTEGER DEFAULT 0,
    summary TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS messages (
    id TEXT NOT NULL,
    session_id TEXT NOT NULL,
    type TEXT NOT NULL,
    content TEXT,
    timestamp TEXT,
    tool_name TEXT,
    tool_input TEXT,
    tool_output TEXT,
    thinking TEXT,
    position INTEGER,
    PRIMARY KEY (session_id, id),
    FOREIGN KEY (session_id) REFERENCES sessions(id)
);

CREATE TABLE IF NOT EXISTS stars (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT NOT NULL,
    message_id TEXT NOT NULL,
    tag TEXT NOT NULL,
    note TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(session_id, message_id, tag)
);

CREATE INDEX IF NOT EXISTS idx_messages_session ON messages(session_id);
CREATE INDEX IF NOT EXISTS idx_sessions_tool ON sessions(tool);
CREATE INDEX IF NOT EXISTS idx_sessions_project ON sessions(project);
CREATE INDEX IF NOT EXISTS idx_stars_session ON stars(session_id);
"""

_SESSION_COLUMNS = (
    "id", "tool", "project", "project_path", "started_at",
    "ended_at", "message_count", "summary",
)


class SessionStore(Protocol):
    """Storage operations the import pipeline relies on."""

    def session_exists(self, session_id: str) -> bool:
        ...

    def upsert_session(self, session: Session) -> None:
        ...

    def insert_messages(self, session_id: str, messages: Iterable[Message]) -> None:
        ...


class SQLiteStore:
    """Session store backed by a local SQLite database."""

    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        # The watcher imports from a timer thread
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(SCHEMA)
        self._conn.commit()
        logger.debug("Opened database %s", self.db_path)

    def close(self) -> None:
        self._conn.close()

    # ── Import pipeline interface ────────────────────────────────────

    def session_exists(self, session_id: str) -> bool:
        row = self._conn.execute("SELECT 1 FROM sessions WHERE id = ?", (session_id,)).fetchone()
        return row is not None

    def upsert_session(self, session: Session) -> None:
        """Insert a session, or refresh its count, end time and summary."""
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO sessions (id, tool, project, project_path, started_at,
                                      ended_at, message_count, summary)
                VALUES (:id, :tool, :project, :project_path, :started_at,
                        :ended_at, :message_count, :summary)
                ON CONFLICT(id) DO UPDATE SET
                    message_count = excluded.message_count,
                    ended_at = excluded.ended_at,
                    summary = excluded.summary
                """,
                {key: getattr(session, key) for key in _SESSION_COLUMNS},
            )

    def insert_messages(self, session_id: str, messages: Iterable[Message]) -> None:
        """Insert all messages of a session in one transaction."""
        rows = [
            {
                "id": msg.id,
                "session_id": session_id,
                "type": msg.type,
                "content": msg.content or None,
                "timestamp": msg.timestamp or None,
                "tool_name": msg.tool_name or None,
                "tool_input": json.dumps(msg.tool_input) if msg.tool_input else None,
                "tool_output": msg.tool_output or None,
                "thinking": msg.thinking or None,
                "position": msg.position,
            }
            for msg in messages
        ]
        with self._conn:
            self._conn.executemany(
                """
                INSERT OR REPLACE INTO messages (id, session_id, type, content, timestamp,
                                                 tool_name, tool_input, tool_output,
                                                 thinking, position)
                VALUES (:id, :session_id, :type, :content, :timestamp,
                        :tool_name, :tool_input, :tool_output, :thinking, :position)
                """,
                rows,
            )

    # ── Read accessors ───────────────────────────────────────────────

    def get_session(self, session_id: str) -> Session | None:
        row = self._conn.execute(
            f"SELECT {', '.join(_SESSION_COLUMNS)} FROM sessions WHERE id = ?",
            (session_id,),
        ).fetchone()
        return Session(**dict(row)) if row else None

    def list_sessions(self, tool: str | None = None, project: str | None = None) -> list[Session]:
        query = f"SELECT {', '.join(_SESSION_COLUMNS)} FROM sessions"
        clauses, params = [], []
        if tool:
            clauses.append("tool = ?")
            params.append(tool)
        if project:
            clauses.append("project = ?")
            params.append(project)
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY started_at DESC"

        return [Session(**dict(row)) for row in self._conn.execute(query, params)]

    def get_messages(self, session_id: str) -> list[Message]:
        rows = self._conn.execute(
            """
            SELECT id, session_id, type, content, thinking, timestamp,
                   tool_name, tool_input, tool_output, position
            FROM messages WHERE session_id = ? ORDER BY position ASC
            """,
            (session_id,),
        ).fetchall()

        messages = []
        for row in rows:
            data = dict(row)
            if data["tool_input"]:
                data["tool_input"] = json.loads(data["tool_input"])
            messages.append(Message(**data))
        return messages

    def count_sessions_by_tool(self) -> dict[str, int]:
        rows = self._conn.execute("SELECT tool, COUNT(*) AS cnt FROM sessions GROUP BY tool")
        return {row["tool"]: row["cnt"] for row in rows}
