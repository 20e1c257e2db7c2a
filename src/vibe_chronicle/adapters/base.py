"""Abstract base class for session adapters."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from ..core import Message, Session
from ..storage import SessionStore

logger = logging.getLogger(__name__)


class SessionAdapter(ABC):
    """Base class for per-tool transcript importers.

    Each adapter (Claude Code, Codex, Gemini) knows where its tool keeps
    session files and how to normalize one file into a Session plus its
    Messages. The shared ``import_sessions`` loop isolates failures per file
    and skips sessions that are already stored, so it is safe to re-run.
    """

    name: str  # "claude", "codex", "gemini"

    def __init__(self, store: SessionStore):
        self.store = store

    def import_sessions(self, source_dir: Path) -> int:
        """Import every new session under ``source_dir``. Returns the count imported."""
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            logger.info("%s path not found: %s", self.name, source_dir)
            return 0

        imported = 0
        for path in self.iter_session_files(source_dir):
            try:
                if self.import_file(path):
                    imported += 1
            except Exception:
                logger.exception("Failed to import %s session file %s", self.name, path)

        return imported

    @abstractmethod
    def iter_session_files(self, source_dir: Path) -> Iterable[Path]:
        """Yield the session files found under ``source_dir``."""
        ...

    @abstractmethod
    def import_file(self, path: Path) -> bool:
        """Import one session file. Returns False when it was skipped."""
        ...

    def _save(self, session: Session, messages: list[Message]) -> None:
        session.message_count = len(messages)
        self.store.upsert_session(session)
        if messages:
            self.store.insert_messages(session.id, messages)
        logger.debug("Imported %s session %s (%d messages)", self.name, session.id, len(messages))
