"""Core data models for vibe-chronicle."""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class Session:
    """A single imported conversation, one per source file."""

    id: str
    tool: str  # "claude" | "codex" | "gemini"
    project: Optional[str] = None
    project_path: Optional[str] = None
    started_at: Optional[str] = None  # ISO 8601, as found in the source
    ended_at: Optional[str] = None
    message_count: int = 0
    summary: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Message:
    """A single normalized user or assistant turn."""

    id: str
    session_id: str
    type: str  # "user" | "assistant"
    content: Optional[str] = None
    thinking: Optional[str] = None
    timestamp: Optional[str] = None
    tool_name: Optional[str] = None
    tool_input: Optional[Any] = None
    tool_output: Optional[str] = None
    position: int = 0  # raw record index in the source file

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ParseResult:
    """Raw records decoded from one source file."""

    records: list = field(default_factory=list)
    errors: int = 0

    def __len__(self) -> int:
        return len(self.records)
