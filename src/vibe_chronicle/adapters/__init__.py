"""Per-tool session adapters and the default adapter mapping."""

from ..storage import SessionStore
from .base import SessionAdapter
from .claude_code import ClaudeCodeAdapter
from .codex import CodexAdapter
from .gemini import GeminiAdapter

ADAPTER_CLASSES: list[type[SessionAdapter]] = [ClaudeCodeAdapter, CodexAdapter, GeminiAdapter]


def create_default_adapters(store: SessionStore) -> dict[str, SessionAdapter]:
    """Build one adapter per supported tool, keyed by importer name."""
    return {cls.name: cls(store) for cls in ADAPTER_CLASSES}
