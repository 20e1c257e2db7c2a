"""Run the session adapters for every configured tool."""

import logging
import threading

from .adapters import SessionAdapter, create_default_adapters
from .config import ToolConfig, get_tools
from .storage import SessionStore

logger = logging.getLogger(__name__)


class ImportOrchestrator:
    """Dispatches each enabled tool to its adapter, one tool at a time.

    A failing tool is logged and counted as zero; the remaining tools still
    run. Imports are serialized: the watcher thread and the API may both
    trigger one, and only one adapter runs at a time.
    """

    def __init__(self, adapters: dict[str, SessionAdapter], tools: list[ToolConfig]):
        self._adapters = dict(adapters)
        self.tools = list(tools)
        self._lock = threading.Lock()

    def register_adapter(self, name: str, adapter: SessionAdapter) -> None:
        self._adapters[name] = adapter

    def available_adapters(self) -> list[str]:
        return list(self._adapters)

    def enabled_tools(self) -> list[ToolConfig]:
        return [t for t in self.tools if t.enabled]

    def import_all(self) -> dict[str, int]:
        """Import every enabled tool. Returns imported session counts by tool id."""
        return {tool.id: self._run(tool) for tool in self.enabled_tools()}

    def import_tool(self, tool_id: str) -> int:
        for tool in self.enabled_tools():
            if tool.id == tool_id:
                return self._run(tool)
        logger.warning("No enabled tool named %s", tool_id)
        return 0

    def _run(self, tool: ToolConfig) -> int:
        adapter = self._adapters.get(tool.importer)
        if adapter is None:
            logger.warning("No importer found for %s (%s)", tool.name, tool.importer)
            return 0

        with self._lock:
            try:
                count = adapter.import_sessions(tool.default_path)
            except Exception as e:
                logger.error("Error importing %s: %s", tool.name, e)
                return 0

        if count:
            logger.info("Imported %d %s session(s)", count, tool.name)
        return count


def create_orchestrator(store: SessionStore, tools: list[ToolConfig] | None = None) -> ImportOrchestrator:
    """Build an orchestrator wired to the built-in adapters."""
    return ImportOrchestrator(create_default_adapters(store), tools if tools is not None else get_tools())
