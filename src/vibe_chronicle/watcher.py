"""Live re-import of sessions when transcript files change.

Uses `watchfiles` to observe each enabled tool's session directory. A burst
of add/modify events collapses into one import for the tool whose directory
saw the last event.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from watchfiles import Change, watch

from .config import DEBOUNCE_SECONDS
from .importer import ImportOrchestrator

logger = logging.getLogger(__name__)


class Debouncer:
    """Trailing-edge debounce: only the last scheduled key runs.

    ``timer_factory`` is called like ``threading.Timer(delay, fn, args=...)``
    and must return an object with ``start()`` and ``cancel()``.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[str], object],
        timer_factory: Callable = threading.Timer,
    ):
        self.delay = delay
        self._callback = callback
        self._timer_factory = timer_factory
        self._timer = None
        self._token: Optional[object] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def schedule(self, key: str) -> None:
        token = object()
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = self._timer_factory(self.delay, self._fire, args=(key, token))
            if isinstance(timer, threading.Timer):
                timer.daemon = True
            self._timer = timer
            self._token = token
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._token = None

    def _fire(self, key: str, token: object) -> None:
        with self._lock:
            if token is not self._token:
                # Superseded by a later schedule()
                return
            self._timer = None
            self._token = None

        try:
            self._callback(key)
        except Exception:
            logger.exception("Import triggered by file change failed")


def is_session_file(path: Path | str) -> bool:
    """True for files the adapters read: ``*.jsonl`` and ``session-*.json``."""
    path = Path(path)
    if path.suffix == ".jsonl":
        return True
    return path.suffix == ".json" and "session-" in path.name


def _ignore_dotfiles(change: Change, path: str) -> bool:
    return not Path(path).name.startswith(".")


class SessionWatcher:
    """Watches enabled tool directories and re-imports on change."""

    def __init__(
        self,
        orchestrator: ImportOrchestrator,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        timer_factory: Callable = threading.Timer,
    ):
        self.orchestrator = orchestrator
        self._debouncer = Debouncer(debounce_seconds, self._import_tool, timer_factory)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def import_pending(self) -> bool:
        return self._debouncer.pending

    def watch_paths(self) -> dict[str, Path]:
        return {tool.id: Path(tool.default_path) for tool in self.orchestrator.enabled_tools()}

    def tool_for_path(self, path: Path | str) -> str | None:
        """Return the id of the tool whose directory contains ``path``."""
        path = Path(path).resolve()
        for tool_id, base in self.watch_paths().items():
            if path.is_relative_to(base.resolve()):
                return tool_id
        return None

    def handle_change(self, change: Change, path: Path | str) -> bool:
        """Schedule an import for an added or modified session file."""
        if change not in (Change.added, Change.modified):
            return False
        if not is_session_file(path):
            return False

        tool_id = self.tool_for_path(path)
        if tool_id is None:
            return False

        if change == Change.added:
            logger.info("New session file detected: %s", path)
        self._debouncer.schedule(tool_id)
        return True

    def run(self) -> None:
        """Block, dispatching file changes until ``stop()`` is called."""
        paths = []
        for tool_id, base in self.watch_paths().items():
            if base.is_dir():
                paths.append(base)
            else:
                logger.info("Not watching %s, directory not found: %s", tool_id, base)

        if not paths:
            logger.warning("No session directories exist, watcher has nothing to monitor")
            return

        logger.info("Watching for new sessions in %s", ", ".join(str(p) for p in paths))
        try:
            for changes in watch(
                *paths,
                watch_filter=_ignore_dotfiles,
                stop_event=self._stop_event,
                ignore_permission_denied=True,
            ):
                for change, path in changes:
                    self.handle_change(change, path)
        except OSError as e:
            logger.error("Watcher error: %s", e)

    def start(self) -> threading.Thread:
        """Run the watcher on a daemon thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="session-watcher", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        self._stop_event.set()
        self._debouncer.cancel()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def _import_tool(self, tool_id: str) -> int:
        return self.orchestrator.import_tool(tool_id)
