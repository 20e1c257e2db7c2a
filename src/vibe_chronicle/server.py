"""FastAPI web server for vibe-chronicle."""

import logging

from fastapi import FastAPI, HTTPException, Query

from .config import get_db_path, get_tools
from .importer import ImportOrchestrator, create_orchestrator
from .masking import mask_message
from .storage import SQLiteStore

logger = logging.getLogger(__name__)

app = FastAPI(title="vibe-chronicle", version="0.1.0")

# Store and orchestrator cache (built on first use)
_store: SQLiteStore | None = None
_orchestrator: ImportOrchestrator | None = None


def get_store() -> SQLiteStore:
    """Lazily open and cache the session store."""
    global _store
    if _store is None:
        _store = SQLiteStore(get_db_path())
        logger.info("Using database %s", _store.db_path)
    return _store


def get_orchestrator() -> ImportOrchestrator:
    """Return the orchestrator shared by the API and the file watcher."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = create_orchestrator(get_store())
    return _orchestrator


# ── Routes ───────────────────────────────────────────────────────


@app.get("/api/tools")
async def get_tool_list():
    """Return the supported AI tools (without their paths)."""
    return {
        "tools": [
            {"id": t.id, "name": t.name, "enabled": t.enabled}
            for t in get_tools()
        ]
    }


@app.get("/api/sessions")
async def get_sessions(
    tool: str | None = Query(None, description="Filter by tool id"),
    project: str | None = Query(None, description="Filter by project"),
    search: str | None = Query(None, description="Search in summaries and projects"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    """Return imported sessions, newest first."""
    sessions = get_store().list_sessions(tool=tool, project=project)

    if search:
        search_lower = search.lower()
        sessions = [
            s for s in sessions
            if search_lower in (s.summary or "").lower()
            or search_lower in (s.project or "").lower()
        ]

    total = len(sessions)
    sessions = sessions[offset: offset + limit]

    return {
        "total": total,
        "sessions": [s.to_dict() for s in sessions],
    }


@app.get("/api/sessions/{session_id}")
async def get_session(session_id: str):
    """Return one session with its messages, secrets masked."""
    store = get_store()
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    return {
        "session": session.to_dict(),
        "messages": [mask_message(m.to_dict()) for m in store.get_messages(session_id)],
    }


@app.post("/api/import")
def run_import():
    """Import new sessions from every enabled tool."""
    stats = get_orchestrator().import_all()
    return {"imported": stats}
