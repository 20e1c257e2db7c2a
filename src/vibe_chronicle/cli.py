"""CLI entry point for vibe-chronicle."""

import logging

import click
import uvicorn

from .config import get_db_path
from .importer import create_orchestrator
from .storage import SQLiteStore
from .watcher import SessionWatcher


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Explore transcripts from Claude Code, Codex and Gemini CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_stats(stats: dict[str, int]) -> None:
    for tool_id, count in stats.items():
        click.echo(f"  {tool_id}: {count} session(s)")


@main.command("import")
def import_sessions():
    """Import new sessions without starting the server."""
    store = SQLiteStore(get_db_path())
    try:
        click.echo("Importing sessions...")
        _print_stats(create_orchestrator(store).import_all())
    finally:
        store.close()


@main.command()
@click.option("--port", default=3000, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option("--no-import", "skip_import", is_flag=True, help="Skip the startup import.")
@click.option("--no-watch", "no_watch", is_flag=True, help="Do not watch for new sessions.")
def serve(port: int, host: str, skip_import: bool, no_watch: bool):
    """Start the web API."""
    from . import server

    orchestrator = server.get_orchestrator()

    if not skip_import:
        click.echo("Importing sessions...")
        _print_stats(orchestrator.import_all())

    watcher = None
    if not no_watch:
        watcher = SessionWatcher(orchestrator)
        watcher.start()

    click.echo(f"Starting vibe-chronicle on http://{host}:{port}")
    try:
        uvicorn.run(server.app, host=host, port=port, reload=False)
    finally:
        if watcher is not None:
            watcher.stop()
