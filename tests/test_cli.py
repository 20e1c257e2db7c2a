"""Tests for the command line interface."""

from unittest.mock import patch

from click.testing import CliRunner

import vibe_chronicle.server as srv
from vibe_chronicle.cli import main


def _point_at(monkeypatch, tmp_path, claude, codex, gemini):
    monkeypatch.setenv("VIBE_CHRONICLE_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("VIBE_CHRONICLE_CLAUDE_PATH", str(claude))
    monkeypatch.setenv("VIBE_CHRONICLE_CODEX_PATH", str(codex))
    monkeypatch.setenv("VIBE_CHRONICLE_GEMINI_PATH", str(gemini))


def test_import_command(monkeypatch, tmp_path, tmp_claude_dir, tmp_codex_dir, tmp_gemini_dir):
    _point_at(monkeypatch, tmp_path, tmp_claude_dir, tmp_codex_dir, tmp_gemini_dir)

    runner = CliRunner()
    result = runner.invoke(main, ["import"])
    assert result.exit_code == 0, result.output
    assert "claude: 1 session(s)" in result.output
    assert "gemini: 1 session(s)" in result.output
    assert (tmp_path / "home" / "chronicle.db").exists()

    result = runner.invoke(main, ["import"])
    assert "claude: 0 session(s)" in result.output


def test_serve_shares_orchestrator_with_watcher(monkeypatch, tmp_path, tmp_claude_dir, tmp_codex_dir, tmp_gemini_dir):
    _point_at(monkeypatch, tmp_path, tmp_claude_dir, tmp_codex_dir, tmp_gemini_dir)
    monkeypatch.setattr(srv, "_store", None)
    monkeypatch.setattr(srv, "_orchestrator", None)

    try:
        with patch("vibe_chronicle.cli.uvicorn.run") as mock_run, \
                patch("vibe_chronicle.cli.SessionWatcher") as mock_watcher:
            result = CliRunner().invoke(main, ["serve", "--port", "3999"])

        assert result.exit_code == 0, result.output
        assert "claude: 1 session(s)" in result.output
        mock_run.assert_called_once_with(srv.app, host="127.0.0.1", port=3999, reload=False)
        mock_watcher.assert_called_once_with(srv.get_orchestrator())
        mock_watcher.return_value.start.assert_called_once()
        mock_watcher.return_value.stop.assert_called_once()
        assert srv.get_store().db_path == str(tmp_path / "home" / "chronicle.db")
    finally:
        if srv._store is not None:
            srv._store.close()
