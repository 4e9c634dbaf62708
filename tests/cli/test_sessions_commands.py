"""Tests for the htachat command line."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from htachat import __version__
from htachat.ai.domain.message import Message
from htachat.ai.session import SessionManager, get_session_store
from htachat.cli.main import app

runner = CliRunner()


@pytest.fixture
def saved_sessions() -> list[str]:
    """Two conversations persisted in the configured data directory."""
    manager = SessionManager(get_session_store())
    manager.initialize()
    first = manager.persist_turn(None, [Message.user("Weather"), Message.assistant("Sunny")])
    second = manager.persist_turn(None, [Message.user("Pho recipe"), Message.assistant("Broth")])
    return [first, second]


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestSessionsCommands:
    """Test the sessions command group."""

    def test_list_empty(self):
        result = runner.invoke(app, ["sessions", "list"])
        assert result.exit_code == 0

    def test_list(self, saved_sessions: list[str]):
        result = runner.invoke(app, ["sessions", "list"])
        assert result.exit_code == 0
        assert "Weather" in result.stdout
        assert saved_sessions[1][:8] in result.stdout

    def test_show_by_prefix(self, saved_sessions: list[str]):
        result = runner.invoke(app, ["sessions", "show", saved_sessions[0][:8]])
        assert result.exit_code == 0
        assert "Sunny" in result.stdout

    def test_show_missing(self, saved_sessions: list[str]):
        result = runner.invoke(app, ["sessions", "show", "does-not-exist"])
        assert result.exit_code == 1

    def test_delete_with_force(self, saved_sessions: list[str]):
        result = runner.invoke(app, ["sessions", "delete", saved_sessions[0], "--force"])
        assert result.exit_code == 0

        remaining = get_session_store().load()
        assert [s.id for s in remaining] == [saved_sessions[1]]

    def test_delete_declined(self, saved_sessions: list[str]):
        result = runner.invoke(app, ["sessions", "delete", saved_sessions[0]], input="n\n")
        assert result.exit_code != 0
        assert len(get_session_store().load()) == 2

    def test_search(self, saved_sessions: list[str]):
        result = runner.invoke(app, ["sessions", "search", "broth"])
        assert result.exit_code == 0
        assert "Pho recipe" in result.stdout
        assert "Weather" not in result.stdout

    def test_export_json(self, saved_sessions: list[str], tmp_path: Path):
        output = tmp_path / "export.json"
        result = runner.invoke(
            app,
            ["sessions", "export", saved_sessions[0], "--format", "json", "--output", str(output)],
        )
        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["id"] == saved_sessions[0]

    def test_export_unknown_format(self, saved_sessions: list[str]):
        result = runner.invoke(app, ["sessions", "export", saved_sessions[0], "--format", "pdf"])
        assert result.exit_code == 1
