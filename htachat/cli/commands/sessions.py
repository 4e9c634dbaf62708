"""Saved conversation commands."""

from pathlib import Path

import typer
from rich.console import Console

from htachat.ai.session import SessionManager, get_session_store
from htachat.cli.ui.renderer import render_conversation, sessions_table
from htachat.i18n import _

app = typer.Typer(no_args_is_help=True)
console = Console()


def _manager() -> SessionManager:
    manager = SessionManager(get_session_store())
    manager.initialize()
    return manager


def _resolve(manager: SessionManager, session_id: str) -> str:
    resolved = manager.resolve_id(session_id)
    if resolved is None:
        console.print(f"[red]{_('session-not-found', id=session_id)}[/red]")
        raise typer.Exit(1)
    return resolved


@app.command("list")
def list_sessions(
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum sessions to show"),
) -> None:
    """List saved conversations, most recent first."""
    manager = _manager()
    sessions = manager.list_sessions(limit=limit)
    if not sessions:
        console.print(f"[dim]{_('sessions-empty')}[/dim]")
        return

    console.print(sessions_table(sessions))
    stats = manager.get_stats()
    console.print(f"[dim]{_('sessions-stats', **stats)}[/dim]")


@app.command("show")
def show_session(session_id: str = typer.Argument(..., help="Session ID or prefix")) -> None:
    """Print a saved conversation."""
    manager = _manager()
    session = manager.get_session(_resolve(manager, session_id))
    if session is None:
        raise typer.Exit(1)

    console.print(f"\n[bold blue]{session.title}[/bold blue]\n")
    render_conversation(console, session)


@app.command("delete")
def delete_session(
    session_id: str = typer.Argument(..., help="Session ID or prefix"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a saved conversation."""
    manager = _manager()
    resolved = _resolve(manager, session_id)

    if not force and not typer.confirm(f"Delete {resolved[:8]}?"):
        raise typer.Abort()

    manager.delete_session(resolved)
    console.print(f"[green]{_('session-deleted', id=resolved[:8])}[/green]")


@app.command("search")
def search_sessions(
    query: str = typer.Argument(..., help="Text to look for in titles and messages"),
    limit: int = typer.Option(20, "--limit", "-n"),
) -> None:
    """Find conversations containing a phrase."""
    results = _manager().search_sessions(query, limit=limit)
    if not results:
        console.print(f"[dim]{_('sessions-empty')}[/dim]")
        return
    console.print(sessions_table(results))


@app.command("export")
def export_session(
    session_id: str = typer.Argument(..., help="Session ID or prefix"),
    format: str = typer.Option("markdown", "--format", "-f", help="markdown or json"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file"),
) -> None:
    """Export a conversation transcript to a file."""
    manager = _manager()
    path = manager.export_session(_resolve(manager, session_id), format=format, output_path=output)
    if path is None:
        console.print(f"[red]{_('session-export-failed')}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{_('session-exported', path=path)}[/green]")
