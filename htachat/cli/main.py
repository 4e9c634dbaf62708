"""Main CLI entry point for HTA Chat."""

import asyncio

import typer
from rich.console import Console

from htachat import __version__
from htachat.i18n import _
from htachat.utils.config import get_settings
from htachat.utils.logging import configure_logging

from .commands import sessions

app = typer.Typer(
    name="htachat",
    help="💬 HTA Chatbot: a terminal client for Gemini with saved conversations",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main() -> None:
    """
    HTA Chat - talk to Gemini from your terminal.

    Conversations are saved automatically and can be resumed later.
    """
    settings = get_settings()
    configure_logging(
        log_level="DEBUG" if settings.debug else settings.log_level,
        json_logs=settings.json_logs,
        dev_mode=not settings.json_logs,
    )


@app.command("chat")
def chat(
    session_id: str | None = typer.Option(
        None, "--session", "-s", help="Resume a saved conversation (ID or prefix)"
    ),
) -> None:
    """Start an interactive conversation."""
    from htachat.cli.ui.chat import InteractiveChatUI
    from htachat.services.chat import ChatService

    ui = InteractiveChatUI(ChatService.from_settings())
    asyncio.run(ui.start(session_id))


@app.command("version")
def version() -> None:
    """Show the version and exit."""
    console.print(f"[bold blue]HTA Chat[/bold blue] {_('session-version', version=__version__)}")


app.add_typer(sessions.app, name="sessions", help="🗂️  Manage saved conversations")


if __name__ == "__main__":
    app()
