"""Interactive chat loop for the terminal."""

from __future__ import annotations

import questionary
from rich.console import Console
from rich.panel import Panel

from htachat.cli.ui.renderer import render_conversation, render_message, sessions_table
from htachat.cli.ui.styles import htachat_style
from htachat.exceptions import SessionBusyError, SessionNotFoundError, StoreWriteError
from htachat.i18n import _
from htachat.services.chat import ChatService
from htachat.utils.logging import get_logger

logger = get_logger(__name__)
console = Console()


class InteractiveChatUI:
    """
    Terminal chat interface.

    Blank input is never submitted. Lines starting with "/" are commands.
    """

    def __init__(self, service: ChatService) -> None:
        self.service = service
        self.commands = {
            "/new": self._new_chat,
            "/sessions": self._list_sessions,
            "/open": self._open_chat,
            "/delete": self._delete_chat,
            "/export": self._export_chat,
            "/help": self._show_help,
            "/exit": self._exit_chat,
            "/quit": self._exit_chat,
        }

    async def start(self, session_id: str | None = None) -> None:
        """Run the chat loop until /exit or end of input."""
        self.service.initialize()
        if session_id:
            await self._open_chat(session_id)

        self._show_welcome()

        while True:
            try:
                user_input = await self._get_user_input()
            except KeyboardInterrupt:
                break

            if user_input is None:
                break
            if not user_input:
                continue

            if user_input.startswith("/"):
                if await self._handle_command(user_input) == "exit":
                    break
                continue

            await self._process_message(user_input)

        console.print(f"[dim]{_('chat-goodbye')}[/dim]")

    def _show_welcome(self) -> None:
        provider = self.service.orchestrator.provider
        subtitle = f"{provider.provider_name} • {provider.model}" if provider else "-"
        console.print(
            Panel.fit(
                f"[bold blue]{_('chat-title')}[/bold blue]\n[dim]{subtitle}[/dim]",
                border_style="blue",
                padding=(0, 1),
            )
        )
        render_conversation(console, self.service.current)

    async def _get_user_input(self) -> str | None:
        """Prompt for a line. Returns None at end of input."""
        answer = await questionary.text(
            f"{_('chat-input-prompt')}:",
            style=htachat_style,
            qmark="💬",
        ).ask_async()
        if answer is None:
            return None
        return answer.strip()

    async def _process_message(self, text: str) -> None:
        try:
            with console.status(f"[dim]{_('chat-thinking')}[/dim]"):
                session = await self.service.send(text)
        except SessionBusyError:
            console.print(f"[yellow]{_('chat-busy')}[/yellow]")
            return
        except StoreWriteError as e:
            logger.error("chat_persist_failed", error=str(e))
            console.print(f"[red]{e.message}[/red]")
            return

        if session is None:
            return
        for message in session.messages[-2:]:
            render_message(console, message)

    async def _handle_command(self, line: str) -> str | None:
        command, _sep, argument = line.partition(" ")
        handler = self.commands.get(command.lower())
        if handler is None:
            console.print(f"[yellow]{_('chat-unknown-command', command=command)}[/yellow]")
            return None
        return await handler(argument.strip())

    async def _new_chat(self, argument: str = "") -> None:
        self.service.new_chat()
        console.print(f"[green]{_('chat-new-session')}[/green]")

    async def _list_sessions(self, argument: str = "") -> None:
        sessions = self.service.sessions
        if not sessions:
            console.print(f"[dim]{_('sessions-empty')}[/dim]")
            return
        console.print(sessions_table(sessions))

    async def _open_chat(self, argument: str = "") -> None:
        session_id = self.service.manager.resolve_id(argument)
        try:
            session = self.service.open_chat(session_id or argument)
        except SessionNotFoundError:
            console.print(f"[red]{_('session-not-found', id=argument)}[/red]")
            return
        console.print(f"[green]{_('session-opened', id=(session.id or '')[:8])}[/green]")
        render_conversation(console, session)

    async def _delete_chat(self, argument: str = "") -> None:
        session_id = self.service.manager.resolve_id(argument)
        if session_id is None or not self.service.delete_chat(session_id):
            console.print(f"[red]{_('session-not-found', id=argument)}[/red]")
            return
        console.print(f"[green]{_('session-deleted', id=session_id[:8])}[/green]")

    async def _export_chat(self, argument: str = "") -> None:
        current = self.service.current
        path = self.service.manager.export_session(current.id) if current.id else None
        if path is None:
            console.print(f"[red]{_('session-export-failed')}[/red]")
            return
        console.print(f"[green]{_('session-exported', path=path)}[/green]")

    async def _show_help(self, argument: str = "") -> None:
        console.print(Panel(_("chat-help"), border_style="blue"))

    async def _exit_chat(self, argument: str = "") -> str:
        return "exit"
