"""Rendering helpers shared by the chat loop and the sessions commands."""

from rich.align import Align
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from htachat.ai.domain.message import Message, Role
from htachat.ai.session.models import ChatSession
from htachat.i18n import _


def _bubble_width(console: Console) -> int:
    return min(int(console.width * 0.8), 120)


def render_message(console: Console, message: Message) -> None:
    """Print one message as a chat bubble: user on the right, assistant on the left."""
    width = _bubble_width(console)
    if message.role == Role.USER:
        bubble = Panel(
            message.content,
            border_style="blue",
            padding=(0, 1),
            title=f"[dim]{_('chat-role-user')}[/dim]",
            title_align="right",
            width=width,
        )
        console.print(Align.right(bubble, width=width))
    else:
        bubble = Panel(
            Markdown(message.content),
            border_style="green",
            padding=(0, 1),
            title=f"[dim]{_('chat-role-assistant')}[/dim]",
            title_align="left",
            width=width,
        )
        console.print(bubble)


def render_conversation(console: Console, session: ChatSession) -> None:
    if not session.messages:
        console.print(f"[dim]{_('chat-empty')}[/dim]")
        return
    for message in session.messages:
        render_message(console, message)


def sessions_table(sessions: list[ChatSession]) -> Table:
    """Table of sessions, most recent first."""
    table = Table(title=_("sessions-title"), show_lines=False)
    table.add_column(_("sessions-column-id"), style="cyan", no_wrap=True)
    table.add_column(_("sessions-column-title"), style="bold")
    table.add_column(_("sessions-column-preview"), style="dim")
    table.add_column(_("sessions-column-messages"), justify="right")
    table.add_column(_("sessions-column-updated"), no_wrap=True)

    for session in sessions:
        updated = session.timestamp.astimezone().strftime("%Y-%m-%d %H:%M") if session.timestamp else ""
        table.add_row(
            (session.id or "")[:8],
            session.title,
            session.preview,
            str(session.message_count),
            updated,
        )
    return table
