"""Chat session model and its derived display metadata.

A session's ``title`` comes from the first message and is fixed once computed;
its ``preview`` and ``timestamp`` follow the latest persisted turn.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from htachat.ai.domain.message import Message, Role

TITLE_LENGTH = 30
PREVIEW_LENGTH = 50
ELLIPSIS = "..."


def truncate(text: str, length: int) -> str:
    """Leading substring of ``text`` limited to ``length`` characters.

    Whitespace is collapsed first so multi-line messages give one-line labels.
    """
    flat = " ".join(text.split())
    if len(flat) <= length:
        return flat
    return flat[:length].rstrip() + ELLIPSIS


def make_title(messages: list[Message]) -> str:
    """Title derived from the first message of a conversation."""
    if not messages:
        return ""
    return truncate(messages[0].content, TITLE_LENGTH)


def make_preview(messages: list[Message]) -> str:
    """Preview derived from the most recent message of a conversation."""
    if not messages:
        return ""
    return truncate(messages[-1].content, PREVIEW_LENGTH)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatSession(BaseModel):
    """
    One conversation and its display metadata.

    ``id`` stays None until the session is first persisted. Sessions in the
    store always have an id and at least one message.
    """

    id: str | None = None
    title: str = ""
    preview: str = ""
    timestamp: datetime | None = None
    messages: list[Message] = Field(default_factory=list)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def message_count(self) -> int:
        return len(self.messages)

    def get_messages(self) -> list[Message]:
        """Copy of the message list, safe to extend."""
        return list(self.messages)

    def matches(self, query: str) -> bool:
        """Case-insensitive match on title or any message content."""
        needle = query.lower()
        if needle in self.title.lower():
            return True
        return any(needle in msg.content.lower() for msg in self.messages)

    def export_markdown(self, user_label: str = "User", assistant_label: str = "Assistant") -> str:
        """Render the conversation as a Markdown transcript."""
        lines = [f"# {self.title or 'Chat'}", ""]
        if self.id:
            lines.append(f"- **Session:** `{self.id}`")
        if self.timestamp:
            lines.append(f"- **Updated:** {self.timestamp.isoformat()}")
        lines.append(f"- **Messages:** {self.message_count}")
        lines.append("")

        for msg in self.messages:
            label = user_label if msg.role == Role.USER else assistant_label
            lines.append(f"## {label}")
            lines.append("")
            lines.append(msg.content)
            lines.append("")

        return "\n".join(lines)

    def export_json(self) -> dict[str, Any]:
        """Serializable dict identical to the persisted form."""
        return self.model_dump(mode="json")
