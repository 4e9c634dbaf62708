"""Chat service: the data flow behind one user turn.

Ties the session manager and the conversation orchestrator together for a UI
shell: the user message is persisted first, the reply is requested, and the
assistant message is persisted on top of it.

Example:
    service = ChatService.from_settings()
    service.initialize()
    session = await service.send("Hello")
    print(session.messages[-1].content)
"""

from __future__ import annotations

from htachat.ai.domain.message import Message
from htachat.ai.orchestration import ConversationOrchestrator
from htachat.ai.session import ChatSession, SessionManager, SessionStore, get_session_store
from htachat.exceptions import SessionBusyError
from htachat.utils.config import Settings, get_settings
from htachat.utils.logging import clear_correlation_id, get_logger, set_correlation_id

logger = get_logger(__name__)


class ChatService:
    """Session-aware chat operations for a UI shell.

    Attributes:
        manager: Session lifecycle and persistence
        orchestrator: Reply generation
    """

    def __init__(self, manager: SessionManager, orchestrator: ConversationOrchestrator) -> None:
        self.manager = manager
        self.orchestrator = orchestrator
        self._current = ChatSession()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        store: SessionStore | None = None,
    ) -> ChatService:
        settings = settings or get_settings()
        manager = SessionManager(store or get_session_store())
        return cls(manager, ConversationOrchestrator.from_settings(settings))

    def initialize(self) -> list[ChatSession]:
        """Load persisted sessions and start on a new, empty conversation."""
        sessions = self.manager.initialize()
        self._current = self.manager.start_new_session()
        return sessions

    @property
    def current(self) -> ChatSession:
        return self._current

    @property
    def sessions(self) -> list[ChatSession]:
        return self.manager.sessions

    def is_busy(self) -> bool:
        return self.orchestrator.is_busy(self._current.id)

    def new_chat(self) -> ChatSession:
        self._current = self.manager.start_new_session()
        return self._current

    def open_chat(self, session_id: str) -> ChatSession:
        """Resume a stored conversation.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        self._current = self.manager.load_session(session_id)
        return self._current

    def delete_chat(self, session_id: str) -> bool:
        """Delete a conversation; deleting the open one switches to a new chat."""
        deleted = self.manager.delete_session(session_id)
        if self._current.id == session_id:
            self._current = self.manager.start_new_session()
        return deleted

    async def send(self, text: str) -> ChatSession | None:
        """Send one user message in the current conversation.

        Returns:
            The updated session, or None when text is blank or the session
            was deleted while the reply was pending

        Raises:
            SessionBusyError: If a reply for this conversation is still pending
            StoreWriteError: If the conversation could not be saved
        """
        if not text or not text.strip():
            return None

        session_id = self._current.id
        if self.orchestrator.is_busy(session_id):
            raise SessionBusyError(session_id or "unsaved")

        set_correlation_id()
        try:
            return await self._send_turn(session_id, text)
        finally:
            clear_correlation_id()

    async def _send_turn(self, session_id: str | None, text: str) -> ChatSession | None:
        history = self._current.get_messages()
        messages = [*history, Message.user(text)]

        session_id = self.manager.persist_turn(session_id, messages)
        self._current = self.manager.get_session(session_id) or self._current

        reply = await self.orchestrator.submit(history, text, session_id=session_id)
        if reply is None:
            return self._current

        if not self.manager.exists(session_id):
            logger.warning("reply_dropped_session_deleted", session_id=session_id)
            return None

        switched_away = self._current.id != session_id
        self.manager.persist_turn(session_id, [*messages, reply])
        session = self.manager.get_session(session_id)

        if switched_away:
            # Keep the manager's pointer on the conversation the user moved to
            if self._current.id is None:
                self.manager.start_new_session()
            else:
                self.manager.load_session(self._current.id)
        else:
            self._current = session or self._current

        return session


__all__ = ["ChatService"]
