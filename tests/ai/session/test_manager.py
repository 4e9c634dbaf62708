"""Tests for SessionManager."""

import json
from pathlib import Path

import pytest

from htachat.ai.domain.message import Message
from htachat.ai.session import InMemoryStorageBackend, SessionManager, SessionStore
from htachat.exceptions import SessionNotFoundError, StoreWriteError, ValidationError
from htachat.i18n import set_locale


def turn(*texts: str) -> list[Message]:
    """Alternating user/assistant messages starting with the user."""
    return [
        Message.user(text) if index % 2 == 0 else Message.assistant(text)
        for index, text in enumerate(texts)
    ]


class TestPersistTurn:
    """Test persisting conversations."""

    def test_first_persist_assigns_id(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("Hello"))

        assert session_id == "session-0001"
        assert manager.current_id == session_id
        session = manager.get_session(session_id)
        assert session is not None
        assert session.title == "Hello"
        assert session.preview == "Hello"
        assert session.message_count == 1

    def test_persist_writes_whole_collection(
        self, manager: SessionManager, backend: InMemoryStorageBackend
    ):
        manager.persist_turn(None, turn("Hello"))
        manager.persist_turn(None, turn("Another"))

        data = json.loads(backend.values["chat_sessions"])
        assert [s["id"] for s in data] == ["session-0002", "session-0001"]

    def test_same_id_updates_in_place(self, manager: SessionManager):
        """Test persisting with an existing id never creates a second entry."""
        session_id = manager.persist_turn(None, turn("Hello"))
        again = manager.persist_turn(session_id, turn("Hello", "Hi there"))

        assert again == session_id
        assert len(manager.sessions) == 1
        assert manager.get_session(session_id).message_count == 2  # type: ignore[union-attr]

    def test_title_fixed_preview_follows_latest(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("First question"))
        manager.persist_turn(session_id, turn("First question", "A long answer"))

        session = manager.get_session(session_id)
        assert session is not None
        assert session.title == "First question"
        assert session.preview == "A long answer"

    def test_timestamp_advances(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("Hello"))
        first = manager.get_session(session_id).timestamp  # type: ignore[union-attr]
        manager.persist_turn(session_id, turn("Hello", "Hi"))
        second = manager.get_session(session_id).timestamp  # type: ignore[union-attr]
        assert second > first

    def test_most_recent_first(self, manager: SessionManager):
        """Test a persisted session moves to the front of the list."""
        a = manager.persist_turn(None, turn("A"))
        b = manager.persist_turn(None, turn("B"))
        assert [s.id for s in manager.sessions] == [b, a]

        manager.persist_turn(a, turn("A", "reply"))
        assert [s.id for s in manager.sessions] == [a, b]

    def test_empty_messages_rejected(self, manager: SessionManager):
        with pytest.raises(ValidationError):
            manager.persist_turn(None, [])
        assert manager.sessions == []

    @pytest.mark.parametrize("blank_id", ["", "   "])
    def test_blank_id_rejected(self, manager: SessionManager, store: SessionStore, blank_id: str):
        """Test a blank id never reaches the store and earlier history survives."""
        kept = manager.persist_turn(None, turn("keep me"))

        with pytest.raises(ValidationError) as exc_info:
            manager.persist_turn(blank_id, turn("oops"))

        assert exc_info.value.context["field"] == "current_id"
        assert [s.id for s in store.load()] == [kept]
        assert manager.current_id == kept

    def test_unknown_id_is_kept(self, manager: SessionManager):
        """Test an id missing from the store is persisted as given."""
        session_id = manager.persist_turn("restored-id", turn("Hello"))
        assert session_id == "restored-id"
        assert manager.get_session("restored-id").title == "Hello"  # type: ignore[union-attr]

    def test_write_failure_leaves_memory_unchanged(self, clock, id_factory):
        class BrokenBackend(InMemoryStorageBackend):
            def write(self, key: str, value: str) -> None:
                raise StoreWriteError("disk full")

        manager = SessionManager(SessionStore(BrokenBackend()), clock=clock, id_factory=id_factory)
        with pytest.raises(StoreWriteError):
            manager.persist_turn(None, turn("Hello"))

        assert manager.sessions == []
        assert manager.current_id is None

    def test_lazy_initialization_keeps_existing_history(
        self, store: SessionStore, clock, id_factory
    ):
        """Test writing before initialize() does not drop persisted sessions."""
        first = SessionManager(store, clock=clock, id_factory=id_factory)
        first.persist_turn(None, turn("Old"))

        second = SessionManager(store, clock=clock, id_factory=lambda: "new-id")
        second.persist_turn(None, turn("New"))

        assert [s.id for s in second.sessions] == ["new-id", "session-0001"]


class TestLifecycle:
    """Test new, load and delete."""

    def test_initialize_loads_store(self, store: SessionStore, clock, id_factory):
        SessionManager(store, clock=clock, id_factory=id_factory).persist_turn(None, turn("Hi"))

        manager = SessionManager(store)
        sessions = manager.initialize()
        assert len(sessions) == 1
        assert manager.current_id is None

    def test_start_new_session(self, manager: SessionManager):
        manager.persist_turn(None, turn("Hello"))
        session = manager.start_new_session()

        assert manager.current_id is None
        assert session.id is None
        assert session.messages == []
        assert len(manager.sessions) == 1

    def test_load_session(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("Hello", "Hi"))
        manager.start_new_session()

        session = manager.load_session(session_id)
        assert manager.current_id == session_id
        assert [m.content for m in session.messages] == ["Hello", "Hi"]

    def test_load_missing_session(self, manager: SessionManager):
        with pytest.raises(SessionNotFoundError) as exc_info:
            manager.load_session("missing")
        assert exc_info.value.session_id == "missing"
        assert manager.current_id is None

    def test_delete_session(self, manager: SessionManager, store: SessionStore):
        a = manager.persist_turn(None, turn("A"))
        b = manager.persist_turn(None, turn("B"))

        assert manager.delete_session(a) is True
        assert [s.id for s in manager.sessions] == [b]
        assert [s.id for s in store.load()] == [b]

    def test_delete_leaves_other_sessions_untouched(self, manager: SessionManager):
        a = manager.persist_turn(None, turn("A", "a reply"))
        b = manager.persist_turn(None, turn("B", "b reply"))
        before = manager.get_session(b)

        manager.delete_session(a)
        assert manager.get_session(b) == before

    def test_delete_current_resets_pointer(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("Hello"))
        manager.delete_session(session_id)
        assert manager.current_id is None

    def test_delete_other_keeps_pointer(self, manager: SessionManager):
        a = manager.persist_turn(None, turn("A"))
        b = manager.persist_turn(None, turn("B"))
        manager.delete_session(a)
        assert manager.current_id == b

    def test_delete_missing_is_noop(
        self, manager: SessionManager, backend: InMemoryStorageBackend
    ):
        manager.persist_turn(None, turn("A"))
        writes = backend.write_count

        assert manager.delete_session("missing") is False
        assert backend.write_count == writes

    def test_delete_twice(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("A"))
        assert manager.delete_session(session_id) is True
        assert manager.delete_session(session_id) is False


class TestQueries:
    """Test lookup, search, stats and export."""

    def test_get_session_returns_copy(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("Hello"))
        copy = manager.get_session(session_id)
        copy.messages.append(Message.user("sneaky"))  # type: ignore[union-attr]
        assert manager.get_session(session_id).message_count == 1  # type: ignore[union-attr]

    def test_resolve_id_by_prefix(self, store: SessionStore):
        ids = iter(["abc12345-0000", "abd99999-0000"])
        manager = SessionManager(store, id_factory=lambda: next(ids))
        manager.persist_turn(None, turn("A"))
        manager.persist_turn(None, turn("B"))

        assert manager.resolve_id("abc12345-0000") == "abc12345-0000"
        assert manager.resolve_id("abc") == "abc12345-0000"
        assert manager.resolve_id("ab") is None
        assert manager.resolve_id("zzz") is None
        assert manager.resolve_id("") is None

    def test_list_sessions_limit(self, manager: SessionManager):
        for text in ("A", "B", "C"):
            manager.persist_turn(None, turn(text))
        assert [s.title for s in manager.list_sessions(limit=2)] == ["C", "B"]

    def test_search_sessions(self, manager: SessionManager):
        manager.persist_turn(None, turn("Weather in Hanoi", "Sunny"))
        manager.persist_turn(None, turn("Recipe for pho", "Beef broth"))

        assert [s.title for s in manager.search_sessions("hanoi")] == ["Weather in Hanoi"]
        assert [s.title for s in manager.search_sessions("BROTH")] == ["Recipe for pho"]
        assert manager.search_sessions("   ") == []

    def test_get_stats(self, manager: SessionManager):
        manager.persist_turn(None, turn("A", "a reply", "follow up"))
        manager.persist_turn(None, turn("B"))

        assert manager.get_stats() == {
            "sessions": 2,
            "messages": 4,
            "user_messages": 3,
            "assistant_messages": 1,
        }

    def test_export_markdown(self, manager: SessionManager, tmp_path: Path):
        set_locale("en")
        session_id = manager.persist_turn(None, turn("Hello", "Hi there"))
        output = tmp_path / "chat.md"

        path = manager.export_session(session_id, output_path=output)

        assert path == str(output)
        content = output.read_text(encoding="utf-8")
        assert content.startswith("# Hello")
        assert "## You" in content
        assert "Hi there" in content

    def test_export_json_default_path(self, manager: SessionManager, tmp_path: Path):
        session_id = manager.persist_turn(None, turn("Hello", "Hi there"))

        path = manager.export_session(session_id, format="json")

        assert path is not None
        assert Path(path).parent.resolve() == tmp_path.resolve()
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        assert data["id"] == session_id
        assert len(data["messages"]) == 2

    def test_export_unknown_session(self, manager: SessionManager):
        assert manager.export_session("missing") is None

    def test_export_unknown_format(self, manager: SessionManager):
        session_id = manager.persist_turn(None, turn("Hello"))
        assert manager.export_session(session_id, format="pdf") is None
