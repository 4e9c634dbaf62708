"""Tests for ChatSession and its derived metadata."""

from datetime import datetime, timezone

from htachat.ai.domain.message import Message
from htachat.ai.session.models import (
    PREVIEW_LENGTH,
    TITLE_LENGTH,
    ChatSession,
    make_preview,
    make_title,
    truncate,
)


class TestTruncate:
    """Test label truncation."""

    def test_short_text_unchanged(self):
        assert truncate("Hello", 30) == "Hello"

    def test_exact_length_unchanged(self):
        text = "a" * 30
        assert truncate(text, 30) == text

    def test_long_text_gets_ellipsis(self):
        """Test the prefix is limited to the length and marked with an ellipsis."""
        result = truncate("a" * 40, 30)
        assert result == "a" * 30 + "..."

    def test_whitespace_collapsed(self):
        """Test multi-line text yields a one-line label."""
        assert truncate("Hello\n\n  world", 30) == "Hello world"

    def test_trailing_space_trimmed_before_ellipsis(self):
        assert truncate("abcd efgh", 5) == "abcd..."


class TestTitleAndPreview:
    """Test title and preview derivation."""

    def test_title_from_first_message(self):
        messages = [Message.user("First question"), Message.assistant("Answer")]
        assert make_title(messages) == "First question"

    def test_title_truncated(self):
        messages = [Message.user("Tell me everything about the history of Hanoi")]
        title = make_title(messages)
        assert title.endswith("...")
        assert len(title) <= TITLE_LENGTH + 3

    def test_preview_from_last_message(self):
        messages = [Message.user("First question"), Message.assistant("Answer")]
        assert make_preview(messages) == "Answer"

    def test_preview_truncated(self):
        messages = [Message.assistant("word " * 40)]
        preview = make_preview(messages)
        assert preview.endswith("...")
        assert len(preview) <= PREVIEW_LENGTH + 3

    def test_empty_messages(self):
        assert make_title([]) == ""
        assert make_preview([]) == ""


class TestChatSession:
    """Test ChatSession behaviour."""

    def test_new_session_is_unsaved(self):
        session = ChatSession()
        assert session.id is None
        assert not session.is_persisted
        assert session.message_count == 0

    def test_get_messages_returns_copy(self, sample_messages):
        """Test extending the returned list leaves the session untouched."""
        session = ChatSession(id="s1", messages=sample_messages)
        messages = session.get_messages()
        messages.append(Message.user("Another"))
        assert session.message_count == 2

    def test_matches_title_and_content(self, sample_messages):
        session = ChatSession(id="s1", title="Geography", messages=sample_messages)
        assert session.matches("geography")
        assert session.matches("HANOI")
        assert not session.matches("Paris")

    def test_export_markdown(self, sample_messages):
        session = ChatSession(id="s1", title="Capital", messages=sample_messages)
        markdown = session.export_markdown(user_label="You", assistant_label="HTA")

        assert markdown.startswith("# Capital")
        assert "## You" in markdown
        assert "## HTA" in markdown
        assert "The capital of Vietnam is Hanoi." in markdown

    def test_export_json(self, sample_messages):
        timestamp = datetime(2025, 1, 1, tzinfo=timezone.utc)
        session = ChatSession(
            id="s1", title="Capital", preview="Hanoi", timestamp=timestamp, messages=sample_messages
        )
        data = session.export_json()

        assert data["id"] == "s1"
        assert data["messages"][0] == {"role": "user", "content": "What is the capital of Vietnam?"}
        assert data["timestamp"].startswith("2025-01-01")
