"""
Pytest configuration and global fixtures.

This module provides shared fixtures used across all tests.
"""

import itertools
from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from htachat.ai.domain.message import Message
from htachat.ai.orchestration import ConversationOrchestrator
from htachat.ai.providers.base import BaseLLMProvider, ProviderTurn
from htachat.ai.session import InMemoryStorageBackend, SessionManager, SessionStore
from htachat.i18n import reset_locale
from htachat.services.chat import ChatService
from htachat.utils.config import Settings, reload_settings

ENV_VARS = (
    "HTACHAT_LOCALE",
    "HTACHAT_SESSION_STORE",
    "HTACHAT_PROVIDER",
    "HTACHAT_GOOGLE_API_KEY",
    "GOOGLE_API_KEY",
    "HTACHAT_OPENAI_API_KEY",
    "OPENAI_API_KEY",
)


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Keep user environment, data directory and locale out of every test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HTACHAT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    reload_settings()
    reset_locale()

    yield

    reset_locale()
    reload_settings()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with a Gemini key and a temporary data directory."""
    return Settings(
        google_api_key="test-google-key",
        data_dir=tmp_path / "data",
        session_store="memory",
        request_timeout=5.0,
    )


@pytest.fixture
def backend() -> InMemoryStorageBackend:
    return InMemoryStorageBackend()


@pytest.fixture
def store(backend: InMemoryStorageBackend) -> SessionStore:
    return SessionStore(backend)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock that advances one minute per call."""
    start = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Predictable session ids: session-0001, session-0002, ..."""
    counter = itertools.count(1)
    return lambda: f"session-{next(counter):04d}"


@pytest.fixture
def manager(
    store: SessionStore,
    clock: Callable[[], datetime],
    id_factory: Callable[[], str],
) -> SessionManager:
    manager = SessionManager(store, clock=clock, id_factory=id_factory)
    manager.initialize()
    return manager


@pytest.fixture
def mock_provider() -> MagicMock:
    """Provider double that answers every request with 'Hi there'."""
    provider = MagicMock(spec=BaseLLMProvider)
    provider.provider_name = "mock"
    provider.model = "mock-model"
    provider.build_history.side_effect = lambda messages: [
        ProviderTurn(role="user" if m.role.value == "user" else "model", text=m.content)
        for m in messages
    ]
    provider.generate = AsyncMock(return_value="Hi there")
    return provider


@pytest.fixture
def orchestrator(mock_provider: MagicMock) -> ConversationOrchestrator:
    return ConversationOrchestrator(mock_provider, timeout=5.0)


@pytest.fixture
def chat_service(manager: SessionManager, orchestrator: ConversationOrchestrator) -> ChatService:
    service = ChatService(manager, orchestrator)
    service.initialize()
    return service


@pytest.fixture
def sample_messages() -> list[Message]:
    return [
        Message.user("What is the capital of Vietnam?"),
        Message.assistant("The capital of Vietnam is Hanoi."),
    ]
