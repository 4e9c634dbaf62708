"""Domain models shared by sessions, providers and the orchestrator."""

from htachat.ai.domain.message import Message, Role

__all__ = ["Message", "Role"]
