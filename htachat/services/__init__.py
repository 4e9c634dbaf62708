"""Application services used by the UI shells."""

from htachat.services.chat import ChatService

__all__ = ["ChatService"]
