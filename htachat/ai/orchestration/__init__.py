"""Conversation orchestration: history plus a new user turn in, one reply out.

Example Usage:
    >>> from htachat.ai.orchestration import ConversationOrchestrator
    >>>
    >>> orchestrator = ConversationOrchestrator.from_settings()
    >>> reply = await orchestrator.submit(history, "Hello", session_id=session_id)
    >>> print(reply.content)
"""

from htachat.ai.orchestration.errors import describe_failure
from htachat.ai.orchestration.orchestrator import ConversationOrchestrator

__all__ = ["ConversationOrchestrator", "describe_failure"]
