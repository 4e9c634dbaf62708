"""Message model for chat turns."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class Role(str, Enum):
    """Author of a chat turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """
    One turn in a conversation.

    Messages are immutable once created. Their position in the session's
    message list is the only ordering they carry.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    @model_validator(mode="after")
    def _check_user_content(self) -> "Message":
        if self.role == Role.USER and not self.content.strip():
            raise ValueError("User message content must not be blank")
        return self

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)
