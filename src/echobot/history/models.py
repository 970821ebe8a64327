"""Data models for conversation history.

These models define the structure of conversations and messages,
independent of the storage backend used.
"""

from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """A single message in a conversation. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Role = Field(description="Who sent the message: 'user' or 'assistant'")
    content: str = Field(description="Message text")
    timestamp: datetime = Field(default_factory=_now)


class Conversation(BaseModel):
    """An ordered, append-only thread of messages."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def append(self, role: Role, content: str) -> Message:
        """Append a new message to the end of the conversation.

        Args:
            role: Sender role
            content: Message text

        Returns:
            The created message
        """
        message = Message(role=role, content=content)
        self.messages.append(message)
        self.updated_at = message.timestamp
        return message

    @property
    def is_empty(self) -> bool:
        return not self.messages

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def title(self, limit: int = 40) -> str:
        """Short label taken from the first user message."""
        for message in self.messages:
            if message.role == "user":
                text = " ".join(message.content.split())
                return text[:limit] + "..." if len(text) > limit else text
        return "New conversation"
