from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ErrorReason = Literal["empty_response", "request_failed", "quota_exceeded"]


class ChatMessage(BaseModel):
    """Represents one prompt entry sent to the completion endpoint."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class CompletionOk(BaseModel):
    """Successful completion."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    content: str = Field(description="Assistant reply, stripped of surrounding whitespace")
    model: str = Field(default="", description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


class CompletionErr(BaseModel):
    """Failed completion, carried as a value instead of an exception."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    reason: ErrorReason = Field(description="Machine-readable failure category")
    detail: str = Field(default="", description="Human-readable failure detail")


CompletionResult = CompletionOk | CompletionErr
