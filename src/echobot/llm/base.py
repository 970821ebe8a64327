from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .models import ChatMessage, CompletionResult


class CompletionClient(ABC):
    """Abstract base class for completion endpoint clients.

    This module hides the design decision of how the completion endpoint
    is reached. Implementations must handle:
    - API client setup and Bearer authentication
    - Request/response format conversion
    - Turning transport and decode failures into CompletionErr values

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            result = await client.complete(window, model="...")
    """

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> CompletionResult:
        """Request a chat completion.

        Args:
            messages: Prompt window, oldest first
            model: Model to use (None uses the client's default)
            temperature: Sampling temperature (0.0 to 2.0)
            **kwargs: Endpoint-specific parameters

        Returns:
            CompletionOk with the reply, or CompletionErr describing the failure.
            Never raises for endpoint or network failures.
        """

    @property
    def model(self) -> str:
        """Default model identifier, empty when the endpoint chooses."""
        return ""

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # The SDK transport may already be gone when the loop shuts down first.
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
