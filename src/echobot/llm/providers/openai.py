import logging
from collections.abc import Sequence
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from ..base import CompletionClient
from ..models import ChatMessage, CompletionErr, CompletionOk, CompletionResult

logger = logging.getLogger(__name__)


class OpenAICompatibleClient(CompletionClient):
    """Client for any endpoint speaking the OpenAI chat completions protocol.

    Hidden design decisions:
    - OpenAI SDK client initialization against a custom base URL
    - Message format conversion
    - Bearer authentication
    - Mapping SDK exceptions and malformed replies to CompletionErr

    The request body is ``{model, messages, temperature}`` and the reply is
    read from ``choices[0].message.content``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
        **client_kwargs: Any
    ):
        """Initialize the client.

        Args:
            api_key: API key sent as a Bearer token
            model: Default model to use
            base_url: Endpoint base URL (None uses the SDK default)
            client: Pre-built AsyncOpenAI-compatible client (tests, shared pools)
            **client_kwargs: Additional kwargs for AsyncOpenAI
        """
        self._model = model
        self._base_url = base_url
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    @property
    def base_url(self) -> str | None:
        return self._base_url

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
            model: Model to use (overrides default)
            temperature: Sampling temperature
            **kwargs: Additional request parameters

        Returns:
            CompletionOk with trimmed content, or CompletionErr
        """
        model_to_use = model or self._model

        request_params: dict[str, Any] = {
            "model": model_to_use,
            "messages": [{"role": msg.role, "content": msg.content} for msg in messages],
            "temperature": temperature,
            **kwargs
        }

        try:
            completion = await self._client.chat.completions.create(**request_params)
        except OpenAIError as e:
            logger.error("Completion request to %s failed: %s", model_to_use, e)
            return CompletionErr(reason="request_failed", detail=str(e))

        if not completion.choices:
            logger.warning("Completion from %s returned no choices", model_to_use)
            return CompletionErr(reason="empty_response", detail="No choices in response")

        content = completion.choices[0].message.content
        if content is None or not content.strip():
            logger.warning("Completion from %s returned empty content", model_to_use)
            return CompletionErr(reason="empty_response", detail="Empty message content")

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return CompletionOk(
            content=content.strip(),
            model=completion.model or model_to_use,
            usage=usage
        )

    async def close(self) -> None:
        """Close the underlying SDK client.

        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
