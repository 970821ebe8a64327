from .base import CompletionClient
from .factory import PROVIDER_PRESETS, create_completion_client
from .models import ChatMessage, CompletionErr, CompletionOk, CompletionResult
from .providers import OpenAICompatibleClient

__all__ = [
    "CompletionClient",
    "create_completion_client",
    "PROVIDER_PRESETS",
    "ChatMessage",
    "CompletionErr",
    "CompletionOk",
    "CompletionResult",
    "OpenAICompatibleClient",
]
