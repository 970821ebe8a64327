from .session import FALLBACK_MESSAGES, QUOTA_EXCEEDED_MESSAGE, ChatSession

__all__ = ["FALLBACK_MESSAGES", "QUOTA_EXCEEDED_MESSAGE", "ChatSession"]
