"""Local conversation history for echobot.

Provides on-device persistence of conversations across sessions.
"""

from .base import KeyValueStore
from .factory import create_key_value_store
from .models import Conversation, Message, Role
from .repository import CONVERSATIONS_KEY, ConversationRepository

__all__ = [
    "CONVERSATIONS_KEY",
    "Conversation",
    "ConversationRepository",
    "KeyValueStore",
    "Message",
    "Role",
    "create_key_value_store",
]
