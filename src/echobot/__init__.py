"""
EchoBot: a chat client for hosted language-model completion endpoints.

Each module hides one design decision behind a narrow interface:
- window: which part of the history is sent with each request
- history: how conversations are stored on this device
- llm: how the completion endpoint is reached
- backup: how conversations are mirrored to a remote document store
- remote_config: where mutable settings come from
- entitlement: who may send past the free-message quota
- chat: how the pieces are orchestrated for one user
"""

__version__ = "0.1.0"

from .errors import BackupError, ConfigFetchError, EchoBotError, EntitlementError, HistoryDecodeError
from .window import EstimatedTokenSizer, SizeStrategy, WordCountSizer, create_sizer, select_window

__all__ = [
    "BackupError",
    "ConfigFetchError",
    "EchoBotError",
    "EntitlementError",
    "EstimatedTokenSizer",
    "HistoryDecodeError",
    "SizeStrategy",
    "WordCountSizer",
    "create_sizer",
    "select_window",
]
