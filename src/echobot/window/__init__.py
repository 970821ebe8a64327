"""Conversation window selection.

Decides which suffix of a conversation is sent as prompt context
for the next completion request.
"""

from .builder import select_window, window_size
from .sizing import EstimatedTokenSizer, SizeStrategy, WordCountSizer, create_sizer

__all__ = [
    "EstimatedTokenSizer",
    "SizeStrategy",
    "WordCountSizer",
    "create_sizer",
    "select_window",
    "window_size",
]
