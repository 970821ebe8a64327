"""Window builder: picks the prompt context for one completion request.

The builder walks the history from the newest message backwards and keeps
the longest suffix that fits the budget, then makes sure the pending user
text is represented. It never reorders or mutates history and has no side
effects, so its result can be captured before the request is issued while
the conversation keeps growing.
"""

from collections.abc import Sequence
from typing import Protocol

from ..llm.models import ChatMessage
from .sizing import SizeStrategy, WordCountSizer


class HistoryItem(Protocol):
    """Anything with a role and text content, e.g. a stored Message."""

    @property
    def role(self) -> str: ...

    @property
    def content(self) -> str: ...


def window_size(window: Sequence[HistoryItem], sizer: SizeStrategy | None = None) -> int:
    """Total size of a window under the given strategy (words by default)."""
    measure = sizer or WordCountSizer()
    return sum(measure.size(entry.content) for entry in window)


def select_window(
    messages: Sequence[HistoryItem],
    pending_user_text: str,
    budget: int,
    sizer: SizeStrategy | None = None,
) -> list[ChatMessage]:
    """Select the messages to submit with ``pending_user_text``.

    Args:
        messages: Conversation history, oldest first
        pending_user_text: Outgoing user text, not yet in ``messages``
        budget: Maximum total size, in the sizer's unit
        sizer: Size strategy (word count when omitted)

    Returns:
        Oldest-first list of role/content entries. The pending text is always
        represented, even when it alone exceeds the budget.

    Raises:
        ValueError: If budget is not positive
    """
    if budget <= 0:
        raise ValueError(f"Window budget must be positive, got {budget}")

    measure = sizer or WordCountSizer()

    selected: list[ChatMessage] = []
    used = 0
    for message in reversed(messages):
        cost = measure.size(message.content)
        if used + cost > budget:
            break
        selected.append(ChatMessage(role=message.role, content=message.content))
        used += cost
    selected.reverse()

    # Exact text match only; message ids are not available for the pending text.
    if not selected or selected[-1].content != pending_user_text:
        selected.append(ChatMessage(role="user", content=pending_user_text))
        used += measure.size(pending_user_text)

    while used > budget and len(selected) > 1:
        dropped = selected.pop(0)
        used -= measure.size(dropped.content)

    return selected
