"""Size strategies for measuring message text against a budget.

This module hides the design decision of how text is measured.
The budget and the sizer must use the same unit.
"""

from abc import ABC, abstractmethod


class SizeStrategy(ABC):
    """Abstract text measure used by the window builder."""

    @abstractmethod
    def size(self, text: str) -> int:
        """Return the size of ``text`` in this strategy's unit."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in configuration."""


class WordCountSizer(SizeStrategy):
    """Counts whitespace-separated words."""

    def size(self, text: str) -> int:
        return len(text.split())

    @property
    def name(self) -> str:
        return "words"


class EstimatedTokenSizer(SizeStrategy):
    """Estimates tokens as four tokens per three words, rounded down."""

    TOKENS_PER_WORD_NUMERATOR = 4
    TOKENS_PER_WORD_DENOMINATOR = 3

    def size(self, text: str) -> int:
        words = len(text.split())
        return words * self.TOKENS_PER_WORD_NUMERATOR // self.TOKENS_PER_WORD_DENOMINATOR

    @property
    def name(self) -> str:
        return "tokens"


def create_sizer(strategy: str = "words") -> SizeStrategy:
    """Create a size strategy by name.

    Args:
        strategy: 'words' or 'tokens'

    Returns:
        SizeStrategy instance

    Raises:
        ValueError: If the strategy name is not supported
    """
    strategy_lower = strategy.lower()

    if strategy_lower == "words":
        return WordCountSizer()

    if strategy_lower == "tokens":
        return EstimatedTokenSizer()

    raise ValueError(
        f"Unsupported size strategy: {strategy}. "
        f"Supported strategies: 'words', 'tokens'"
    )
