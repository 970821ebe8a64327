"""Unit tests for the window module."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from echobot.history import Message
from echobot.window import (
    EstimatedTokenSizer,
    SizeStrategy,
    WordCountSizer,
    create_sizer,
    select_window,
    window_size,
)

words = st.text(alphabet="abcdefgh", min_size=1, max_size=6)
contents = st.lists(words, min_size=0, max_size=6).map(" ".join)
histories = st.lists(
    st.builds(Message, role=st.sampled_from(["user", "assistant"]), content=contents),
    max_size=30,
)


def _history(*texts: str) -> list[Message]:
    roles = ("user", "assistant")
    return [Message(role=roles[i % 2], content=text) for i, text in enumerate(texts)]


def _is_suffix(part: list[str], whole: list[str]) -> bool:
    return len(part) <= len(whole) and whole[len(whole) - len(part):] == part


class TestSizers:
    """Tests for size strategies."""

    def test_size_strategy_is_abstract(self):
        """Test that SizeStrategy cannot be instantiated directly."""
        with pytest.raises(TypeError):
            SizeStrategy()  # type: ignore

    def test_word_count(self):
        sizer = WordCountSizer()
        assert sizer.size("") == 0
        assert sizer.size("hello") == 1
        assert sizer.size("  hello   there\nfriend ") == 3
        assert sizer.name == "words"

    def test_estimated_tokens(self):
        sizer = EstimatedTokenSizer()
        assert sizer.size("") == 0
        assert sizer.size("one two three") == 4
        assert sizer.size("a b c d e f") == 8
        assert sizer.name == "tokens"

    def test_create_sizer(self):
        assert isinstance(create_sizer(), WordCountSizer)
        assert isinstance(create_sizer("words"), WordCountSizer)
        assert isinstance(create_sizer("TOKENS"), EstimatedTokenSizer)

    def test_create_sizer_unknown(self):
        """Test that unknown strategy raises ValueError."""
        with pytest.raises(ValueError, match="Unsupported size strategy"):
            create_sizer("characters")

    @given(contents)
    def test_token_estimate_never_below_words(self, text: str):
        """Property test: the token estimate is at least the word count."""
        assert EstimatedTokenSizer().size(text) >= WordCountSizer().size(text)


class TestSelectWindow:
    """Tests for select_window."""

    def test_long_history_keeps_recent_suffix(self):
        """25 one-word messages, budget 10: last 9 plus the pending message."""
        history = _history(*[f"w{i}" for i in range(25)])

        window = select_window(history, "hello", budget=10)

        assert len(window) == 10
        assert [m.content for m in window[:-1]] == [f"w{i}" for i in range(16, 25)]
        assert window[-1].role == "user"
        assert window[-1].content == "hello"
        assert window_size(window) == 10

    def test_empty_history_oversized_pending(self):
        """Pending text is kept even when it alone exceeds the budget."""
        window = select_window([], "hi there", budget=1)

        assert [(m.role, m.content) for m in window] == [("user", "hi there")]

    def test_empty_history(self):
        window = select_window([], "hi", budget=100)
        assert [(m.role, m.content) for m in window] == [("user", "hi")]

    def test_whole_history_fits(self):
        history = _history("hi", "hello there", "how are you")

        window = select_window(history, "fine thanks", budget=100)

        assert [m.content for m in window] == ["hi", "hello there", "how are you", "fine thanks"]
        assert [m.role for m in window] == ["user", "assistant", "user", "user"]

    def test_stops_at_first_message_that_does_not_fit(self):
        """Older messages are not considered once one overflows."""
        history = _history("a", "b c d e f g h", "i")

        window = select_window(history, "j", budget=4)

        assert [m.content for m in window] == ["i", "j"]

    def test_pending_drops_oldest_until_fit(self):
        history = _history("one two", "three four", "five six")

        window = select_window(history, "seven eight nine", budget=6)

        assert [m.content for m in window] == ["five six", "seven eight nine"]
        assert window_size(window) == 5

    def test_duplicate_pending_not_appended(self):
        history = _history("hello", "hi, how can I help?", "tell me a joke")

        window = select_window(history, "tell me a joke", budget=100)

        assert [m.content for m in window] == ["hello", "hi, how can I help?", "tell me a joke"]

    def test_duplicate_detection_is_exact_text(self):
        history = _history("tell me a joke")

        window = select_window(history, "Tell me a joke", budget=100)

        assert [m.content for m in window] == ["tell me a joke", "Tell me a joke"]

    def test_uses_given_sizer(self):
        history = _history("a b c", "d e f")

        by_words = select_window(history, "g", budget=7)
        by_tokens = select_window(history, "g", budget=7, sizer=EstimatedTokenSizer())

        assert len(by_words) == 3
        assert [m.content for m in by_tokens] == ["d e f", "g"]

    def test_does_not_mutate_history(self):
        history = _history("a", "b", "c")
        snapshot = list(history)

        select_window(history, "d", budget=2)

        assert history == snapshot

    @pytest.mark.parametrize("budget", [0, -1, -100])
    def test_non_positive_budget_fails(self, budget: int):
        """Test that a budget below 1 raises ValueError."""
        with pytest.raises(ValueError, match="must be positive"):
            select_window([], "hi", budget=budget)

    @given(histories, contents, st.integers(min_value=1, max_value=40))
    def test_fits_budget_or_pending_alone(self, history, pending, budget):
        """Property test: window fits the budget, or is the pending message alone."""
        window = select_window(history, pending, budget)

        assert window_size(window) <= budget or (
            len(window) == 1 and window[0].content == pending
        )

    @given(histories, contents, st.integers(min_value=1, max_value=40))
    def test_window_is_suffix(self, history, pending, budget):
        """Property test: window is an in-order suffix of history plus pending."""
        window = [m.content for m in select_window(history, pending, budget)]
        past = [m.content for m in history]

        assert window[-1] == pending
        assert _is_suffix(window, past + [pending]) or _is_suffix(window, past)

    @given(histories, contents, st.integers(min_value=1, max_value=40))
    def test_pending_never_duplicated(self, history, pending, budget):
        """Property test: pending text equal to the newest message is not repeated."""
        window = select_window(history, pending, budget)

        if history and history[-1].content == pending:
            assert len(window) <= len(history)

    @given(histories, contents, st.integers(min_value=1, max_value=40))
    def test_idempotent(self, history, pending, budget):
        """Property test: identical inputs give identical windows."""
        assert select_window(history, pending, budget) == select_window(history, pending, budget)
