"""Custom Textual widgets for the chat TUI.

Hides widget implementation details:
- Chat bubble rendering and alignment
- Thread scrolling
- Input handling and send history
- Conversation list and quota display
"""

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Input, Label, ListItem, ListView, Markdown, Static

from ..history.models import Conversation, Message

TYPING_INDICATOR_ID = "typing-indicator"


class MessageBubble(Vertical):
    """One chat message. User bubbles sit right, assistant bubbles left."""

    def __init__(self, message: Message, *args, **kwargs) -> None:
        role_class = "user-message" if message.role == "user" else "assistant-message"
        super().__init__(*args, classes=f"chat-message {role_class}", **kwargs)
        self.message = message

    def compose(self):
        sender = "You" if self.message.role == "user" else "EchoBot"
        timestamp = self.message.timestamp.astimezone().strftime("%H:%M")
        yield Static(f"{sender} [{timestamp}]", classes="message-header")
        if self.message.role == "user":
            yield Static(self.message.content, classes="message-content", markup=False)
        else:
            yield Markdown(self.message.content, classes="message-content")


class ChatThread(VerticalScroll):
    """Scrollable conversation thread."""

    BORDER_TITLE = "EchoBot"
    ALLOW_SELECT = True

    async def show_conversation(self, conversation: Conversation | None) -> None:
        """Replace the thread with ``conversation``'s messages."""
        await self.remove_children()
        if conversation is None or conversation.is_empty:
            self.border_subtitle = "New conversation"
            await self.mount(Static("Type something to start chatting.", classes="empty-thread"))
            return
        await self.mount_all(MessageBubble(message) for message in conversation.messages)
        self.border_subtitle = f"{len(conversation.messages)} messages"
        self.scroll_end(animate=False)

    def add_message(self, message: Message) -> None:
        for placeholder in self.query(".empty-thread"):
            placeholder.remove()
        self.mount(MessageBubble(message))
        self.scroll_end(animate=False)

    def show_typing(self) -> None:
        if not self.query(f"#{TYPING_INDICATOR_ID}"):
            self.mount(Static("EchoBot is typing...", id=TYPING_INDICATOR_ID))
            self.scroll_end(animate=False)

    def hide_typing(self) -> None:
        for indicator in self.query(f"#{TYPING_INDICATOR_ID}"):
            indicator.remove()


class ChatInputBar(Horizontal):
    """Single-line input with a Send button and Up/Down history."""

    class Submitted(TextualMessage):
        """Posted when the user submits non-empty text."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._busy = False

    def compose(self):
        yield Input(placeholder="Type something", id="chat-input")
        yield Button("Send", id="send-btn", variant="primary")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        if event.key == "up":
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down":
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_input = self.query_one("#chat-input", Input)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_input.value = ""
                return
        text_input.value = self._history[self._history_index]
        text_input.cursor_position = len(text_input.value)

    def _submit(self) -> None:
        if self._busy:
            return
        text_input = self.query_one("#chat-input", Input)
        value = text_input.value.strip()
        if not value:
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
        self._history_index = -1
        text_input.value = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self.query_one("#chat-input", Input).focus()

    def set_busy(self, busy: bool) -> None:
        self._busy = busy
        self.query_one("#send-btn", Button).disabled = busy


class ConversationItem(ListItem):
    """Sidebar entry for one conversation."""

    def __init__(self, conversation: Conversation) -> None:
        super().__init__(Label(conversation.title(28), markup=False))
        self.conversation_id = conversation.id


class ConversationList(ListView):
    """Sidebar listing stored conversations, newest first."""

    BORDER_TITLE = "Conversations"

    async def show_conversations(self, conversations: list[Conversation], current_id: str | None) -> None:
        await self.clear()
        ordered = [c for c in reversed(conversations) if not c.is_empty]
        await self.extend(ConversationItem(c) for c in ordered)
        for index, conversation in enumerate(ordered):
            if conversation.id == current_id:
                self.index = index
                break


class QuotaBadge(Static):
    """Shows remaining free messages, or the subscription state."""

    def show_remaining(self, remaining: int | None) -> None:
        self.remove_class("-exhausted")
        if remaining is None:
            self.update("Subscribed")
        elif remaining == 0:
            self.add_class("-exhausted")
            self.update("No free messages left")
        else:
            self.update(f"{remaining} free message{'s' if remaining != 1 else ''} left")
