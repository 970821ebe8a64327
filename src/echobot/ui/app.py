"""Main Textual TUI application.

Renders the conversation thread and drives a ChatSession from user input.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, ListView

from ..chat import QUOTA_EXCEEDED_MESSAGE, ChatSession
from ..entitlement import EntitlementProvider, QuotaGate
from ..history.models import Message
from .screens import ConfirmDeleteScreen, PaywallScreen
from .styles import APP_CSS
from .themes import ECHOBOT_DARK
from .widgets import ChatInputBar, ChatThread, ConversationItem, ConversationList, QuotaBadge


class EchoBotApp(App):
    """Textual TUI for chatting with the completion endpoint."""

    CSS = APP_CSS
    TITLE = "EchoBot"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_conversation", "New Chat", priority=True),
        Binding("ctrl+d", "delete_conversation", "Delete Chat", priority=True),
    ]

    def __init__(
        self,
        session: ChatSession,
        quota: QuotaGate,
        entitlement: EntitlementProvider,
        model_name: str = "",
    ) -> None:
        super().__init__()
        self._session = session
        self._quota = quota
        self._entitlement = entitlement
        self._model_name = model_name

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="sidebar"):
            yield ConversationList(id="conversation-list")
            yield QuotaBadge(id="quota-badge")
        with Vertical(id="main-panel"):
            yield ChatThread(id="chat-thread")
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    async def on_mount(self) -> None:
        self.register_theme(ECHOBOT_DARK)
        self.theme = "echobot-dark"
        if self._model_name:
            self.sub_title = self._model_name
        await self._refresh_all()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    async def _refresh_all(self) -> None:
        thread = self.query_one("#chat-thread", ChatThread)
        await thread.show_conversation(self._session.current)
        await self._refresh_sidebar()

    async def _refresh_sidebar(self) -> None:
        current_id = self._session.current.id if self._session.current else None
        sidebar = self.query_one("#conversation-list", ConversationList)
        await sidebar.show_conversations(self._session.conversations, current_id)
        badge = self.query_one("#quota-badge", QuotaBadge)
        badge.show_remaining(await self._quota.remaining())

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        # Further submits are ignored until this send finishes.
        self.query_one("#chat-input-bar", ChatInputBar).set_busy(True)
        self._send(event.value)

    @work(group="send")
    async def _send(self, text: str) -> None:
        """Send one message as a background async worker."""
        thread = self.query_one("#chat-thread", ChatThread)
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)

        try:
            if not await self._quota.can_send():
                self._show_paywall()
                return

            if self._session.current is None:
                await self._session.new_conversation()
                await thread.show_conversation(self._session.current)
            conversation = self._session.current
            sent_before = len(conversation.messages)

            # Shown right away; the stored copy is appended inside send_message.
            thread.add_message(Message(role="user", content=text))
            thread.show_typing()

            result = await self._session.send_message(text)
            thread.hide_typing()

            if not result.ok and result.reason == "quota_exceeded":
                await thread.show_conversation(conversation)
                self._show_paywall()
                return

            for message in conversation.messages[sent_before + 1:]:
                thread.add_message(message)
            if not result.ok:
                self.notify(result.detail or "Request failed", severity="error", timeout=5)
            await self._refresh_sidebar()
        finally:
            thread.hide_typing()
            input_bar.set_busy(False)

    def _show_paywall(self) -> None:
        def _on_close(choice: str | None) -> None:
            if choice == "refresh":
                self._refresh_entitlement()

        self.push_screen(PaywallScreen(QUOTA_EXCEEDED_MESSAGE), _on_close)

    @work(exclusive=True, group="entitlement")
    async def _refresh_entitlement(self) -> None:
        state = await self._entitlement.refresh()
        if state.entitled:
            self.notify("Subscription active. Thanks!", timeout=3)
        else:
            self.notify("No active subscription found", severity="warning", timeout=3)
        await self._refresh_sidebar()

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if not isinstance(item, ConversationItem):
            return
        if self._session.current and self._session.current.id == item.conversation_id:
            return
        await self._session.select(item.conversation_id)
        await self._refresh_all()

    async def action_new_conversation(self) -> None:
        await self._session.new_conversation()
        await self._refresh_all()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_delete_conversation(self) -> None:
        conversation = self._session.current
        if conversation is None or conversation.is_empty:
            return

        async def _on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                await self._session.delete_conversation(conversation.id)
                await self._refresh_all()
                self.notify("Conversation deleted", timeout=2)

        self.push_screen(ConfirmDeleteScreen(conversation.title()), _on_confirm)


async def run_textual_tui(
    session: ChatSession,
    quota: QuotaGate,
    entitlement: EntitlementProvider,
    model_name: str = "",
) -> None:
    """Run the Textual TUI until the user quits.

    Args:
        session: Started chat session
        quota: Free-message quota gate
        entitlement: Subscription provider, re-checked from the paywall
        model_name: Shown in the header
    """
    app = EchoBotApp(session=session, quota=quota, entitlement=entitlement, model_name=model_name)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await session.close()
