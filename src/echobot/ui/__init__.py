"""Terminal UI module for echobot.

Provides a Textual-based chat TUI.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (chat bubbles, thread, input bar, sidebar)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (paywall, delete confirmation)
- app.py: Application orchestration (user interaction flow)
"""

from .app import EchoBotApp, run_textual_tui
from .widgets import ChatInputBar, ChatThread, ConversationList, MessageBubble, QuotaBadge

__all__ = [
    "ChatInputBar",
    "ChatThread",
    "ConversationList",
    "EchoBotApp",
    "MessageBubble",
    "QuotaBadge",
    "run_textual_tui",
]
