"""Modal screens for the chat TUI.

This module hides the design decisions about:
- Paywall and confirmation dialog appearance
- Keyboard shortcuts for dialogs
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

DIALOG_CSS = """
{screen} {{
    align: center middle;
    background: $background 70%;
}}

.dialog {{
    width: 60;
    height: auto;
    max-height: 20;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}}

.dialog-title {{
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 0 0 1 0;
    border-bottom: solid $border;
    margin-bottom: 1;
}}

.dialog-body {{
    width: 100%;
    text-align: center;
    padding: 1 2;
    margin-bottom: 1;
}}

.dialog-buttons {{
    width: 100%;
    height: 3;
    align: center middle;
}}

.dialog-buttons Button {{
    margin: 0 1;
    min-width: 10;
}}
"""


class PaywallScreen(ModalScreen[str]):
    """Shown when the free-message quota is used up.

    Dismisses with "refresh" (re-check the subscription) or "close".
    """

    CSS = DIALOG_CSS.format(screen="PaywallScreen")

    BINDINGS = [
        Binding("r", "choose('refresh')", "Refresh", show=False),
        Binding("escape", "choose('close')", "Close", show=False),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Subscription required", classes="dialog-title")
            yield Static(self._message, classes="dialog-body")
            with Horizontal(classes="dialog-buttons"):
                yield Button("I've subscribed", id="btn-refresh", variant="success")
                yield Button("Close", id="btn-close", variant="default")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("btn-"):
            self.dismiss(button_id[4:])

    def action_choose(self, choice: str) -> None:
        self.dismiss(choice)


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Asks before deleting a conversation."""

    CSS = DIALOG_CSS.format(screen="ConfirmDeleteScreen")

    BINDINGS = [
        Binding("y", "confirm(True)", "Yes", show=False),
        Binding("n", "confirm(False)", "No", show=False),
        Binding("escape", "confirm(False)", "Cancel", show=False),
    ]

    def __init__(self, title: str) -> None:
        super().__init__()
        self._title = title

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Delete conversation?", classes="dialog-title")
            yield Static(self._title, classes="dialog-body", markup=False)
            with Horizontal(classes="dialog-buttons"):
                yield Button("Yes", id="btn-yes", variant="error")
                yield Button("No", id="btn-no", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-yes")

    def action_confirm(self, confirmed: bool) -> None:
        self.dismiss(confirmed)
