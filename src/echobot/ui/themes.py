"""Theme definitions for the chat TUI.

To add a new theme, define it here and register it in the app.
"""

from textual.theme import Theme

ECHOBOT_DARK = Theme(
    name="echobot-dark",
    primary="#0a84ff",      # System blue - user bubbles
    secondary="#5e5ce6",    # Indigo
    accent="#64d2ff",       # Cyan - typing indicator
    foreground="#f2f2f7",
    background="#000000",
    success="#30d158",
    warning="#ffd60a",
    error="#ff453a",
    surface="#1c1c1e",      # Assistant bubbles
    panel="#2c2c2e",        # Sidebar
    dark=True,
    variables={
        "border": "#3a3a3c",
        "border-blurred": "#2c2c2e",
        "scrollbar": "#2c2c2e",
        "scrollbar-hover": "#3a3a3c",
        "scrollbar-active": "#0a84ff",
        "input-selection-background": "#0a84ff 30%",
    },
)
