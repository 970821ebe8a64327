"""CSS styles for the chat TUI.

Hides layout and styling decisions from the application logic.
"""

APP_CSS = """
Screen {
    layout: horizontal;
    background: $background;
}

#sidebar {
    width: 32;
    height: 100%;
    border: round $border;
    background: $panel;
    padding: 0 1;
}

#conversation-list {
    height: 1fr;
    border: none;
    background: transparent;
}

#quota-badge {
    height: 1;
    color: $text-muted;
    margin-top: 1;

    &.-exhausted {
        color: $error;
        text-style: bold;
    }
}

#main-panel {
    width: 1fr;
    height: 100%;
}

#chat-thread {
    height: 1fr;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
}

.user-message {
    margin-left: 12;
    background: $primary 25%;
    border: round $primary;
}

.assistant-message {
    margin-right: 12;
    background: $surface;
    border: round $border;
}

.message-header {
    color: $text-muted;
    text-style: italic;
}

.message-content {
    height: auto;
    margin: 0;
    padding: 0;
}

.empty-thread {
    color: $text-muted;
    text-align: center;
    margin-top: 2;
    width: 100%;
}

#typing-indicator {
    color: $accent;
    text-style: italic;
    margin: 1 0 0 1;
}

#chat-input-bar {
    height: 3;
    margin-top: 1;
}

#chat-input {
    width: 1fr;
}

#send-btn {
    min-width: 10;
    margin-left: 1;
}
"""
