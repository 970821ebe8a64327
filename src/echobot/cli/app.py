"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..chat import FALLBACK_MESSAGES, QUOTA_EXCEEDED_MESSAGE, ChatSession
from ..history.models import Conversation
from ..logging_config import configure_logging
from ..window import create_sizer, select_window, window_size
from .providers import open_runtime

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="echobot",
    help="Chat with an OpenAI-compatible model, keeping local history within a size budget",
    no_args_is_help=True,
    add_completion=True,
)
conversations_app = typer.Typer(help="Manage stored conversations", no_args_is_help=True)
config_app = typer.Typer(help="Inspect the active configuration", no_args_is_help=True)
app.add_typer(conversations_app, name="conversations")
app.add_typer(config_app, name="config")

# Console for rich output
console = Console()

LOG_LEVELS = ("debug", "info", "warning", "error")
EXIT_WORDS = ("exit", "quit", "q")


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, or error (default: ECHOBOT_LOG_LEVEL or warning)"
    ),
):
    """EchoBot command line."""
    if log_level is not None and log_level.lower() not in LOG_LEVELS:
        raise typer.BadParameter(f"must be one of: {', '.join(LOG_LEVELS)}", param_hint="--log-level")
    configure_logging(log_level)


def _find_conversation(conversations: list[Conversation], prefix: str) -> Conversation:
    """Resolve a conversation by id or unique id prefix."""
    matches = [c for c in conversations if c.id.startswith(prefix)]
    if len(matches) != 1:
        reason = "No" if not matches else "More than one"
        console.print(f"[red]Error: {reason} conversation matches '{escape(prefix)}'[/red]")
        raise typer.Exit(code=1)
    return matches[0]


async def _reply(session: ChatSession, text: str) -> bool:
    """Send one message and print the reply. Returns False once the quota is spent."""
    with console.status("[dim]Thinking...[/dim]"):
        result = await session.send_message(text)

    if result.ok:
        console.print(f"[bold green]EchoBot:[/bold green] {escape(result.content)}\n")
        return True
    if result.reason == "quota_exceeded":
        console.print(f"[yellow]{QUOTA_EXCEEDED_MESSAGE}[/yellow]")
        return False
    console.print(f"[bold green]EchoBot:[/bold green] {FALLBACK_MESSAGES.get(result.reason, FALLBACK_MESSAGES['request_failed'])}")
    if result.detail:
        console.print(f"[dim]{escape(result.detail)}[/dim]")
    console.print()
    return True


@app.command()
def chat(
    message: str | None = typer.Option(
        None,
        "--message",
        "-m",
        help="Send a single message and exit"
    ),
    new: bool = typer.Option(
        False,
        "--new",
        "-n",
        help="Start a new conversation instead of resuming the latest"
    ),
    conversation: str | None = typer.Option(
        None,
        "--conversation",
        "-c",
        help="Resume the conversation with this id (or id prefix)"
    ),
):
    """Interactive chat mode."""
    async def _chat():
        async with open_runtime(console) as runtime:
            session = runtime.session

            if conversation:
                await session.select(_find_conversation(session.conversations, conversation).id)
            elif new or session.current is None:
                await session.new_conversation()

            if message is not None:
                if not message.strip():
                    console.print("[red]Error: message is empty[/red]")
                    raise typer.Exit(code=1)
                await _reply(session, message)
                return

            console.print("[bold cyan]EchoBot Interactive Chat[/bold cyan]")
            console.print("[dim]Type '/new' for a new conversation, 'exit', 'quit', or 'q' to leave[/dim]\n")
            for item in session.current.messages:
                who = "[bold yellow]You:[/bold yellow]" if item.role == "user" else "[bold green]EchoBot:[/bold green]"
                console.print(f"{who} {escape(item.content)}")
            if not session.current.is_empty:
                console.print()

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")

                    if not user_input.strip():
                        continue

                    if user_input.strip().lower() in EXIT_WORDS:
                        console.print("[dim]Goodbye![/dim]")
                        break

                    if user_input.strip() == "/new":
                        await session.new_conversation()
                        console.print("[dim]Started a new conversation[/dim]\n")
                        continue

                    if not await _reply(session, user_input):
                        break

                except KeyboardInterrupt:
                    console.print("\n[dim]Goodbye![/dim]")
                    break
                except EOFError:
                    console.print("\n[dim]Goodbye![/dim]")
                    break

    try:
        asyncio.run(_chat())
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command(name="tui")
def tui_command():
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        async with open_runtime(console) as runtime:
            await run_textual_tui(
                session=runtime.session,
                quota=runtime.quota,
                entitlement=runtime.entitlement,
                model_name=runtime.client.model,
            )
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@conversations_app.command("list")
def list_conversations():
    """List stored conversations, newest first."""
    async def _list():
        async with open_runtime(console, with_client=False) as runtime:
            conversations = await runtime.repository.load_all()

        if not conversations:
            console.print("[dim]No conversations yet.[/dim]")
            return

        table = Table(title="Conversations")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title")
        table.add_column("Messages", justify="right")
        table.add_column("Updated", style="dim")

        for item in sorted(conversations, key=lambda c: c.updated_at, reverse=True):
            table.add_row(
                item.id[:8],
                escape(item.title()),
                str(len(item.messages)),
                item.updated_at.strftime("%Y-%m-%d %H:%M"),
            )
        console.print(table)

    try:
        asyncio.run(_list())
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@conversations_app.command("show")
def show_conversation(
    conversation_id: str = typer.Argument(..., help="Conversation id or id prefix"),
):
    """Print every message of one conversation."""
    async def _show():
        async with open_runtime(console, with_client=False) as runtime:
            item = _find_conversation(await runtime.repository.load_all(), conversation_id)

        console.print(f"[bold cyan]{escape(item.title())}[/bold cyan] [dim]({item.id})[/dim]\n")
        for entry in item.messages:
            style = "yellow" if entry.role == "user" else "green"
            label = "You" if entry.role == "user" else "EchoBot"
            console.print(Panel(
                escape(entry.content),
                title=f"{label} [dim]{entry.timestamp.strftime('%Y-%m-%d %H:%M')}[/dim]",
                title_align="left",
                border_style=style,
            ))

    try:
        asyncio.run(_show())
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@conversations_app.command("delete")
def delete_conversation(
    conversation_id: str = typer.Argument(..., help="Conversation id or id prefix"),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
):
    """Delete a conversation locally and from the remote backup."""
    async def _delete():
        async with open_runtime(console, with_client=False) as runtime:
            conversations = await runtime.repository.load_all()
            item = _find_conversation(conversations, conversation_id)

            if not yes and not typer.confirm(f"Delete '{item.title()}'?"):
                console.print("[dim]Aborted.[/dim]")
                return

            await runtime.repository.save_all([c for c in conversations if c.id != item.id])
            if runtime.backup is not None:
                await runtime.backup.remove(item.id)
            console.print(f"[green]Deleted conversation {item.id[:8]}[/green]")

    try:
        asyncio.run(_delete())
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@conversations_app.command("restore")
def restore_conversations():
    """Copy conversations from the remote backup that are missing locally."""
    async def _restore():
        async with open_runtime(console, with_client=False) as runtime:
            if runtime.backup is None:
                console.print("[yellow]ECHOBOT_BACKUP_URL not set; nothing to restore from[/yellow]")
                raise typer.Exit(code=1)

            local = await runtime.repository.load_all()
            known = {c.id for c in local}
            restored = [c for c in await runtime.backup.restore() if c.id not in known and not c.is_empty]
            if restored:
                await runtime.repository.save_all(sorted(local + restored, key=lambda c: c.created_at))
            console.print(f"[green]Restored {len(restored)} conversation(s)[/green]")

    try:
        asyncio.run(_restore())
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@config_app.command("show")
def show_config():
    """Show the settings in effect after applying remote configuration."""
    async def _show():
        async with open_runtime(console, with_client=False) as runtime:
            settings = runtime.config.get_settings()
            remaining = await runtime.quota.remaining()
            used = await runtime.quota.used()

        table = Table(show_header=False, box=None)
        table.add_column("Setting", style="bold cyan", width=20)
        table.add_column("Value")

        table.add_row("Provider", settings.provider)
        table.add_row("Endpoint", settings.endpoint_url or "[dim](provider default)[/dim]")
        table.add_row("Model", settings.model or "[dim](provider default)[/dim]")
        table.add_row("API Key", "SET" if settings.api_key else "[yellow]NOT SET[/yellow]")
        table.add_row("Temperature", str(settings.temperature))
        table.add_row("Budget", f"{settings.budget} {settings.size_strategy}")
        table.add_row("Free Quota", str(settings.free_message_quota))
        table.add_row("Subscribed", "yes" if runtime.entitlement.is_entitled() else "no")
        table.add_row("Messages Used", str(used))
        table.add_row("Remaining", "unlimited" if remaining is None else str(remaining))

        console.print(table)

    try:
        asyncio.run(_show())
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def window(
    text: str = typer.Argument(..., help="Pending user message"),
    conversation: str | None = typer.Option(
        None,
        "--conversation",
        "-c",
        help="Conversation id (or prefix) to use as history (default: latest)"
    ),
    budget: int | None = typer.Option(
        None,
        "--budget",
        "-b",
        min=1,
        help="Override the configured size budget"
    ),
    strategy: str | None = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Override the size strategy: words or tokens"
    ),
):
    """Preview the context window that would be sent with TEXT."""
    async def _window():
        async with open_runtime(console, with_client=False) as runtime:
            conversations = await runtime.repository.load_all()
            settings = runtime.config.get_settings()

        if conversation:
            history = _find_conversation(conversations, conversation).messages
        else:
            history = conversations[-1].messages if conversations else []

        try:
            sizer = create_sizer(strategy or settings.size_strategy)
        except ValueError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        limit = budget or settings.budget

        selected = select_window(history, text, limit, sizer)

        table = Table(title=f"Window ({len(selected)} of {len(history) + 1} messages)")
        table.add_column("Role", style="cyan")
        table.add_column("Size", justify="right")
        table.add_column("Content")
        for item in selected:
            table.add_row(item.role, str(sizer.size(item.content)), escape(item.content))
        console.print(table)

        total = window_size(selected, sizer)
        style = "green" if total <= limit else "yellow"
        console.print(f"[{style}]Total: {total} / {limit} {sizer.name}[/{style}]")

    try:
        asyncio.run(_window())
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
