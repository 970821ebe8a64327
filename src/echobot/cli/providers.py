"""Provider factory functions for CLI.

Centralizes creation of the store, settings, completion client, backup and
entitlement collaborators from environment variables. Hides configuration
details from command implementations.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..backup import ConversationBackup, create_document_store
from ..chat import ChatSession
from ..entitlement import (
    DEFAULT_PRODUCT_ID,
    EntitlementProvider,
    HttpSubscriptionSource,
    QuotaGate,
    RecordEntitlementProvider,
    StaticEntitlementProvider,
)
from ..history import ConversationRepository, KeyValueStore, create_key_value_store
from ..llm import CompletionClient, create_completion_client
from ..remote_config import ConfigProvider, RemoteSettings, create_config_source

# Default console for output
_console = Console()

# Environment variable -> RemoteSettings field
SETTINGS_ENV = {
    "ECHOBOT_PROVIDER": "provider",
    "ECHOBOT_ENDPOINT_URL": "endpoint_url",
    "ECHOBOT_MODEL": "model",
    "ECHOBOT_API_KEY": "api_key",
    "ECHOBOT_TEMPERATURE": "temperature",
    "ECHOBOT_FREE_QUOTA": "free_message_quota",
    "ECHOBOT_BUDGET": "budget",
    "ECHOBOT_SIZE_STRATEGY": "size_strategy",
}

DEFAULT_STORE_PATHS = {
    "file": "./echobot_data",
    "sqlite": "./echobot.db",
}


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def get_default_settings(console: Console | None = None) -> RemoteSettings:
    """Build default settings from environment variables.

    Remote configuration, when available, is applied over these.

    Raises:
        SystemExit: If a value fails validation
    """
    con = console or _console
    values = {
        field: os.environ[env_name]
        for env_name, field in SETTINGS_ENV.items()
        if os.getenv(env_name)
    }
    try:
        return RemoteSettings.model_validate(values)
    except ValidationError as e:
        con.print(f"[red]Error: invalid ECHOBOT_* settings:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1)


def get_store() -> KeyValueStore:
    """Create the local key-value store.

    Environment variables:
        ECHOBOT_STORE: Backend type (memory, file, sqlite; default: file)
        ECHOBOT_STORE_PATH: Directory (file) or database path (sqlite)
    """
    backend = os.getenv("ECHOBOT_STORE", "file").lower()
    if backend == "memory":
        return create_key_value_store("memory")
    path = os.getenv("ECHOBOT_STORE_PATH") or DEFAULT_STORE_PATHS.get(backend, "")
    return create_key_value_store(backend, path=path)


def get_config_provider(defaults: RemoteSettings) -> ConfigProvider:
    """Create the settings holder.

    Environment variables:
        ECHOBOT_CONFIG_URL: Remote config JSON endpoint (optional)
        ECHOBOT_CONFIG_TOKEN: Bearer token for the config endpoint
    """
    url = os.getenv("ECHOBOT_CONFIG_URL")
    if url:
        source = create_config_source("http", url=url, token=os.getenv("ECHOBOT_CONFIG_TOKEN"))
    else:
        source = create_config_source("static")
    return ConfigProvider(source, defaults=defaults)


def get_backup() -> ConversationBackup | None:
    """Create the remote backup, or None when not configured.

    Environment variables:
        ECHOBOT_BACKUP_URL: Document API root (optional)
        ECHOBOT_BACKUP_TOKEN: Bearer token for the document API
    """
    url = os.getenv("ECHOBOT_BACKUP_URL")
    if not url:
        return None
    store = create_document_store("http", base_url=url, token=os.getenv("ECHOBOT_BACKUP_TOKEN"))
    return ConversationBackup(store)


def get_entitlement() -> EntitlementProvider:
    """Create the entitlement provider.

    Environment variables:
        ECHOBOT_SUBSCRIPTION_URL: Subscription records endpoint (optional)
        ECHOBOT_SUBSCRIPTION_TOKEN: Bearer token for that endpoint
        ECHOBOT_PRODUCT_ID: Subscription product id
        ECHOBOT_ENTITLED: Treat the user as subscribed when no URL is set
    """
    url = os.getenv("ECHOBOT_SUBSCRIPTION_URL")
    if url:
        source = HttpSubscriptionSource(url, token=os.getenv("ECHOBOT_SUBSCRIPTION_TOKEN"))
        return RecordEntitlementProvider(
            source,
            product_id=os.getenv("ECHOBOT_PRODUCT_ID", DEFAULT_PRODUCT_ID),
        )
    return StaticEntitlementProvider(entitled=_is_truthy(os.getenv("ECHOBOT_ENTITLED")))


def get_client(settings: RemoteSettings, console: Console | None = None) -> CompletionClient:
    """Create the completion client from the active settings.

    Raises:
        SystemExit: If no API key is configured or the provider is unknown
    """
    con = console or _console
    if not settings.api_key:
        con.print("[red]Error: ECHOBOT_API_KEY not set (and not provided by remote config)[/red]")
        raise typer.Exit(code=1)
    try:
        return create_completion_client(
            settings.provider,
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.endpoint_url,
        )
    except ValueError as e:
        con.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@dataclass
class Runtime:
    """Everything a command needs, already connected."""

    store: KeyValueStore
    config: ConfigProvider
    entitlement: EntitlementProvider
    quota: QuotaGate
    repository: ConversationRepository
    backup: ConversationBackup | None
    client: CompletionClient | None
    session: ChatSession | None


@asynccontextmanager
async def open_runtime(
    console: Console | None = None,
    with_client: bool = True,
) -> AsyncIterator[Runtime]:
    """Connect every collaborator and close them afterwards.

    Args:
        console: Rich console for errors
        with_client: Build the completion client and chat session
    """
    con = console or _console
    store = get_store()
    config = get_config_provider(get_default_settings(con))
    entitlement = get_entitlement()
    backup = get_backup()
    client: CompletionClient | None = None
    session: ChatSession | None = None

    await store.connect()
    try:
        await config.refresh()
        await entitlement.refresh()

        repository = ConversationRepository(store)
        quota = QuotaGate(config, entitlement, store)

        if with_client:
            client = get_client(config.get_settings(), con)
            session = ChatSession(
                client=client,
                repository=repository,
                config=config,
                quota=quota,
                backup=backup,
            )
            await session.start()

        yield Runtime(
            store=store,
            config=config,
            entitlement=entitlement,
            quota=quota,
            repository=repository,
            backup=backup,
            client=client,
            session=session,
        )
    finally:
        if session is not None:
            await session.close()
        if client is not None:
            await client.close()
        if backup is not None:
            await backup.close()
        await entitlement.close()
        await config.close()
        await store.disconnect()
