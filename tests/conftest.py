"""Pytest configuration and shared fixtures."""
import os
from collections.abc import Sequence
from typing import Any

import pytest

from echobot.backup import ConversationBackup, InMemoryDocumentStore
from echobot.chat import ChatSession
from echobot.entitlement import QuotaGate, StaticEntitlementProvider
from echobot.history import ConversationRepository, create_key_value_store
from echobot.llm import ChatMessage, CompletionClient, CompletionOk, CompletionResult
from echobot.remote_config import ConfigProvider, RemoteSettings, StaticConfigSource


class FakeCompletionClient(CompletionClient):
    """Completion client that replays queued results and records requests."""

    def __init__(self, results: Sequence[CompletionResult] | None = None):
        self.results = list(results or [])
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> CompletionResult:
        self.requests.append({
            "messages": list(messages),
            "model": model,
            "temperature": temperature,
        })
        if self.results:
            return self.results.pop(0)
        return CompletionOk(content=f"echo: {messages[-1].content}", model=model or self.model)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "anyscale": os.getenv("ANYSCALE_API_KEY"),
    }


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def settings():
    return RemoteSettings(api_key="test-key", budget=50, free_message_quota=3)


@pytest.fixture
def config_provider(settings):
    return ConfigProvider(StaticConfigSource(), defaults=settings)


@pytest.fixture
async def kv_store():
    store = create_key_value_store("memory")
    await store.connect()
    yield store
    await store.disconnect()


@pytest.fixture
def document_store():
    return InMemoryDocumentStore()


@pytest.fixture
def entitlement():
    return StaticEntitlementProvider(entitled=False)


@pytest.fixture
def quota(config_provider, entitlement, kv_store):
    return QuotaGate(config_provider, entitlement, kv_store)


@pytest.fixture
def repository(kv_store):
    return ConversationRepository(kv_store)


@pytest.fixture
async def session(fake_client, repository, config_provider, quota, document_store):
    """Started chat session over in-memory collaborators."""
    chat_session = ChatSession(
        client=fake_client,
        repository=repository,
        config=config_provider,
        quota=quota,
        backup=ConversationBackup(document_store),
    )
    await chat_session.start()
    yield chat_session
    await chat_session.close()
