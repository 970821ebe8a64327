"""Unit tests for the backup module."""
import json
from urllib.parse import unquote

import httpx
import pytest

from echobot.backup import (
    ConversationBackup,
    DocumentStore,
    InMemoryDocumentStore,
    create_document_store,
)
from echobot.backup.http import HttpDocumentStore
from echobot.errors import BackupError
from echobot.history import Conversation


def _conversation(*texts: str) -> Conversation:
    conversation = Conversation()
    for i, text in enumerate(texts):
        conversation.append("user" if i % 2 == 0 else "assistant", text)
    return conversation


class FakeDocumentApi:
    """In-process REST document API for httpx.MockTransport."""

    def __init__(self):
        self.docs: dict[tuple[str, str], dict] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = [unquote(p) for p in request.url.raw_path.decode().strip("/").split("/")]
        if parts[0] == "v1":
            parts = parts[1:]

        if len(parts) == 1:
            ids = [doc_id for (collection, doc_id) in self.docs if collection == parts[0]]
            return httpx.Response(200, json={"ids": ids})

        key = (parts[0], parts[1])
        if request.method == "GET":
            if key not in self.docs:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=self.docs[key])
        if request.method == "POST":
            if key in self.docs:
                return httpx.Response(409, json={"error": "exists"})
            self.docs[key] = json.loads(request.content)
            return httpx.Response(201, json={})
        if request.method == "PUT":
            if key not in self.docs:
                return httpx.Response(404, json={"error": "not found"})
            self.docs[key] = json.loads(request.content)
            return httpx.Response(200, json={})
        if request.method == "DELETE":
            if self.docs.pop(key, None) is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(204)
        return httpx.Response(405)


class TestDocumentStoreInterface:

    def test_store_is_abstract(self):
        """Test that DocumentStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            DocumentStore()  # type: ignore


class TestInMemoryDocumentStore:
    """Tests for InMemoryDocumentStore."""

    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, document_store):
        assert not await document_store.exists("conversations", "c1")
        assert await document_store.get("conversations", "c1") is None

        await document_store.create("conversations", "c1", {"n": 1})
        assert await document_store.exists("conversations", "c1")

        await document_store.update("conversations", "c1", {"n": 2})
        assert await document_store.get("conversations", "c1") == {"n": 2}
        assert await document_store.list_ids("conversations") == ["c1"]

        await document_store.delete("conversations", "c1")
        await document_store.delete("conversations", "c1")
        assert await document_store.list_ids("conversations") == []

    @pytest.mark.asyncio
    async def test_strict_create_and_update(self, document_store):
        await document_store.create("conversations", "c1", {})

        with pytest.raises(BackupError, match="already exists"):
            await document_store.create("conversations", "c1", {})
        with pytest.raises(BackupError, match="does not exist"):
            await document_store.update("conversations", "c2", {})

    @pytest.mark.asyncio
    async def test_documents_are_copied(self, document_store):
        data = {"messages": []}
        await document_store.create("conversations", "c1", data)
        data["messages"].append("changed")

        assert await document_store.get("conversations", "c1") == {"messages": []}


class TestHttpDocumentStore:
    """Tests for HttpDocumentStore against a mock transport."""

    @pytest.fixture
    def api(self):
        return FakeDocumentApi()

    @pytest.fixture
    async def store(self, api):
        http_store = HttpDocumentStore(
            "https://backup.example.com/v1",
            token="secret",
            transport=httpx.MockTransport(api),
        )
        yield http_store
        await http_store.close()

    @pytest.mark.asyncio
    async def test_roundtrip(self, store, api):
        assert not await store.exists("conversations", "c1")

        await store.create("conversations", "c1", {"n": 1})
        await store.update("conversations", "c1", {"n": 2})

        assert await store.exists("conversations", "c1")
        assert await store.get("conversations", "c1") == {"n": 2}
        assert await store.list_ids("conversations") == ["c1"]
        assert [r.method for r in api.requests] == ["GET", "POST", "PUT", "GET", "GET", "GET"]

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, store, api):
        await store.exists("conversations", "c1")

        request = api.requests[0]
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.url.path == "/v1/conversations/c1"

    @pytest.mark.asyncio
    async def test_ids_are_quoted(self, store, api):
        await store.exists("conversations", "a/b c")

        assert api.requests[0].url.raw_path == b"/v1/conversations/a%2Fb%20c"

    @pytest.mark.asyncio
    async def test_delete_missing_is_ignored(self, store):
        await store.delete("conversations", "missing")

    @pytest.mark.asyncio
    async def test_server_error(self):
        store = HttpDocumentStore(
            "https://backup.example.com",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        with pytest.raises(BackupError, match="HTTP 500"):
            await store.create("conversations", "c1", {})
        await store.close()

    @pytest.mark.asyncio
    async def test_network_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = HttpDocumentStore("https://backup.example.com", transport=httpx.MockTransport(refuse))
        with pytest.raises(BackupError, match="connection refused"):
            await store.exists("conversations", "c1")
        await store.close()


class TestConversationBackup:
    """Tests for ConversationBackup."""

    @pytest.mark.asyncio
    async def test_backup_creates_then_updates(self, document_store):
        backup = ConversationBackup(document_store)
        conversation = _conversation("hello")

        await backup.backup(conversation)
        conversation.append("assistant", "hi")
        await backup.backup(conversation)

        stored = await document_store.get("conversations", conversation.id)
        assert len(stored["messages"]) == 2

    @pytest.mark.asyncio
    async def test_remove(self, document_store):
        backup = ConversationBackup(document_store)
        conversation = _conversation("hello")
        await backup.backup(conversation)

        await backup.remove(conversation.id)

        assert not await document_store.exists("conversations", conversation.id)

    @pytest.mark.asyncio
    async def test_restore_sorted_and_skips_invalid(self, document_store):
        backup = ConversationBackup(document_store, collection="chats")
        older = _conversation("first")
        newer = _conversation("second")
        await backup.backup(newer)
        await backup.backup(older.model_copy(update={"created_at": newer.created_at.replace(year=2000)}))
        await document_store.create("chats", "broken", {"messages": "nope"})

        restored = await backup.restore()

        assert [c.id for c in restored] == [older.id, newer.id]
        assert backup.collection == "chats"

    @pytest.mark.asyncio
    async def test_backup_over_http(self):
        api = FakeDocumentApi()
        backup = ConversationBackup(HttpDocumentStore("https://backup.example.com", transport=httpx.MockTransport(api)))
        conversation = _conversation("hello", "hi")

        await backup.backup(conversation)
        await backup.backup(conversation)

        assert [c.id for c in await backup.restore()] == [conversation.id]
        await backup.close()


class TestDocumentStoreFactory:

    def test_create_memory(self):
        assert isinstance(create_document_store(), InMemoryDocumentStore)

    def test_create_http(self):
        assert isinstance(create_document_store("http", base_url="https://backup.example.com"), HttpDocumentStore)

    def test_http_requires_base_url(self):
        with pytest.raises(TypeError, match="requires 'base_url'"):
            create_document_store("http")

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported document store backend"):
            create_document_store("firestore")
