"""Unit tests for the history module."""
import json

import pytest

from echobot.errors import HistoryDecodeError
from echobot.history import (
    CONVERSATIONS_KEY,
    Conversation,
    ConversationRepository,
    KeyValueStore,
    Message,
    create_key_value_store,
)
from echobot.history.file import FileKeyValueStore
from echobot.history.in_memory import InMemoryKeyValueStore
from echobot.history.sqlite import SQLiteKeyValueStore


class TestModels:
    """Tests for Message and Conversation."""

    def test_message_is_frozen(self):
        message = Message(role="user", content="hi")
        with pytest.raises(ValueError):
            message.content = "changed"  # type: ignore

    def test_message_rejects_unknown_role(self):
        with pytest.raises(ValueError):
            Message(role="system", content="hi")  # type: ignore

    def test_append_keeps_order(self):
        conversation = Conversation()
        assert conversation.is_empty
        assert conversation.last_message is None

        first = conversation.append("user", "hello")
        second = conversation.append("assistant", "hi there")

        assert [m.id for m in conversation.messages] == [first.id, second.id]
        assert conversation.last_message == second
        assert conversation.updated_at == second.timestamp
        assert not conversation.is_empty

    def test_title(self):
        conversation = Conversation()
        assert conversation.title() == "New conversation"

        conversation.append("assistant", "Welcome")
        conversation.append("user", "what is   the\nweather like today in the city of Amsterdam")

        assert conversation.title() == "what is the weather like today in the ci..."
        assert conversation.title(limit=100) == "what is the weather like today in the city of Amsterdam"

    def test_json_roundtrip(self):
        conversation = Conversation()
        conversation.append("user", "hello")

        restored = Conversation.model_validate(json.loads(conversation.model_dump_json()))

        assert restored == conversation


class TestKeyValueStores:
    """Tests for every key-value store backend."""

    @pytest.fixture(params=["memory", "file", "sqlite"])
    async def store(self, request, tmp_path):
        if request.param == "memory":
            backend = create_key_value_store("memory")
        elif request.param == "file":
            backend = create_key_value_store("file", path=tmp_path / "data")
        else:
            backend = create_key_value_store("sqlite", path=tmp_path / "echobot.db")
        await backend.connect()
        yield backend
        await backend.disconnect()

    def test_store_is_abstract(self):
        """Test that KeyValueStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            KeyValueStore()  # type: ignore

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_put_get_overwrite(self, store):
        await store.put("conversations", "[1]")
        assert await store.get("conversations") == "[1]"

        await store.put("conversations", "[1, 2]")
        assert await store.get("conversations") == "[1, 2]"

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.put("free_messages_used", "3")
        await store.delete("free_messages_used")
        await store.delete("free_messages_used")

        assert await store.get("free_messages_used") is None

    @pytest.mark.asyncio
    async def test_file_store_persists_across_instances(self, tmp_path):
        first = FileKeyValueStore(tmp_path)
        await first.connect()
        await first.put("conversations", "[]")

        second = FileKeyValueStore(tmp_path)
        await second.connect()

        assert await second.get("conversations") == "[]"
        assert (tmp_path / "conversations.json").exists()
        assert not list(tmp_path.glob("*.tmp"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["../escape", "a/b", "", ".."])
    async def test_file_store_rejects_bad_keys(self, tmp_path, key):
        store = FileKeyValueStore(tmp_path)
        with pytest.raises(ValueError, match="Invalid store key"):
            await store.get(key)

    @pytest.mark.asyncio
    async def test_sqlite_store_persists_across_connections(self, tmp_path):
        path = tmp_path / "nested" / "echobot.db"
        first = SQLiteKeyValueStore(path)
        await first.connect()
        await first.put("conversations", "[]")
        await first.disconnect()

        second = SQLiteKeyValueStore(path)
        await second.connect()
        try:
            assert await second.get("conversations") == "[]"
        finally:
            await second.disconnect()

    @pytest.mark.asyncio
    async def test_sqlite_requires_connect(self, tmp_path):
        store = SQLiteKeyValueStore(tmp_path / "echobot.db")
        with pytest.raises(RuntimeError, match="not connected"):
            await store.get("conversations")


class TestStoreFactory:
    """Tests for the key-value store factory."""

    def test_create_backends(self, tmp_path):
        assert isinstance(create_key_value_store(), InMemoryKeyValueStore)
        assert isinstance(create_key_value_store("file", path=tmp_path), FileKeyValueStore)
        assert isinstance(create_key_value_store("sqlite", path=tmp_path / "x.db"), SQLiteKeyValueStore)

    def test_backend_type(self, tmp_path):
        assert create_key_value_store("memory").backend_type == "memory"
        assert create_key_value_store("file", path=tmp_path).backend_type == "file"

    def test_unknown_backend(self):
        """Test that unknown backend raises ValueError."""
        with pytest.raises(ValueError, match="Unsupported store backend"):
            create_key_value_store("redis")


class TestConversationRepository:
    """Tests for ConversationRepository."""

    @pytest.mark.asyncio
    async def test_load_empty(self, repository):
        assert await repository.load_all() == []

    @pytest.mark.asyncio
    async def test_save_and_load(self, repository, kv_store):
        first = Conversation()
        first.append("user", "hello")
        first.append("assistant", "hi")
        second = Conversation()
        second.append("user", "another")

        await repository.save_all([first, second])

        assert await repository.load_all() == [first, second]
        stored = json.loads(await kv_store.get(CONVERSATIONS_KEY))
        assert [item["id"] for item in stored] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_custom_key(self, kv_store):
        repository = ConversationRepository(kv_store, key="other")
        await repository.save_all([Conversation()])

        assert await kv_store.get(CONVERSATIONS_KEY) is None
        assert len(await repository.load_all()) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blob", ["not json", '{"id": "x"}', '[{"messages": 5}]'])
    async def test_corrupt_blob(self, kv_store, blob):
        await kv_store.put(CONVERSATIONS_KEY, blob)

        with pytest.raises(HistoryDecodeError):
            await ConversationRepository(kv_store).load_all()
