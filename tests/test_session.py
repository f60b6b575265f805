"""
Unit tests for the session store and its storage backends.
"""
from unittest.mock import MagicMock

import pytest

from ekraf_admin import config
from ekraf_admin.common.session import (
    TOKEN_KEY, USER_KEY, JsonFileStorage, MemoryStorage, RedisStorage, SessionStore,
    create_session_store,
)
from ekraf_admin.users.schemas import User


@pytest.fixture
def admin_user():
    return User(id="2", name="Admin Ekraf", email="admin@ekraf.test", level_id="2", level="admin")


class TestSessionStore:
    """Test the token and user snapshot lifecycle."""

    def test_empty_session(self):
        session = SessionStore(MemoryStorage())

        assert session.get() is None
        assert session.get_user() is None
        assert not session.is_authenticated

    def test_set_then_get(self, admin_user):
        session = SessionStore(MemoryStorage())
        session.set("token-abc", admin_user)

        assert session.get() == "token-abc"
        assert session.is_authenticated
        cached = session.get_user()
        assert cached.email == "admin@ekraf.test"
        assert cached.level_name == "admin"

    def test_clear_removes_both_keys(self, admin_user):
        storage = MemoryStorage()
        session = SessionStore(storage)
        session.set("token-abc", admin_user)

        session.clear()

        assert session.get() is None
        assert storage.get_item(TOKEN_KEY) is None
        assert storage.get_item(USER_KEY) is None

    def test_set_without_user_drops_stale_snapshot(self, admin_user):
        session = SessionStore(MemoryStorage())
        session.set("token-1", admin_user)
        session.set("token-2")

        assert session.get() == "token-2"
        assert session.get_user() is None

    def test_unreadable_snapshot_is_ignored(self):
        session = SessionStore(MemoryStorage({TOKEN_KEY: "t", USER_KEY: "{not json"}))

        assert session.get() == "t"
        assert session.get_user() is None


class TestJsonFileStorage:
    def test_persists_across_instances(self, tmp_path, admin_user):
        path = tmp_path / "nested" / "session.json"
        SessionStore(JsonFileStorage(path)).set("token-abc", admin_user)

        reopened = SessionStore(JsonFileStorage(path))

        assert reopened.get() == "token-abc"
        assert reopened.get_user().id == "2"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{{{", encoding="utf-8")

        storage = JsonFileStorage(path)

        assert storage.get_item(TOKEN_KEY) is None
        storage.set_item(TOKEN_KEY, "fresh")
        assert storage.get_item(TOKEN_KEY) == "fresh"

    def test_remove_missing_key_does_not_create_file(self, tmp_path):
        path = tmp_path / "session.json"
        JsonFileStorage(path).remove_item(TOKEN_KEY)
        assert not path.exists()


class TestRedisStorage:
    """Test the Redis backend against a mocked client."""

    def test_keys_are_prefixed(self):
        redis_client = MagicMock()
        storage = RedisStorage(client=redis_client, prefix="test:")

        storage.set_item(TOKEN_KEY, "token-abc")
        storage.remove_item(USER_KEY)

        redis_client.set.assert_called_once_with("test:userToken", "token-abc")
        redis_client.delete.assert_called_once_with("test:userData")

    def test_bytes_are_decoded(self):
        redis_client = MagicMock()
        redis_client.get.return_value = b"token-abc"
        session = SessionStore(RedisStorage(client=redis_client))

        assert session.get() == "token-abc"
        redis_client.get.assert_called_with("ekraf_admin:session:userToken")

    def test_missing_key(self):
        redis_client = MagicMock()
        redis_client.get.return_value = None
        assert SessionStore(RedisStorage(client=redis_client)).get() is None


class TestCreateSessionStore:
    def test_memory_backend(self):
        session = create_session_store("memory")
        assert isinstance(session.storage, MemoryStorage)

    def test_file_backend_uses_configured_path(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "SESSION_FILE", tmp_path / "session.json")

        session = create_session_store("FILE")

        assert isinstance(session.storage, JsonFileStorage)
        assert session.storage.path == tmp_path / "session.json"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_session_store("sqlite")
