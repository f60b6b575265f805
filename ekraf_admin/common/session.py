"""
Session storage: a single bearer token plus the last-known user snapshot.

The session is written only by the login/logout flow and read by every
authenticated request. No expiry is tracked here; an expired token shows up
as an ``AuthorizationError`` from the backend.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import redis

from ekraf_admin import config
from ekraf_admin.users.schemas import User

logger = logging.getLogger(__name__)

TOKEN_KEY = "userToken"
USER_KEY = "userData"


class KeyValueStorage:
    """
    Minimal string key-value storage the session is persisted in.
    """

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """
    Keeps all keys in one JSON file. The file is rewritten on every change.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Session file %s is corrupt, starting with an empty session", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class RedisStorage(KeyValueStorage):
    """
    Stores the session keys in Redis under a common prefix.
    """

    def __init__(self, url: str = config.SESSION_REDIS_URL, client: Optional[redis.Redis] = None,
                 prefix: str = "ekraf_admin:session:"):
        self.client = client or redis.Redis.from_url(url, decode_responses=True)
        self.prefix = prefix

    def get_item(self, key: str) -> Optional[str]:
        value = self.client.get(self.prefix + key)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set_item(self, key: str, value: str) -> None:
        self.client.set(self.prefix + key, value)

    def remove_item(self, key: str) -> None:
        self.client.delete(self.prefix + key)


class SessionStore:
    """
    The one active session: bearer token and cached user profile.
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None):
        self.storage = storage or MemoryStorage()

    def get(self) -> Optional[str]:
        """Return the current bearer token, or None when logged out."""
        return self.storage.get_item(TOKEN_KEY) or None

    def get_user(self) -> Optional[User]:
        raw = self.storage.get_item(USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValueError:
            logger.warning("Cached user snapshot is unreadable, ignoring it")
            return None

    def set(self, token: str, user: Optional[User] = None) -> None:
        self.storage.set_item(TOKEN_KEY, token)
        if user is not None:
            self.storage.set_item(USER_KEY, user.model_dump_json(by_alias=True))
        else:
            self.storage.remove_item(USER_KEY)
        logger.info("Session stored for %s", user.email if user else "unknown user")

    def clear(self) -> None:
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)
        logger.info("Session cleared")

    @property
    def is_authenticated(self) -> bool:
        return self.get() is not None


def create_session_store(backend: Optional[str] = None) -> SessionStore:
    """
    Build the session store configured by ``EKRAF_SESSION_BACKEND``.

    Args:
        backend: Override for the configured backend ("file", "redis" or "memory")

    Returns:
        SessionStore over the selected storage

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = (backend or config.SESSION_BACKEND).lower()
    if backend == "file":
        return SessionStore(JsonFileStorage(config.SESSION_FILE))
    if backend == "redis":
        return SessionStore(RedisStorage(config.SESSION_REDIS_URL))
    if backend == "memory":
        return SessionStore(MemoryStorage())
    raise ValueError(f"Unknown session backend: {backend}")
