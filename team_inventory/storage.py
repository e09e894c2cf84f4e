"""
Snapshot persistence for items, players and assignments.

The owning service loads a full snapshot of each collection at startup and
writes a full snapshot after every mutation. Snapshots are JSON arrays kept in
a key-value backend (in-process dict, Redis, or a SQL table).

Persistence never takes the application down: a missing, unreadable or
malformed snapshot loads as an empty collection, and a failed write is logged
while the in-memory state stays authoritative.
"""
import json
import logging
from typing import Dict, List, Optional, Type

import redis
from pydantic import BaseModel

from . import models, schemas
from .config import DATABASE_URL, REDIS_URL, STORAGE_BACKEND, STORAGE_KEY_PREFIX

logger = logging.getLogger(__name__)

INVENTORY_STORAGE_KEY = "team-inventory-assistant-data"
PLAYERS_STORAGE_KEY = "team-inventory-players-data"
PLAYER_INVENTORY_STORAGE_KEY = "team-inventory-assignments-data"


class MemoryBackend:
    """Process-local backend. Used by default and in tests."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class RedisBackend:
    """Backend storing each snapshot under one Redis string key."""

    def __init__(self, client=None, url: str = REDIS_URL):
        self.client = client if client is not None else redis.from_url(url, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)


class SqlBackend:
    """Backend storing each snapshot as a row of the ``kv_store`` table."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            entry = db.get(models.KeyValueEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            entry = db.get(models.KeyValueEntry, key)
            if entry is None:
                db.add(models.KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()


class SnapshotStorage:
    """
    Load and save whole collections through a key-value backend.

    Args:
        backend: Any object with ``get(key)`` and ``set(key, value)``
        prefix: Optional namespace prepended to every key
    """

    def __init__(self, backend, prefix: str = ""):
        self.backend = backend
        self.prefix = prefix

    def load_inventory(self) -> List[schemas.InventoryItem]:
        return self._load(INVENTORY_STORAGE_KEY, schemas.InventoryItem)

    def save_inventory(self, items: List[schemas.InventoryItem]) -> bool:
        return self._save(INVENTORY_STORAGE_KEY, items)

    def load_players(self) -> List[schemas.Player]:
        return self._load(PLAYERS_STORAGE_KEY, schemas.Player)

    def save_players(self, players: List[schemas.Player]) -> bool:
        return self._save(PLAYERS_STORAGE_KEY, players)

    def load_assignments(self) -> List[schemas.Assignment]:
        return self._load(PLAYER_INVENTORY_STORAGE_KEY, schemas.Assignment)

    def save_assignments(self, assignments: List[schemas.Assignment]) -> bool:
        return self._save(PLAYER_INVENTORY_STORAGE_KEY, assignments)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _load(self, key: str, schema: Type[BaseModel]) -> list:
        """
        Read one snapshot.

        Returns:
            The decoded records, or an empty list if the snapshot is absent
            or cannot be read
        """
        try:
            raw = self.backend.get(self._key(key))
            if not raw:
                return []
            return [schema.model_validate(record) for record in json.loads(raw)]
        except Exception as e:
            logger.error(f"Failed to load {key} from storage: {e}")
            return []

    def _save(self, key: str, records: List[BaseModel]) -> bool:
        """
        Write one snapshot.

        Returns:
            True if successful, False otherwise
        """
        try:
            payload = json.dumps([record.model_dump(mode="json") for record in records])
            self.backend.set(self._key(key), payload)
            return True
        except Exception as e:
            logger.error(f"Failed to save {key} to storage: {e}")
            return False


def build_storage(backend_name: str = STORAGE_BACKEND, prefix: str = STORAGE_KEY_PREFIX) -> SnapshotStorage:
    """
    Build the snapshot storage selected by configuration.

    Args:
        backend_name: "memory", "sql" or "redis"
        prefix: Key namespace

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend_name == "memory":
        backend = MemoryBackend()
    elif backend_name == "sql":
        from .database import make_engine, make_session_factory

        backend = SqlBackend(make_session_factory(make_engine(DATABASE_URL)))
    elif backend_name == "redis":
        backend = RedisBackend(url=REDIS_URL)
    else:
        raise ValueError(f"Unknown storage backend: {backend_name}")

    logger.info(f"Using {backend_name} snapshot storage")
    return SnapshotStorage(backend, prefix=prefix)
