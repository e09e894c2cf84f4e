"""Tests for snapshot persistence and its failure behaviour."""

from unittest.mock import MagicMock

import pytest
import redis

from team_inventory import schemas
from team_inventory.database import make_engine, make_session_factory
from team_inventory.storage import (
    INVENTORY_STORAGE_KEY,
    PLAYER_INVENTORY_STORAGE_KEY,
    PLAYERS_STORAGE_KEY,
    MemoryBackend,
    RedisBackend,
    SnapshotStorage,
    SqlBackend,
    build_storage,
)


class TestSnapshotStorage:
    def test_missing_snapshot_loads_empty(self, storage):
        assert storage.load_inventory() == []
        assert storage.load_players() == []
        assert storage.load_assignments() == []

    def test_saved_records_load_back(self, storage):
        item = schemas.InventoryItem(product_name="Helmet", quantity=3, notes="Size L")
        player = schemas.Player(name="Bob", jersey_number=22)
        assignment = schemas.Assignment(player_id=player.id, inventory_id=item.id, quantity=2)

        assert storage.save_inventory([item])
        assert storage.save_players([player])
        assert storage.save_assignments([assignment])

        assert storage.load_inventory() == [item]
        assert storage.load_players() == [player]
        assert storage.load_assignments() == [assignment]

    def test_malformed_json_loads_empty(self):
        backend = MemoryBackend()
        backend.set(INVENTORY_STORAGE_KEY, "{not json")
        assert SnapshotStorage(backend).load_inventory() == []

    def test_invalid_records_load_empty(self):
        backend = MemoryBackend()
        backend.set(PLAYERS_STORAGE_KEY, '[{"jersey_number": 4}]')
        assert SnapshotStorage(backend).load_players() == []

    def test_negative_item_quantity_loads_empty(self):
        backend = MemoryBackend()
        backend.set(INVENTORY_STORAGE_KEY, '[{"id": "i1", "product_name": "Helmet", "quantity": -3}]')
        assert SnapshotStorage(backend).load_inventory() == []

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_assignment_quantity_loads_empty(self, quantity):
        backend = MemoryBackend()
        backend.set(
            PLAYER_INVENTORY_STORAGE_KEY,
            f'[{{"id": "a1", "player_id": "p1", "inventory_id": "i1", "quantity": {quantity}}}]',
        )
        assert SnapshotStorage(backend).load_assignments() == []

    def test_backend_failure_on_load(self):
        backend = MagicMock()
        backend.get.side_effect = redis.ConnectionError("down")
        assert SnapshotStorage(backend).load_inventory() == []

    def test_backend_failure_on_save(self):
        backend = MagicMock()
        backend.set.side_effect = redis.ConnectionError("down")
        assert SnapshotStorage(backend).save_players([schemas.Player(name="Bob")]) is False

    def test_prefix_namespaces_keys(self):
        backend = MemoryBackend()
        SnapshotStorage(backend, prefix="team-a:").save_players([schemas.Player(name="Bob")])

        assert f"team-a:{PLAYERS_STORAGE_KEY}" in backend.data
        assert SnapshotStorage(backend).load_players() == []


class TestSqlBackend:
    def test_get_and_overwrite(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'snapshots.db'}")
        backend = SqlBackend(make_session_factory(engine))

        assert backend.get("key") is None
        backend.set("key", "[1]")
        backend.set("key", "[1, 2]")
        assert backend.get("key") == "[1, 2]"

    def test_snapshot_survives_new_session_factory(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'snapshots.db'}"
        player = schemas.Player(name="Bob")
        SnapshotStorage(SqlBackend(make_session_factory(make_engine(url)))).save_players([player])

        reopened = SnapshotStorage(SqlBackend(make_session_factory(make_engine(url))))

        assert reopened.load_players() == [player]


class TestRedisBackend:
    def test_delegates_to_client(self):
        client = MagicMock()
        client.get.return_value = "[]"
        backend = RedisBackend(client=client)

        backend.set("key", "[]")

        client.set.assert_called_once_with("key", "[]")
        assert backend.get("key") == "[]"
        client.get.assert_called_once_with("key")


class TestBuildStorage:
    def test_memory(self):
        assert isinstance(build_storage("memory").backend, MemoryBackend)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_storage("floppy")
