import pytest
from fastapi.testclient import TestClient

from team_inventory.inventory_store import InventoryStore
from team_inventory.ledger import AssignmentLedger
from team_inventory.main import app, get_inventory
from team_inventory.player_store import PlayerStore
from team_inventory.reconciler import RosterReconciler
from team_inventory.service import TeamInventory
from team_inventory.storage import MemoryBackend, SnapshotStorage


@pytest.fixture()
def inventory_store():
    return InventoryStore()


@pytest.fixture()
def player_store():
    return PlayerStore()


@pytest.fixture()
def ledger(inventory_store, player_store):
    return AssignmentLedger(inventory_store, player_store)


@pytest.fixture()
def reconciler(inventory_store, player_store, ledger):
    return RosterReconciler(inventory_store, player_store, ledger)


@pytest.fixture()
def storage():
    return SnapshotStorage(MemoryBackend())


@pytest.fixture()
def service(storage):
    team = TeamInventory(storage)
    team.load()
    return team


@pytest.fixture()
def client(service):
    app.dependency_overrides[get_inventory] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
