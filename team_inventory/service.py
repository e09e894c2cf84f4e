"""
Owning layer for the team inventory core.

``TeamInventory`` wires the inventory store, player store, assignment ledger
and roster reconciler to one snapshot storage. It loads every collection at
startup and saves the affected collections after each mutation. All mutations
share the ledger's re-entrant lock, so concurrent requests never interleave a
stock check with another request's decrement.
"""
import logging
from typing import List, Optional

from . import schemas
from .inventory_store import InventoryStore
from .ledger import AssignmentLedger
from .player_store import PlayerStore
from .reconciler import RosterReconciler
from .storage import SnapshotStorage

logger = logging.getLogger(__name__)


class TeamInventory:
    def __init__(self, storage: SnapshotStorage):
        self.storage = storage
        self.inventory = InventoryStore()
        self.players = PlayerStore()
        self.ledger = AssignmentLedger(self.inventory, self.players)
        self.reconciler = RosterReconciler(self.inventory, self.players, self.ledger)
        self.lock = self.ledger.lock

    def load(self) -> None:
        """Populate the stores and ledger from the stored snapshot."""
        with self.lock:
            self.inventory.load(self.storage.load_inventory())
            self.players.load(self.storage.load_players())
            self.ledger.load(self.storage.load_assignments())
        logger.info(
            f"Loaded {len(self.inventory)} items, {len(self.players)} players, "
            f"{len(self.ledger)} assignments"
        )

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _save(self, inventory: bool = False, players: bool = False, assignments: bool = False) -> None:
        if inventory:
            self.storage.save_inventory(self.inventory.list())
        if players:
            self.storage.save_players(self.players.list())
        if assignments:
            self.storage.save_assignments(self.ledger.list())

    # -------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------
    def list_items(self) -> List[schemas.InventoryItem]:
        return self.inventory.list()

    def get_item(self, item_id: str) -> schemas.InventoryItem:
        return self.inventory.get(item_id)

    def add_item(self, item: schemas.InventoryItemCreate) -> schemas.InventoryItem:
        with self.lock:
            db_item = self.inventory.add(item)
            self._save(inventory=True)
        logger.info(f"Added item '{db_item.product_name}' ({db_item.quantity} on hand)")
        return db_item

    def update_item(self, item_id: str, item: schemas.InventoryItemUpdate) -> schemas.InventoryItem:
        with self.lock:
            db_item = self.inventory.update(item_id, item)
            self._save(inventory=True)
        return db_item

    def delete_item(self, item_id: str) -> int:
        """
        Delete an item together with any assignments referencing it.

        Returns:
            Number of assignments dropped with the item

        Raises:
            NotFoundError: If the item does not exist
        """
        with self.lock:
            self.inventory.get(item_id)
            removed = self.ledger.remove_assignments_for_item(item_id)
            self.inventory.remove(item_id)
            self._save(inventory=True, assignments=True)
        logger.info(f"Deleted item {item_id}")
        return removed

    def low_stock_items(self) -> List[schemas.InventoryItem]:
        return self.inventory.low_stock()

    def search_items(self, query: Optional[str]) -> List[schemas.InventoryItem]:
        return self.inventory.search(query or "")

    def item_holders(self, item_id: str) -> List[schemas.ItemHolder]:
        self.inventory.get(item_id)
        return self.ledger.assignments_for_item(item_id)

    # -------------------------------------------------------------------
    # Players
    # -------------------------------------------------------------------
    def list_players(self) -> List[schemas.Player]:
        return self.players.list()

    def get_player(self, player_id: str) -> schemas.Player:
        return self.players.get(player_id)

    def add_player(self, name: str, jersey_number: Optional[int] = None) -> schemas.Player:
        with self.lock:
            player = self.players.add(name, jersey_number)
            self._save(players=True)
        return player

    def delete_player(self, player_id: str) -> int:
        """
        Check in everything a player holds, then delete the player.

        Returns:
            Number of assignments checked in

        Raises:
            NotFoundError: If the player does not exist
        """
        with self.lock:
            self.players.get(player_id)
            checked_in = self.ledger.check_in_all_for_player(player_id)
            self.players.remove(player_id)
            self._save(inventory=True, players=True, assignments=True)
        logger.info(f"Deleted player {player_id} after checking in {checked_in} assignments")
        return checked_in

    def player_items(self, player_id: str) -> List[schemas.PlayerHolding]:
        self.players.get(player_id)
        return self.ledger.assignments_for_player(player_id)

    # -------------------------------------------------------------------
    # Assignments
    # -------------------------------------------------------------------
    def list_assignments(self) -> List[schemas.Assignment]:
        return self.ledger.list()

    def checkout(self, player_id: str, inventory_id: str, quantity: int) -> schemas.Assignment:
        with self.lock:
            assignment = self.ledger.checkout(player_id, inventory_id, quantity)
            self._save(inventory=True, assignments=True)
        return assignment

    def check_in(self, assignment_id: str) -> schemas.Assignment:
        with self.lock:
            record = self.ledger.check_in(assignment_id)
            self._save(inventory=True, assignments=True)
        return record

    def check_in_all_for_player(self, player_id: str) -> int:
        with self.lock:
            self.players.get(player_id)
            count = self.ledger.check_in_all_for_player(player_id)
            self._save(inventory=True, assignments=True)
        return count

    def reconcile_roster(self, roster: schemas.ParsedRoster) -> schemas.ReconciliationReport:
        with self.lock:
            report = self.reconciler.reconcile(roster)
            self._save(inventory=True, players=True, assignments=True)
        return report
