"""
Assignment ledger: which player holds how many units of which item.

The ledger keeps item on-hand quantities and active assignments in lockstep.
For every item, ``item.quantity`` plus the quantities of all assignments
referencing it stays equal to the count set by the last direct inventory edit:

- checkout creates an assignment and takes the same number of units off hand,
  and is refused if that would leave the item below zero;
- check-in removes an assignment and puts exactly its units back.

All mutations run under ``self.lock``. The lock is re-entrant so the
reconciler and the owning service can hold it across several ledger calls.
"""
import logging
import threading
from typing import Dict, Iterable, List, Optional, Union

from . import schemas
from .errors import InsufficientStockError, NotFoundError
from .inventory_store import InventoryStore
from .player_store import PlayerStore
from .validators import validate_quantity

logger = logging.getLogger(__name__)


class AssignmentLedger:
    def __init__(
        self,
        inventory: InventoryStore,
        players: PlayerStore,
        assignments: Optional[Iterable[schemas.Assignment]] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self.inventory = inventory
        self.players = players
        self.lock = lock or threading.RLock()
        self._assignments: Dict[str, schemas.Assignment] = {}
        if assignments:
            self.load(assignments)

    def load(self, assignments: Iterable[schemas.Assignment]) -> None:
        with self.lock:
            self._assignments = {a.id: a for a in assignments}

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def checkout(self, player_id: str, inventory_id: str, quantity: int) -> schemas.Assignment:
        """
        Check units of an item out to a player.

        Args:
            player_id: Player receiving the units
            inventory_id: Item being handed out
            quantity: Number of units, must be > 0

        Returns:
            The created assignment

        Raises:
            ValidationError: If quantity is not a positive integer
            NotFoundError: If the player or item does not exist
            InsufficientStockError: If fewer than ``quantity`` units are on hand
        """
        with self.lock:
            validate_quantity(quantity, allow_zero=False)
            self.players.get(player_id)
            item = self.inventory.get(inventory_id)

            if item.quantity < quantity:
                raise InsufficientStockError(item.id, item.quantity, quantity)

            assignment = schemas.Assignment(
                player_id=player_id,
                inventory_id=inventory_id,
                quantity=quantity,
            )
            self.inventory.update(
                item.id, schemas.InventoryItemUpdate(quantity=item.quantity - quantity)
            )
            self._assignments[assignment.id] = assignment

            logger.info(
                f"Checked out {quantity} x '{item.product_name}' to player {player_id} "
                f"({item.quantity} left on hand)"
            )
            return assignment

    def check_in(self, assignment: Union[schemas.Assignment, str]) -> schemas.Assignment:
        """
        Return an assignment's units to stock and drop the assignment.

        The quantity restored is the one recorded by the ledger. If the item
        has been deleted in the meantime the restore is skipped and logged.

        Args:
            assignment: The assignment, or its id

        Returns:
            The removed assignment record

        Raises:
            NotFoundError: If the assignment is not active (e.g. already checked in)
        """
        assignment_id = assignment if isinstance(assignment, str) else assignment.id

        with self.lock:
            record = self._assignments.get(assignment_id)
            if record is None:
                raise NotFoundError("assignment", assignment_id)

            item = self.inventory.find(record.inventory_id)
            if item is None:
                logger.warning(
                    f"Item {record.inventory_id} for assignment {record.id} no longer exists; "
                    f"{record.quantity} units were not restored"
                )
            else:
                self.inventory.update(
                    item.id, schemas.InventoryItemUpdate(quantity=item.quantity + record.quantity)
                )

            del self._assignments[record.id]
            logger.info(
                f"Checked in {record.quantity} x item {record.inventory_id} from player {record.player_id}"
            )
            return record

    def check_in_all_for_player(self, player_id: str) -> int:
        """
        Check in every assignment held by a player.

        An assignment whose item has been deleted is still dropped; only its
        restore is skipped (see ``check_in``).

        Returns:
            Number of assignments checked in
        """
        with self.lock:
            held = [a for a in self._assignments.values() if a.player_id == player_id]
            for record in held:
                self.check_in(record)
        return len(held)

    def check_in_all(self) -> int:
        """Check in every active assignment. Used by roster reconciliation."""
        count = 0
        with self.lock:
            for record in list(self._assignments.values()):
                self.check_in(record)
                count += 1
        return count

    def remove_assignments_for_item(self, item_id: str) -> int:
        """
        Drop every assignment referencing an item that is being deleted.

        No quantity is restored since the item itself is going away.

        Returns:
            Number of assignments removed
        """
        with self.lock:
            doomed = [a.id for a in self._assignments.values() if a.inventory_id == item_id]
            for assignment_id in doomed:
                del self._assignments[assignment_id]
        if doomed:
            logger.info(f"Removed {len(doomed)} assignments for deleted item {item_id}")
        return len(doomed)

    def clear(self) -> None:
        """Forget every assignment without touching quantities."""
        with self.lock:
            self._assignments.clear()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def find(self, assignment_id: str) -> Optional[schemas.Assignment]:
        return self._assignments.get(assignment_id)

    def list(self) -> List[schemas.Assignment]:
        """Active assignments, most recent first."""
        return sorted(
            reversed(list(self._assignments.values())),
            key=lambda a: a.date_assigned,
            reverse=True,
        )

    def assignments_for_player(self, player_id: str) -> List[schemas.PlayerHolding]:
        """Assignments held by a player, joined with their items.

        Assignments whose item has vanished are left out.
        """
        holdings = []
        for assignment in self.list():
            if assignment.player_id != player_id:
                continue
            item = self.inventory.find(assignment.inventory_id)
            if item is not None:
                holdings.append(schemas.PlayerHolding(assignment=assignment, item=item))
        return holdings

    def assignments_for_item(self, item_id: str) -> List[schemas.ItemHolder]:
        """Assignments of an item, joined with the players holding them."""
        holders = []
        for assignment in self.list():
            if assignment.inventory_id != item_id:
                continue
            player = self.players.find(assignment.player_id)
            if player is not None:
                holders.append(schemas.ItemHolder(assignment=assignment, player=player))
        return holders

    def checked_out_quantity(self, item_id: str) -> int:
        """Units of an item currently held by players."""
        return sum(a.quantity for a in list(self._assignments.values()) if a.inventory_id == item_id)

    def __len__(self) -> int:
        return len(self._assignments)
