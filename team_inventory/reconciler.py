"""
Bulk replace-and-rebuild of players and assignments from a parsed roster.

Reconciliation runs in two phases under the ledger lock:

1. Reset: every active assignment is checked in (restoring on-hand counts),
   then the player store and the ledger are cleared.
2. Rebuild: roster entries are processed in input order. Each player is added
   (duplicate names collapse to one player) and each requested item is matched
   by case-insensitive product name and checked out immediately, so later lines
   compete for whatever stock earlier lines left behind.

A bad line never aborts the run. It is recorded as a ``ReconciliationIssue``
and skipped. Nothing is rolled back: the caller gets the report after the
reset and every successful line have been applied.
"""
import logging

from . import schemas
from .errors import TeamInventoryError, ValidationError
from .inventory_store import InventoryStore
from .ledger import AssignmentLedger
from .player_store import PlayerStore

logger = logging.getLogger(__name__)


class RosterReconciler:
    def __init__(self, inventory: InventoryStore, players: PlayerStore, ledger: AssignmentLedger):
        self.inventory = inventory
        self.players = players
        self.ledger = ledger

    def reconcile(self, roster: schemas.ParsedRoster) -> schemas.ReconciliationReport:
        """
        Replace all players and assignments with the ones described by ``roster``.

        Args:
            roster: Players with their requested items, already parsed

        Returns:
            ReconciliationReport with counts and per-line issues
        """
        report = schemas.ReconciliationReport()

        with self.ledger.lock:
            restored = self._reset()
            logger.info(f"Roster reset: checked in {restored} assignments")

            for entry in roster.players:
                self._rebuild_player(entry, report)

        logger.info(
            f"Roster reconciled: {report.players_created} players, "
            f"{report.assignments_created} assignments, {len(report.issues)} issues"
        )
        return report

    def _reset(self) -> int:
        restored = self.ledger.check_in_all()
        self.players.clear()
        self.ledger.clear()
        return restored

    def _rebuild_player(self, entry: schemas.RosterPlayer, report: schemas.ReconciliationReport) -> None:
        known = len(self.players)
        try:
            player = self.players.add(entry.name, entry.jersey_number)
        except ValidationError as e:
            self._issue(report, schemas.ReconciliationIssue(
                player_name=entry.name,
                message=f"Skipped roster entry: {e}",
            ))
            return

        if len(self.players) > known:
            report.players_created += 1

        for line in entry.assigned_items:
            self._assign_line(player, line, report)

    def _assign_line(
        self,
        player: schemas.Player,
        line: schemas.RosterItem,
        report: schemas.ReconciliationReport,
    ) -> None:
        if line.quantity <= 0:
            self._issue(report, schemas.ReconciliationIssue(
                player_name=player.name,
                product_name=line.product_name,
                requested=line.quantity,
                message=(
                    f'Invalid quantity {line.quantity} for "{line.product_name}" '
                    f"for player {player.name}."
                ),
            ))
            return

        item = self.inventory.find_by_product_name(line.product_name)
        if item is None:
            self._issue(report, schemas.ReconciliationIssue(
                player_name=player.name,
                product_name=line.product_name,
                requested=line.quantity,
                message=f'Item "{line.product_name}" for player {player.name} not found in inventory.',
            ))
            return

        if item.quantity < line.quantity:
            self._issue(report, schemas.ReconciliationIssue(
                player_name=player.name,
                product_name=line.product_name,
                requested=line.quantity,
                available=item.quantity,
                message=(
                    f'Not enough stock for "{line.product_name}" for player {player.name}. '
                    f"Available: {item.quantity}, Needed: {line.quantity}."
                ),
            ))
            return

        try:
            self.ledger.checkout(player.id, item.id, line.quantity)
        except TeamInventoryError as e:
            self._issue(report, schemas.ReconciliationIssue(
                player_name=player.name,
                product_name=line.product_name,
                requested=line.quantity,
                available=item.quantity,
                message=str(e),
            ))
            return

        report.assignments_created += 1

    @staticmethod
    def _issue(report: schemas.ReconciliationReport, issue: schemas.ReconciliationIssue) -> None:
        logger.warning(f"Roster issue: {issue.message}")
        report.issues.append(issue)
