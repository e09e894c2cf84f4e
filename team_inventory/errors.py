"""
Error taxonomy for the team inventory service.

Structural errors (validation, not-found, insufficient stock) are raised and
abort only the operation that raised them. Per-line roster problems are not
exceptions; they are collected as ``schemas.ReconciliationIssue`` records.
"""


class TeamInventoryError(Exception):
    """Base class for all errors raised by the inventory core."""


class ValidationError(TeamInventoryError):
    """Malformed input (empty name, negative or non-integer quantity)."""


class NotFoundError(TeamInventoryError):
    """
    Reference to an id that does not exist.

    Attributes:
        kind: Entity kind ("item", "player" or "assignment")
        entity_id: The id that could not be resolved
    """

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} '{entity_id}' not found")


class InsufficientStockError(TeamInventoryError):
    """
    A checkout would drive on-hand quantity below zero.

    Attributes:
        item_id: Inventory item that was short
        available: Units on hand at the time of the request
        requested: Units the caller asked for
    """

    def __init__(self, item_id: str, available: int, requested: int):
        self.item_id = item_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for item '{item_id}'. Available: {available}, Requested: {requested}"
        )
