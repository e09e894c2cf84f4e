"""
Catalog of inventory items and their on-hand quantities.

The store is a plain record of authoritative counts. It does not know about
assignments: ``update`` may set any non-negative quantity, and ``remove``
succeeds even while assignments still reference the item. Cleaning those up
is the caller's job (see ``AssignmentLedger.remove_assignments_for_item``).
"""
from typing import Dict, Iterable, List, Optional

from . import schemas
from .errors import NotFoundError
from .validators import validate_product_name, validate_quantity, validate_reorder_point

# Fields that may be cleared with an explicit null on update
NULLABLE_FIELDS = {"notes", "reorder_point", "image_base64"}


class InventoryStore:
    def __init__(self, items: Optional[Iterable[schemas.InventoryItem]] = None):
        self._items: Dict[str, schemas.InventoryItem] = {}
        if items:
            self.load(items)

    def load(self, items: Iterable[schemas.InventoryItem]) -> None:
        """Replace the catalog with a snapshot loaded at startup."""
        self._items = {item.id: item for item in items}

    def add(self, item: schemas.InventoryItemCreate) -> schemas.InventoryItem:
        """
        Create a new inventory item.

        Args:
            item: Item data to create

        Returns:
            Created InventoryItem with a fresh id and creation timestamp

        Raises:
            ValidationError: If the product name is blank, or quantity or
                reorder point is invalid
        """
        validate_product_name(item.product_name)
        validate_quantity(item.quantity, allow_zero=True)
        validate_reorder_point(item.reorder_point)

        db_item = schemas.InventoryItem(**item.model_dump())
        self._items[db_item.id] = db_item
        return db_item

    def update(self, item_id: str, item: schemas.InventoryItemUpdate) -> schemas.InventoryItem:
        """
        Merge explicitly supplied fields into an existing item.

        This is the direct-correction path: it does not look at assignments.

        Args:
            item_id: ID of the item to update
            item: Partial update (only fields that were set are applied)

        Returns:
            The updated InventoryItem

        Raises:
            NotFoundError: If the item does not exist
            ValidationError: If a supplied quantity or reorder point is invalid
        """
        db_item = self.get(item_id)

        update_data = {
            key: value
            for key, value in item.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        if "quantity" in update_data:
            validate_quantity(update_data["quantity"], allow_zero=True)
        if "reorder_point" in update_data:
            validate_reorder_point(update_data["reorder_point"])
        if "product_name" in update_data:
            validate_product_name(update_data["product_name"])

        for key, value in update_data.items():
            setattr(db_item, key, value)
        return db_item

    def remove(self, item_id: str) -> schemas.InventoryItem:
        """
        Delete an item.

        Raises:
            NotFoundError: If the item does not exist
        """
        if item_id not in self._items:
            raise NotFoundError("item", item_id)
        return self._items.pop(item_id)

    def find(self, item_id: str) -> Optional[schemas.InventoryItem]:
        return self._items.get(item_id)

    def get(self, item_id: str) -> schemas.InventoryItem:
        """Like ``find`` but raises NotFoundError for an unknown id."""
        db_item = self._items.get(item_id)
        if db_item is None:
            raise NotFoundError("item", item_id)
        return db_item

    def list(self) -> List[schemas.InventoryItem]:
        """All items, most recently added first."""
        # reversed() first so equal timestamps also come out newest-first
        return sorted(
            reversed(list(self._items.values())),
            key=lambda item: item.date_added,
            reverse=True,
        )

    def find_by_product_name(self, product_name: str) -> Optional[schemas.InventoryItem]:
        """First item (in ``list`` order) whose name matches case-insensitively."""
        wanted = product_name.lower()
        return next(
            (item for item in self.list() if item.product_name.lower() == wanted),
            None,
        )

    def low_stock(self) -> List[schemas.InventoryItem]:
        """Items at or below their reorder point. Items without one are never low."""
        return [
            item for item in self.list()
            if item.reorder_point is not None and item.quantity <= item.reorder_point
        ]

    def search(self, query: str) -> List[schemas.InventoryItem]:
        """
        Case-insensitive substring search over name, location and notes.

        An empty query matches everything.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return self.list()
        return [
            item for item in self.list()
            if needle in item.product_name.lower()
            or needle in item.location.lower()
            or needle in (item.notes or "").lower()
        ]

    def __len__(self) -> int:
        return len(self._items)
