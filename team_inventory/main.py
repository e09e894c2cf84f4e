"""
    Team Inventory Service API

    This module implements a FastAPI-based service for tracking team equipment:
    items and their on-hand quantities, the player roster, and which items are
    checked out to which players.

    The service exposes:
    - CRUD endpoints for inventory items and players
    - Checkout / check-in endpoints backed by the assignment ledger
    - Roster reconciliation for bulk imports of an already-parsed roster
    - Health endpoint: reports whether the process is up

    State lives in memory and is persisted as snapshots through the configured
    storage backend after every mutation.
"""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from . import schemas
from .config import LOG_LEVEL
from .errors import InsufficientStockError, NotFoundError, ValidationError
from .service import TeamInventory
from .storage import build_storage

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

_inventory: Optional[TeamInventory] = None


def get_inventory() -> TeamInventory:
    """
    Dependency function that provides the team inventory service.

    The service is built from configuration and loaded from storage on first use.
    """
    global _inventory
    if _inventory is None:
        _inventory = TeamInventory(build_storage())
        _inventory.load()
    return _inventory


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the snapshot at startup rather than on the first request."""
    get_inventory()
    yield


app = FastAPI(title="team-inventory-service", lifespan=lifespan)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InsufficientStockError)
async def insufficient_stock_handler(request: Request, exc: InsufficientStockError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": {
                "message": str(exc),
                "available": exc.available,
                "requested": exc.requested,
            }
        },
    )


@app.get("/healthz", response_model=dict)
def health():
    """Liveness check; does not touch the storage backend."""
    return {"status": "healthy"}


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------
@app.get("/inventory", response_model=List[schemas.InventoryItem])
def list_inventory_items(inventory: TeamInventory = Depends(get_inventory)):
    """
    List all inventory items, most recently added first.

    Returns:
        List of inventory item objects
    """
    return inventory.list_items()


@app.get("/inventory/low-stock", response_model=List[schemas.InventoryItem])
def list_low_stock_items(inventory: TeamInventory = Depends(get_inventory)):
    """
    List items whose on-hand quantity is at or below their reorder point.

    Items without a reorder point are never reported.
    """
    return inventory.low_stock_items()


@app.get("/inventory/search", response_model=List[schemas.InventoryItem])
def search_inventory_items(q: str = "", inventory: TeamInventory = Depends(get_inventory)):
    """
    Search items by product name, location or notes (case-insensitive).

    Args:
        q: Substring to look for; empty returns every item
    """
    return inventory.search_items(q)


@app.get("/inventory/{item_id}", response_model=schemas.InventoryItem)
def get_inventory_item(item_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """
    Get a single inventory item by ID.

    Raises:
        404 if item not found
    """
    return inventory.get_item(item_id)


@app.post("/inventory", response_model=schemas.InventoryItem, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    item: schemas.InventoryItemCreate,
    inventory: TeamInventory = Depends(get_inventory),
):
    """
    Create a new inventory item.

    Args:
        item: Inventory item data to create

    Returns:
        Created inventory item object

    Raises:
        400 if the product name is blank or the quantity is negative
    """
    return inventory.add_item(item)


@app.put("/inventory/{item_id}", response_model=schemas.InventoryItem)
def update_inventory_item(
    item_id: str,
    item: schemas.InventoryItemUpdate,
    inventory: TeamInventory = Depends(get_inventory),
):
    """
    Correct an existing inventory item (only provided fields are updated).

    Setting ``quantity`` here records a new physical count of units on hand;
    it does not touch existing checkouts.

    Raises:
        404 if item not found, 400 if the new values are invalid
    """
    return inventory.update_item(item_id, item)


@app.delete("/inventory/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(item_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """
    Delete an inventory item and drop any checkouts of it.

    Raises:
        404 if item not found
    """
    inventory.delete_item(item_id)


@app.get("/inventory/{item_id}/holders", response_model=List[schemas.ItemHolder])
def list_item_holders(item_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """List the players currently holding units of an item."""
    return inventory.item_holders(item_id)


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------
@app.get("/players", response_model=List[schemas.Player])
def list_players(inventory: TeamInventory = Depends(get_inventory)):
    """List all players ordered by name."""
    return inventory.list_players()


@app.post("/players", response_model=schemas.Player, status_code=status.HTTP_201_CREATED)
def create_player(player: schemas.PlayerCreate, inventory: TeamInventory = Depends(get_inventory)):
    """
    Add a player.

    A name matching an existing player (ignoring case) returns that player
    instead of creating a duplicate.

    Raises:
        400 if the name is blank
    """
    return inventory.add_player(player.name, player.jersey_number)


@app.get("/players/{player_id}", response_model=schemas.Player)
def get_player(player_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """Get a single player by ID."""
    return inventory.get_player(player_id)


@app.delete("/players/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_player(player_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """
    Delete a player after checking in everything they hold.

    Raises:
        404 if player not found
    """
    inventory.delete_player(player_id)


@app.get("/players/{player_id}/items", response_model=List[schemas.PlayerHolding])
def list_player_items(player_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """List the items a player currently has checked out."""
    return inventory.player_items(player_id)


@app.post(
    "/players/{player_id}/checkouts",
    response_model=schemas.Assignment,
    status_code=status.HTTP_201_CREATED,
)
def checkout_item(
    player_id: str,
    request: schemas.CheckoutRequest,
    inventory: TeamInventory = Depends(get_inventory),
):
    """
    Check units of an item out to a player.

    Returns:
        The created assignment

    Raises:
        400 if quantity is not positive, 404 if player or item not found,
        409 if not enough units are on hand
    """
    return inventory.checkout(player_id, request.inventory_id, request.quantity)


@app.post("/players/{player_id}/check-in-all", response_model=dict)
def check_in_all_items(player_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """
    Check in everything a player holds.

    Returns:
        dict: {"checked_in": number of assignments checked in}
    """
    return {"checked_in": inventory.check_in_all_for_player(player_id)}


# ---------------------------------------------------------------------------
# Assignments and roster
# ---------------------------------------------------------------------------
@app.get("/assignments", response_model=List[schemas.Assignment])
def list_assignments(inventory: TeamInventory = Depends(get_inventory)):
    """List active assignments, most recent first."""
    return inventory.list_assignments()


@app.delete("/assignments/{assignment_id}", response_model=schemas.Assignment)
def check_in_item(assignment_id: str, inventory: TeamInventory = Depends(get_inventory)):
    """
    Check in an assignment, returning its units to stock.

    Raises:
        404 if the assignment is not active
    """
    return inventory.check_in(assignment_id)


@app.post("/roster", response_model=schemas.ReconciliationReport)
def upload_roster(roster: schemas.ParsedRoster, inventory: TeamInventory = Depends(get_inventory)):
    """
    Replace all players and checkouts with those from a parsed roster.

    Lines that cannot be applied (unknown item, not enough stock) are
    reported as issues; everything else is committed.

    Returns:
        Reconciliation report with counts and issues
    """
    report = inventory.reconcile_roster(roster)
    if report.issues:
        logger.warning(f"Roster uploaded with {len(report.issues)} issues")
    return report
