"""
Pydantic schemas for the team inventory service.

These schemas define the records held by the stores and ledger, the request
bodies accepted by the API, and the shapes exchanged with the persistence and
AI boundaries (parsed roster, reconciliation report).
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field


def new_id() -> str:
    """Opaque unique identifier for items, players and assignments."""
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemCondition(str, Enum):
    NEW = "New"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


# ---------------------------------------------------------------------------
# Inventory items
# ---------------------------------------------------------------------------
class InventoryItemBase(BaseModel):
    """
    Attributes shared by every inventory item shape.

    Only ``product_name`` and ``quantity`` matter to the ledger; the rest is
    descriptive payload that passes through untouched.
    """
    product_name: str
    quantity: int
    description: str = ""
    search_query: str = ""
    condition: ItemCondition = ItemCondition.GOOD
    location: str = ""
    notes: Optional[str] = None
    reorder_point: Optional[int] = None
    image_base64: Optional[str] = None


class InventoryItemCreate(InventoryItemBase):
    """Schema for creating a new inventory item."""
    pass


class InventoryItemUpdate(BaseModel):
    """Schema for a direct correction of an item. All fields are optional."""
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    description: Optional[str] = None
    search_query: Optional[str] = None
    condition: Optional[ItemCondition] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    reorder_point: Optional[int] = None
    image_base64: Optional[str] = None


class InventoryItem(InventoryItemBase):
    """
    A stored inventory item.

    Attributes:
        id (str): Unique, immutable identifier
        quantity (int): Units on hand, i.e. not checked out to any player
        date_added (datetime): When the item was created
    """
    quantity: int = Field(ge=0)
    id: str = Field(default_factory=new_id)
    date_added: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------
class PlayerBase(BaseModel):
    name: str
    jersey_number: Optional[int] = None


class PlayerCreate(PlayerBase):
    """Schema for adding a player by hand."""
    pass


class Player(PlayerBase):
    id: str = Field(default_factory=new_id)


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------
class Assignment(BaseModel):
    """
    Units of one item currently held by one player.

    ``player_id`` and ``inventory_id`` are plain references resolved through
    the stores; the assignment owns neither entity. Records are never edited
    in place: they are created by checkout and removed by check-in.
    """
    id: str = Field(default_factory=new_id)
    player_id: str
    inventory_id: str
    quantity: int = Field(gt=0)
    date_assigned: datetime = Field(default_factory=utcnow)


class CheckoutRequest(BaseModel):
    """Schema for checking an item out to a player."""
    inventory_id: str
    quantity: int


class PlayerHolding(BaseModel):
    """An assignment joined with the item it references."""
    assignment: Assignment
    item: InventoryItem


class ItemHolder(BaseModel):
    """An assignment joined with the player holding it."""
    assignment: Assignment
    player: Player


# ---------------------------------------------------------------------------
# Roster reconciliation
# ---------------------------------------------------------------------------
class RosterItem(BaseModel):
    product_name: str
    quantity: int


class RosterPlayer(BaseModel):
    name: str
    jersey_number: Optional[int] = None
    assigned_items: List[RosterItem] = Field(default_factory=list)


class ParsedRoster(BaseModel):
    """A roster already extracted from an uploaded file by the AI service."""
    players: List[RosterPlayer] = Field(default_factory=list)


class ReconciliationIssue(BaseModel):
    """
    A non-fatal problem with one roster line.

    Attributes:
        player_name (str): Player the line belongs to
        product_name (str): Requested product, if the problem is line-level
        requested (int): Units requested by the line
        available (int): Units on hand when the line was processed, if known
        message (str): Human-readable description
    """
    player_name: str
    product_name: Optional[str] = None
    requested: Optional[int] = None
    available: Optional[int] = None
    message: str


class ReconciliationReport(BaseModel):
    """Outcome of a roster reconciliation; the changes are already committed."""
    players_created: int = 0
    assignments_created: int = 0
    issues: List[ReconciliationIssue] = Field(default_factory=list)

    @computed_field
    @property
    def ok(self) -> bool:
        return not self.issues
