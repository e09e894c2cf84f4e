"""
Input validation shared by the stores and the assignment ledger.

Every check raises ``errors.ValidationError`` before any state is touched.
"""
from typing import Any, Optional

from .errors import ValidationError


def validate_quantity(quantity: Any, allow_zero: bool = True) -> int:
    """
    Validate a unit count.

    Args:
        quantity: Value to check
        allow_zero: Accept 0 (stock counts) or require > 0 (checkouts)

    Returns:
        The quantity as an int

    Raises:
        ValidationError: If the value is not an integer or is out of range
    """
    # bool is an int subclass; "True" units is never meaningful
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Quantity must be an integer, got {quantity!r}")

    if allow_zero and quantity < 0:
        raise ValidationError("Quantity cannot be negative")

    if not allow_zero and quantity <= 0:
        raise ValidationError("Quantity must be positive")

    return quantity


def validate_reorder_point(reorder_point: Optional[int]) -> Optional[int]:
    """Reorder point is optional but never negative."""
    if reorder_point is None:
        return None
    return validate_quantity(reorder_point, allow_zero=True)


def clean_name(name: Optional[str]) -> str:
    """
    Trim a player name and reject it if nothing is left.

    Args:
        name: Raw name as typed or parsed

    Returns:
        The trimmed name

    Raises:
        ValidationError: If the name is missing or blank
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Player name cannot be empty")
    return trimmed


def validate_product_name(product_name: Optional[str]) -> str:
    """Product names must contain something besides whitespace."""
    if not (product_name or "").strip():
        raise ValidationError("Product name cannot be empty")
    return product_name
