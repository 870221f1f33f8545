"""Argument guards shared by the inventory, transaction, and store layers."""

from __future__ import annotations

from . import log


def require_positive_quantity(quantity: int) -> None:
    """Validate that a quantity is strictly positive.

    Args:
        quantity (int): Number of units requested by a caller.

    Raises:
        ValueError: If ``quantity`` is zero or negative.
    """
    if quantity < 1:
        log.error("Quantity validation failed: %s", quantity)
        raise ValueError("Quantity must be at least 1")


def require_nonnegative_quantity(quantity: int) -> None:
    """Validate that a quantity is zero or positive.

    Args:
        quantity (int): Number of units supplied to a bulk operation.

    Raises:
        ValueError: If ``quantity`` is negative.

    Bulk additions treat zero as a no-op, so only negative values are a
    contract violation here.
    """
    if quantity < 0:
        log.error("Quantity validation failed: %s", quantity)
        raise ValueError("Quantity must be zero or positive")


def require_discount_percent(percent: int) -> None:
    """Validate that a discount is a whole percentage between 0 and 100.

    Raises:
        ValueError: If ``percent`` is not an integer or falls outside the range.
    """
    if isinstance(percent, bool) or not isinstance(percent, int):
        log.error("Discount validation failed: %r is not an integer", percent)
        raise ValueError(f"Discount must be a whole percentage, got {percent!r}")
    if not 0 <= percent <= 100:
        log.error("Discount validation failed: %s", percent)
        raise ValueError("Discount must be between 0 and 100 percent")
