"""Enumerations shared across the farm sales modules.

Centralises the product catalogue and the status tags so that inventories,
transactions, and the reporting layer rely on a single source of truth for
identifiers, display names, prices, and canonical ordering.
"""

from __future__ import annotations

from enum import Enum

from . import log


class Barcode(Enum):
    """Enumerate the product types sold by the farm.

    Declaration order is the canonical catalogue order: inventories group
    stock by it, receipts list rows in it, and popularity ties resolve to the
    earliest member. Prices are in cents.
    """

    EGG = ("Egg", 50)
    JAM = ("Jam", 670)
    MILK = ("Milk", 440)
    WOOL = ("Wool", 3000)

    def __init__(self, display_name: str, base_price: int) -> None:
        self.display_name = display_name
        self.base_price = base_price

    @property
    def position(self) -> int:
        """Zero-based index of the member in catalogue order."""
        return list(Barcode).index(self)

    @classmethod
    def from_name(cls, name: str) -> "Barcode":
        """Resolve a case-insensitive member name such as ``"egg"``."""
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            log.error("Unknown barcode name: %s", name)
            raise ValueError(f"Unknown barcode: {name}") from exc


class Quality(Enum):
    """Enumerate product quality grades, declared highest first."""

    IRIDIUM = 4
    GOLD = 3
    SILVER = 2
    REGULAR = 1

    @property
    def rank(self) -> int:
        return self.value


class TransactionStatus(str, Enum):
    """Lifecycle states of a transaction."""

    ACTIVE = "Active"
    FINALISED = "Finalised"


class TransactionKind(str, Enum):
    """Pricing tiers a transaction can be opened with."""

    BASE = "Base"
    CATEGORISED = "Categorised"
    SPECIAL_SALE = "Special Sale"


class InventoryType(str, Enum):
    """Inventory strategies selectable from configuration."""

    BASIC = "basic"
    FANCY = "fancy"


class SheetName(str, Enum):
    """Enumerate the workbook sheet names written by the report export."""

    TRANSACTIONS = "Transactions"
    SUMMARY = "Summary"


__all__ = [
    "Barcode",
    "Quality",
    "TransactionStatus",
    "TransactionKind",
    "InventoryType",
    "SheetName",
]
