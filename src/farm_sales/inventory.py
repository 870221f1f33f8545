"""Inventory strategies that own the farm's stocked products.

Two implementations share the :class:`Inventory` interface:

* :class:`BasicInventory` handles products strictly one at a time and rejects
  any bulk request with :class:`~farm_sales.exceptions.InvalidStockRequestError`.
* :class:`FancyInventory` supports bulk additions and removals, always handing
  out the best quality units first.

Callers check :attr:`Inventory.supports_bulk` rather than the concrete type
when deciding whether a multi-unit request is possible.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from . import log
from .constants import Barcode, Quality
from .exceptions import InvalidStockRequestError
from .products import Product
from .validators import require_nonnegative_quantity


class Inventory(ABC):
    """Common contract for every inventory strategy."""

    supports_bulk: bool = False

    def __init__(self) -> None:
        self._stock: List[Product] = []

    def add_product(self, barcode: Barcode, quality: Quality) -> None:
        """Append a single product of the given type and quality."""
        self._stock.append(Product(barcode, quality))
        log.debug("Stocked one %s (%s)", barcode.display_name, quality.name)

    @abstractmethod
    def add_products(self, barcode: Barcode, quality: Quality, quantity: int) -> None:
        """Append ``quantity`` products of the given type and quality."""

    def exists_product(self, barcode: Barcode) -> bool:
        """Return ``True`` when at least one product of ``barcode`` is stocked."""
        return any(product.barcode is barcode for product in self._stock)

    @abstractmethod
    def remove_product(self, barcode: Barcode) -> List[Product]:
        """Remove one product of ``barcode``, returning it in a list.

        The list is empty when no matching product is stocked.
        """

    @abstractmethod
    def remove_products(self, barcode: Barcode, quantity: int) -> List[Product]:
        """Remove up to ``quantity`` products of ``barcode``."""

    @abstractmethod
    def get_all_products(self) -> List[Product]:
        """Return a snapshot of the stocked products."""


class BasicInventory(Inventory):
    """Stores and hands out products individually, in arrival order."""

    def add_products(self, barcode: Barcode, quality: Quality, quantity: int) -> None:
        log.warning(
            "Rejected bulk stock request for %s x%s on a basic inventory",
            barcode.display_name,
            quantity,
        )
        raise InvalidStockRequestError(
            "Current inventory is not fancy enough. Please supply products one at a time."
        )

    def remove_product(self, barcode: Barcode) -> List[Product]:
        for index, product in enumerate(self._stock):
            if product.barcode is barcode:
                del self._stock[index]
                return [product]
        return []

    def remove_products(self, barcode: Barcode, quantity: int) -> List[Product]:
        log.warning(
            "Rejected bulk removal of %s x%s from a basic inventory",
            barcode.display_name,
            quantity,
        )
        raise InvalidStockRequestError(
            "Current inventory is not fancy enough. Please purchase products one at a time."
        )

    def get_all_products(self) -> List[Product]:
        return list(self._stock)


class FancyInventory(Inventory):
    """Quantity-aware inventory that releases the highest quality units first."""

    supports_bulk = True

    def add_products(self, barcode: Barcode, quality: Quality, quantity: int) -> None:
        require_nonnegative_quantity(quantity)
        for _ in range(quantity):
            self._stock.append(Product(barcode, quality))
        log.debug("Stocked %d x %s (%s)", quantity, barcode.display_name, quality.name)

    def remove_product(self, barcode: Barcode) -> List[Product]:
        best_index = None
        for index, product in enumerate(self._stock):
            if product.barcode is not barcode:
                continue
            # Strictly greater keeps the earliest arrival among equal grades.
            if best_index is None or product.quality.rank > self._stock[best_index].quality.rank:
                best_index = index
        if best_index is None:
            return []
        return [self._stock.pop(best_index)]

    def remove_products(self, barcode: Barcode, quantity: int) -> List[Product]:
        """Remove up to ``quantity`` products, best quality first.

        When fewer than ``quantity`` units are stocked the available units are
        removed and returned; callers that need all-or-nothing semantics must
        compare against :meth:`get_stocked_quantity` first.
        """
        require_nonnegative_quantity(quantity)
        removed: List[Product] = []
        for _ in range(quantity):
            taken = self.remove_product(barcode)
            if not taken:
                log.warning(
                    "Requested %d x %s but only %d were stocked",
                    quantity,
                    barcode.display_name,
                    len(removed),
                )
                break
            removed.extend(taken)
        return removed

    def get_all_products(self) -> List[Product]:
        """Return the stock grouped by catalogue order, then arrival order."""
        return sorted(self._stock, key=lambda product: product.barcode.position)

    def get_stocked_quantity(self, barcode: Barcode) -> int:
        return sum(1 for product in self._stock if product.barcode is barcode)
