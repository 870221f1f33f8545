"""Product catalogue entries held by inventories and carts."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import Barcode, Quality


@dataclass(frozen=True)
class Product:
    """Immutable pairing of a product type and a quality grade.

    Two products compare equal when both the barcode and the quality match;
    price and display name are derived from the barcode and never stored.
    """

    barcode: Barcode
    quality: Quality = Quality.REGULAR

    @property
    def base_price(self) -> int:
        """Price of one unit in cents."""
        return self.barcode.base_price

    @property
    def display_name(self) -> str:
        return self.barcode.display_name

    def __str__(self) -> str:
        return f"{self.display_name}: {self.base_price}c *{self.quality.name}*"
