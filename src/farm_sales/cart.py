"""Shopping cart holding a customer's products until checkout."""

from __future__ import annotations

from typing import List

from .products import Product


class Cart:
    """Ordered, append-only list of products owned by one customer.

    The only way to shrink a cart is :meth:`clear`, which a transaction calls
    when it is finalised.
    """

    def __init__(self) -> None:
        self._contents: List[Product] = []

    def add_product(self, product: Product) -> None:
        self._contents.append(product)

    def clear(self) -> None:
        self._contents.clear()

    def is_empty(self) -> bool:
        return not self._contents

    def get_contents(self) -> List[Product]:
        """Return a copy of the cart contents in the order they were added."""
        return list(self._contents)

    def __len__(self) -> int:
        return len(self._contents)
