"""Transaction state machine and its pricing tiers.

A :class:`Transaction` starts ``ACTIVE``, reading its purchases live from the
customer's cart, and moves to ``FINALISED`` exactly once via
:meth:`Transaction.finalise`, which snapshots the cart and empties it.

Pricing behaviour is selected by the :class:`~farm_sales.constants.TransactionKind`
tag rather than by subclassing:

* ``BASE`` prices each purchased unit on its own receipt line.
* ``CATEGORISED`` groups purchases by product type, with a quantity and a
  subtotal per type.
* ``SPECIAL_SALE`` is categorised and additionally applies a whole
  percentage discount per product type.

Every kind answers the categorised queries (``get_purchase_quantity``,
``get_purchase_subtotal`` ...), so a special sale can be used anywhere a
categorised transaction is expected.
"""

from __future__ import annotations

from datetime import UTC, datetime
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from . import log, receipts
from .constants import Barcode, TransactionKind, TransactionStatus
from .customers import Customer
from .exceptions import TransactionFinalisedError
from .products import Product
from .validators import require_discount_percent

BASE_HEADINGS = ("Item", "Price")
CATEGORISED_HEADINGS = ("Item", "Qty", "Price (ea.)", "Subtotal")


def generate_transaction_id(*, prefix: str = "T", when: Optional[datetime] = None) -> str:
    """Generate a sortable transaction identifier using UTC timestamps.

    Returns:
        str: Identifier formed as ``{prefix}{YYYYMMDDHHMMSSffffff}``.
    """
    when = when or datetime.now(UTC)
    return f"{prefix}{when.strftime('%Y%m%d%H%M%S%f')}"


class Transaction:
    """A customer's purchase, from opening the cart to checkout."""

    def __init__(
        self,
        customer: Customer,
        *,
        kind: TransactionKind = TransactionKind.BASE,
        discounts: Optional[Mapping[Barcode, int]] = None,
    ) -> None:
        if discounts and kind is not TransactionKind.SPECIAL_SALE:
            log.error("Discounts given to a %s transaction", kind.value)
            raise ValueError("Only special sale transactions accept discounts")
        checked: Dict[Barcode, int] = {}
        for barcode, percent in (discounts or {}).items():
            require_discount_percent(percent)
            checked[barcode] = percent
        self._customer = customer
        self._kind = kind
        self._discounts = MappingProxyType(checked)
        self._status = TransactionStatus.ACTIVE
        self._snapshot: Tuple[Product, ...] = ()
        self.transaction_id: Optional[str] = None
        self.finalised_at: Optional[datetime] = None

    @classmethod
    def categorised(cls, customer: Customer) -> "Transaction":
        return cls(customer, kind=TransactionKind.CATEGORISED)

    @classmethod
    def special_sale(
        cls, customer: Customer, discounts: Optional[Mapping[Barcode, int]] = None
    ) -> "Transaction":
        """Open a special sale; types missing from ``discounts`` are full price."""
        return cls(customer, kind=TransactionKind.SPECIAL_SALE, discounts=discounts)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def customer(self) -> Customer:
        return self._customer

    @property
    def kind(self) -> TransactionKind:
        return self._kind

    @property
    def status(self) -> TransactionStatus:
        return self._status

    @property
    def discounts(self) -> Mapping[Barcode, int]:
        return self._discounts

    @property
    def is_categorised(self) -> bool:
        return self._kind is not TransactionKind.BASE

    def is_finalised(self) -> bool:
        return self._status is TransactionStatus.FINALISED

    def finalise(self) -> None:
        """Freeze the purchases and empty the customer's cart.

        Raises:
            TransactionFinalisedError: If the transaction is already finalised.
        """
        if self.is_finalised():
            log.error("Transaction '%s' is already finalised", self.transaction_id)
            raise TransactionFinalisedError(
                f"Transaction {self.transaction_id} has already been finalised"
            )
        self._snapshot = tuple(self._customer.cart.get_contents())
        self._customer.cart.clear()
        self._status = TransactionStatus.FINALISED
        self.finalised_at = datetime.now(UTC)
        self.transaction_id = generate_transaction_id(when=self.finalised_at)
        log.info(
            "Finalised %s transaction '%s' for '%s' (%d items)",
            self._kind.value,
            self.transaction_id,
            self._customer.name,
            len(self._snapshot),
        )

    # ------------------------------------------------------------------
    # Purchases and pricing
    # ------------------------------------------------------------------

    def get_purchases(self) -> List[Product]:
        """Live cart contents while active, the frozen snapshot once finalised."""
        if self.is_finalised():
            return list(self._snapshot)
        return self._customer.cart.get_contents()

    def get_purchased_types(self) -> List[Barcode]:
        """Distinct purchased product types in catalogue order."""
        present = {product.barcode for product in self.get_purchases()}
        return [barcode for barcode in Barcode if barcode in present]

    def get_purchases_by_type(self) -> Dict[Barcode, List[Product]]:
        """Purchases grouped by type, keyed in catalogue order."""
        grouped: Dict[Barcode, List[Product]] = {barcode: [] for barcode in self.get_purchased_types()}
        for product in self.get_purchases():
            grouped[product.barcode].append(product)
        return grouped

    def get_purchase_quantity(self, barcode: Barcode) -> int:
        return sum(1 for product in self.get_purchases() if product.barcode is barcode)

    def get_discount_amount(self, barcode: Barcode) -> int:
        """Discount percentage applied to ``barcode`` (0 when none applies)."""
        return self._discounts.get(barcode, 0)

    def get_purchase_subtotal(self, barcode: Barcode) -> int:
        """Price of all units of ``barcode`` in cents, after any discount.

        Discounts truncate: ``subtotal - subtotal * percent // 100``.
        """
        subtotal = self.get_purchase_quantity(barcode) * barcode.base_price
        if self._kind is TransactionKind.SPECIAL_SALE:
            subtotal -= subtotal * self.get_discount_amount(barcode) // 100
        return subtotal

    def get_undiscounted_total(self) -> int:
        return sum(product.base_price for product in self.get_purchases())

    def get_total(self) -> int:
        """Amount payable in cents, using the pricing rules of this kind."""
        if not self.is_categorised:
            return self.get_undiscounted_total()
        return sum(self.get_purchase_subtotal(barcode) for barcode in self.get_purchased_types())

    def get_total_saved(self) -> int:
        """Cents saved through discounts; always 0 outside special sales."""
        return self.get_undiscounted_total() - self.get_total()

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def get_receipt(self) -> str:
        """Itemised receipt text, or the active placeholder before checkout."""
        if not self.is_finalised():
            return receipts.create_active_receipt()

        total = receipts.format_cents(self.get_total())
        if not self.is_categorised:
            entries = [
                [product.display_name, receipts.format_cents(product.base_price)]
                for product in self.get_purchases()
            ]
            return receipts.create_receipt(BASE_HEADINGS, entries, total, self._customer.name)

        entries = []
        for barcode in self.get_purchased_types():
            entry = [
                barcode.display_name,
                str(self.get_purchase_quantity(barcode)),
                receipts.format_cents(barcode.base_price),
                receipts.format_cents(self.get_purchase_subtotal(barcode)),
            ]
            discount = self.get_discount_amount(barcode)
            if discount > 0:
                entry.append(f"Discount applied! {discount}% off {barcode.display_name}")
            entries.append(entry)

        saved = self.get_total_saved()
        savings = receipts.format_cents(saved) if saved > 0 else None
        return receipts.create_receipt(
            CATEGORISED_HEADINGS, entries, total, self._customer.name, savings=savings
        )

    def __str__(self) -> str:
        products = ", ".join(str(product) for product in self.get_purchases())
        text = (
            f"Transaction {{Customer: {self._customer.name} | Phone Number: "
            f"{self._customer.phone_number} | Address: {self._customer.address}, "
            f"Status: {self._status.value}, Associated Products: [{products}]"
        )
        if self._kind is TransactionKind.SPECIAL_SALE:
            discounts = ", ".join(
                f"{barcode.name}={percent}" for barcode, percent in self._discounts.items()
            )
            text += f", Discounts: {{{discounts}}}"
        return text + "}"
