"""Append-only ledger of finalised transactions and the statistics mined from it.

Every aggregate defers to each transaction's own pricing methods, so base,
categorised, and special sale transactions can be mixed freely in one
history. Monetary results are integers in cents; averages are
:class:`~decimal.Decimal` values rounded half-up to two places.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from . import log
from .constants import Barcode
from .exceptions import EmptyHistoryError
from .transactions import Transaction

TWO_PLACES = Decimal("0.01")


def _average(total: int, count: int) -> Decimal:
    if count == 0:
        return Decimal("0.00")
    return (Decimal(total) / Decimal(count)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class TransactionHistory:
    """Chronological record of every completed transaction."""

    def __init__(self) -> None:
        self._record: List[Transaction] = []

    def record_transaction(self, transaction: Transaction) -> None:
        """Append a finalised transaction to the record.

        Recording the same transaction twice is not detected.

        Raises:
            ValueError: If ``transaction`` is still active.
        """
        if not transaction.is_finalised():
            log.error("Refused to record active transaction for '%s'", transaction.customer.name)
            raise ValueError("Only finalised transactions can be recorded")
        self._record.append(transaction)
        log.info(
            "Recorded transaction '%s' (total=%d cents)",
            transaction.transaction_id,
            transaction.get_total(),
        )

    def get_transactions(self) -> List[Transaction]:
        return list(self._record)

    def get_last_transaction(self) -> Transaction:
        """Return the most recently recorded transaction.

        Raises:
            EmptyHistoryError: If nothing has been recorded yet.
        """
        if not self._record:
            log.warning("Last transaction requested from an empty history")
            raise EmptyHistoryError("No transactions have been recorded")
        return self._record[-1]

    def get_gross_earnings(self, barcode: Optional[Barcode] = None) -> int:
        """Total income in cents, overall or for a single product type."""
        if barcode is None:
            return sum(transaction.get_total() for transaction in self._record)
        return sum(transaction.get_purchase_subtotal(barcode) for transaction in self._record)

    def get_total_transactions_made(self) -> int:
        return len(self._record)

    def get_total_products_sold(self, barcode: Optional[Barcode] = None) -> int:
        if barcode is None:
            return sum(len(transaction.get_purchases()) for transaction in self._record)
        return sum(transaction.get_purchase_quantity(barcode) for transaction in self._record)

    def get_highest_grossing_transaction(self) -> Transaction:
        """Return the transaction with the largest total; the earliest wins ties.

        Raises:
            EmptyHistoryError: If nothing has been recorded yet.
        """
        if not self._record:
            log.warning("Highest grossing transaction requested from an empty history")
            raise EmptyHistoryError("No transactions have been recorded")
        best = self._record[0]
        for transaction in self._record[1:]:
            if transaction.get_total() > best.get_total():
                best = transaction
        return best

    def get_most_popular_product(self) -> Barcode:
        """Return the product type with the most units sold.

        Types are scanned in catalogue order and only a strictly larger count
        replaces the leader, so ties (and an empty history) resolve to the
        earliest declared type.
        """
        most_popular = next(iter(Barcode))
        best_count = -1
        for barcode in Barcode:
            count = self.get_total_products_sold(barcode)
            if count > best_count:
                most_popular, best_count = barcode, count
        log.debug("Most popular product is %s with %d units", most_popular.name, best_count)
        return most_popular

    def get_average_spend_per_visit(self) -> Decimal:
        """Mean transaction total in cents; ``0.00`` for an empty history."""
        return _average(self.get_gross_earnings(), len(self._record))

    def get_average_product_discount(self, barcode: Barcode) -> Decimal:
        """Mean discount percentage applied to ``barcode`` per transaction.

        Transactions without a discount on ``barcode`` contribute zero.
        Returns ``0.00`` for an empty history.
        """
        total_discount = sum(transaction.get_discount_amount(barcode) for transaction in self._record)
        return _average(total_discount, len(self._record))
