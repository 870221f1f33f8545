"""Single-slot controller for the transaction currently being shopped."""

from __future__ import annotations

from typing import Optional

from . import log
from .exceptions import NoOpenTransactionError, TransactionConflictError, TransactionFinalisedError
from .products import Product
from .transactions import Transaction


class TransactionManager:
    """Keeps track of at most one ongoing transaction.

    The manager does not create transactions; it accepts one, routes pending
    purchases into the associated customer's cart, and finalises it on close.
    """

    def __init__(self) -> None:
        self._ongoing: Optional[Transaction] = None

    def has_ongoing_transaction(self) -> bool:
        return self._ongoing is not None

    def set_ongoing_transaction(self, transaction: Transaction) -> None:
        """Begin managing ``transaction``.

        Raises:
            TransactionConflictError: If another transaction is still ongoing.
            TransactionFinalisedError: If ``transaction`` was already finalised.
        """
        if transaction.is_finalised():
            log.warning("Cannot manage finalised transaction '%s'", transaction.transaction_id)
            raise TransactionFinalisedError("Only active transactions can be opened")
        if self._ongoing is not None:
            log.warning(
                "Cannot open a transaction for '%s' while '%s' is still shopping",
                transaction.customer.name,
                self._ongoing.customer.name,
            )
            raise TransactionConflictError("A transaction is already in progress")
        self._ongoing = transaction
        log.info(
            "Opened %s transaction for '%s'",
            transaction.kind.value,
            transaction.customer.name,
        )

    def register_pending_purchase(self, product: Product) -> None:
        """Add ``product`` to the ongoing customer's cart.

        The product must already have been taken out of the inventory.

        Raises:
            NoOpenTransactionError: If no transaction is ongoing.
        """
        if self._ongoing is None:
            log.warning("Pending purchase of %s rejected: no ongoing transaction", product)
            raise NoOpenTransactionError("Cannot register a purchase without an ongoing transaction")
        self._ongoing.customer.cart.add_product(product)

    def close_current_transaction(self) -> Transaction:
        """Finalise and release the ongoing transaction.

        The slot is released before finalising, so it is free again even when
        the transaction was already finalised by its owner.

        Returns:
            Transaction: The transaction that was just finalised.

        Raises:
            NoOpenTransactionError: If there is nothing to close.
            TransactionFinalisedError: If the transaction was finalised outside
                the manager.
        """
        if self._ongoing is None:
            log.warning("Close requested with no ongoing transaction")
            raise NoOpenTransactionError("There is no ongoing transaction to close")
        transaction, self._ongoing = self._ongoing, None
        transaction.finalise()
        return transaction
