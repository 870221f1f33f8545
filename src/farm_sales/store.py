"""Farm facade orchestrating stock, customers, and shopping sessions.

A :class:`Farm` owns one inventory, one address book, one transaction
manager, and one transaction history. Nothing is module-global: every
simulated store is an explicitly constructed ``Farm`` and everything it
manages goes away with it.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from . import data_manager, log
from .constants import Barcode, InventoryType, Quality
from .customers import AddressBook, Customer
from .exceptions import InvalidStockRequestError, NoOpenTransactionError
from .history import TransactionHistory
from .inventory import BasicInventory, FancyInventory, Inventory
from .manager import TransactionManager
from .products import Product
from .transactions import Transaction
from .validators import require_nonnegative_quantity, require_positive_quantity


class Farm:
    """Entry point for stocking goods and running customer transactions."""

    def __init__(
        self,
        inventory: Inventory,
        address_book: AddressBook,
        *,
        settings: Optional[data_manager.FarmSettings] = None,
    ) -> None:
        self._inventory = inventory
        self._address_book = address_book
        self._settings = settings
        self._transaction_manager = TransactionManager()
        self._transaction_history = TransactionHistory()

    @property
    def settings(self) -> Optional[data_manager.FarmSettings]:
        return self._settings

    @property
    def transaction_manager(self) -> TransactionManager:
        return self._transaction_manager

    @property
    def transaction_history(self) -> TransactionHistory:
        return self._transaction_history

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def get_all_customers(self) -> List[Customer]:
        return self._address_book.get_all_records()

    def save_customer(self, customer: Customer) -> None:
        self._address_book.add_customer(customer)

    def get_customer(self, name: str, phone_number: int) -> Customer:
        return self._address_book.get_customer(name, phone_number)

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    def get_all_stock(self) -> List[Product]:
        return self._inventory.get_all_products()

    def stock_product(self, barcode: Barcode, quality: Quality = Quality.REGULAR, quantity: int = 1) -> None:
        """Add ``quantity`` units of a product to the inventory.

        Raises:
            ValueError: If ``quantity`` is negative.
            InvalidStockRequestError: If ``quantity`` exceeds one and the
                inventory cannot handle bulk stock.
        """
        require_nonnegative_quantity(quantity)
        if quantity == 1:
            self._inventory.add_product(barcode, quality)
        else:
            self._inventory.add_products(barcode, quality, quantity)
        log.info("Stocked %d x %s (%s)", quantity, barcode.display_name, quality.name)

    # ------------------------------------------------------------------
    # Shopping
    # ------------------------------------------------------------------

    def start_transaction(self, transaction: Transaction) -> None:
        self._transaction_manager.set_ongoing_transaction(transaction)

    def new_transaction(self, customer: Customer) -> Transaction:
        """Open a transaction for ``customer`` priced by the configured discounts.

        A special sale is opened when the settings define any discounts,
        otherwise a categorised transaction.
        """
        if self._settings is not None and self._settings.discounts:
            transaction = Transaction.special_sale(customer, self._settings.discounts)
        else:
            transaction = Transaction.categorised(customer)
        self.start_transaction(transaction)
        return transaction

    def add_to_cart(self, barcode: Barcode, quantity: Optional[int] = None) -> int:
        """Move products from the inventory into the ongoing customer's cart.

        Without ``quantity`` a single unit is moved when one is stocked. With
        ``quantity`` as many units as are stocked, up to ``quantity``, are
        moved best quality first; a short stock is not an error.

        Returns:
            int: Number of products actually added to the cart.

        Raises:
            NoOpenTransactionError: If no customer is currently shopping.
            ValueError: If ``quantity`` is less than one.
            InvalidStockRequestError: If ``quantity`` is given and the
                inventory cannot remove products in bulk.
        """
        if not self._transaction_manager.has_ongoing_transaction():
            log.warning("Add to cart of %s rejected: nobody is shopping", barcode.display_name)
            raise NoOpenTransactionError("Cannot add to cart when no customer has started shopping.")

        if quantity is None:
            purchase = self._inventory.remove_product(barcode)
            for product in purchase:
                self._transaction_manager.register_pending_purchase(product)
            return len(purchase)

        require_positive_quantity(quantity)
        if not self._inventory.supports_bulk:
            log.warning("Bulk add to cart of %s rejected by basic inventory", barcode.display_name)
            raise InvalidStockRequestError(
                "Current inventory is not fancy enough. Please purchase products one at a time."
            )

        purchases = self._inventory.remove_products(barcode, quantity)
        for product in purchases:
            self._transaction_manager.register_pending_purchase(product)
        if len(purchases) < quantity:
            log.info(
                "Only %d of %d x %s were in stock",
                len(purchases),
                quantity,
                barcode.display_name,
            )
        return len(purchases)

    def checkout(self) -> bool:
        """Close the ongoing transaction and record it if anything was bought.

        Returns:
            bool: ``True`` when the transaction had purchases and was recorded,
                ``False`` for an empty cart.

        Raises:
            NoOpenTransactionError: If no customer is currently shopping.
        """
        transaction = self._transaction_manager.close_current_transaction()
        if not transaction.get_purchases():
            log.info("Checkout for '%s' had no purchases", transaction.customer.name)
            return False
        self._transaction_history.record_transaction(transaction)
        return True

    def get_last_receipt(self) -> str:
        return self._transaction_history.get_last_transaction().get_receipt()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def export_report(self, destination: Optional[Path] = None) -> Path:
        """Write the sales report workbook.

        Args:
            destination (Path | None): Target file. Defaults to the configured
                ``ReportFile``.

        Raises:
            ValueError: If no destination is given and the farm has no settings.
        """
        if destination is None:
            if self._settings is None:
                log.error("Report export requested without a destination or settings")
                raise ValueError("No report destination configured")
            destination = self._settings.report_file
        workbook = data_manager.build_report_workbook(self._transaction_history)
        return data_manager.save_workbook(workbook, destination)


def build_inventory(inventory_type: InventoryType) -> Inventory:
    if inventory_type is InventoryType.FANCY:
        return FancyInventory()
    return BasicInventory()


def load_farm(config_path: Optional[Path] = None) -> Farm:
    """Build a :class:`Farm` from ``config.ini``.

    Args:
        config_path (Path | None): Optional explicit configuration path. When
            omitted the search walks up from the current working directory.

    Raises:
        FileNotFoundError: If the configuration file cannot be located.
        KeyError: When mandatory configuration options are missing.
    """
    located_config = data_manager.find_config_file(config_path)
    resolved_config = Path(located_config).expanduser().resolve()
    parser = data_manager.read_config(resolved_config)
    settings = data_manager.parse_settings(parser, base_path=resolved_config.parent)
    farm = Farm(build_inventory(settings.inventory_type), AddressBook(), settings=settings)
    log.info(
        "Loaded farm '%s' with a %s inventory",
        settings.farm_name,
        settings.inventory_type.value,
    )
    return farm
