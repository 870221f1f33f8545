"""Configuration and report I/O for the farm sales engine.

This module keeps every file-system concern out of the sales logic:

1. Configuration handling: finding and parsing ``config.ini``.
2. Report export: turning a :class:`~farm_sales.history.TransactionHistory`
   into an ``openpyxl`` workbook and writing it to disk.

The export is one-way; nothing here reads sales state back in.
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import openpyxl
from openpyxl.styles import Font
from openpyxl.workbook import Workbook

from . import log
from .constants import Barcode, InventoryType, SheetName
from .history import TransactionHistory
from .receipts import format_cents
from .transactions import Transaction
from .validators import require_discount_percent


CONFIG_FILE_NAME = "config.ini"
TRANSACTIONS_SHEET = SheetName.TRANSACTIONS.value
SUMMARY_SHEET = SheetName.SUMMARY.value

SHEET_COLUMNS: Mapping[str, Sequence[str]] = {
    TRANSACTIONS_SHEET: [
        "TransactionID",
        "FinalisedAt",
        "Customer",
        "Kind",
        "Items",
        "Total",
        "Saved",
    ],
    SUMMARY_SHEET: [
        "Product",
        "UnitsSold",
        "GrossEarnings",
        "AverageDiscount",
    ],
}


@dataclass(frozen=True)
class FarmSettings:
    """Typed representation of the ``config.ini`` settings we care about."""

    farm_name: str
    inventory_type: InventoryType
    report_file: Path
    discounts: Dict[Barcode, int] = field(default_factory=dict)


def find_config_file(explicit_path: Optional[Path] = None) -> Path:
    """Locate the configuration file.

    An explicit path is returned as-is. Otherwise the search walks up from the
    current working directory and returns the first ``config.ini`` found.

    Raises:
        FileNotFoundError: If no parent directory contains ``CONFIG_FILE_NAME``.
    """

    if explicit_path:
        return explicit_path

    current = Path.cwd()
    for p in (current, *current.parents):
        candidate = p / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate

    log.error("No %s found above %s", CONFIG_FILE_NAME, current)
    raise FileNotFoundError(f"Configuration file not found: {CONFIG_FILE_NAME}")


def read_config(config_path: Path) -> configparser.ConfigParser:
    """Load ``config.ini`` and return a populated ``ConfigParser`` instance.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist after expansion and
            resolution.
    """

    config_path = config_path.expanduser().resolve()
    if not config_path.exists():
        log.error("Configuration file not found: %s", config_path)
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    parser = configparser.ConfigParser()
    parser.read(config_path)
    return parser


def parse_settings(parser: configparser.ConfigParser, *, base_path: Optional[Path] = None) -> FarmSettings:
    """Convert a ``ConfigParser`` into strongly typed :class:`FarmSettings`.

    Relative ``ReportFile`` entries are anchored to ``base_path`` (or the
    current working directory). The optional ``[Discounts]`` section maps
    product names to whole percentages, e.g. ``egg = 10``.

    Raises:
        KeyError: If a required section or option is missing.
        ValueError: If the inventory type, a product name, or a discount is
            invalid.
    """

    try:
        farm_name = parser.get("Farm", "FarmName")
        inventory_raw = parser.get("Farm", "InventoryType")
        report_raw = parser.get("Farm", "ReportFile")
    except (configparser.NoSectionError, configparser.NoOptionError) as exc:
        log.error("Missing required configuration entry: %s", exc)
        raise KeyError(f"Missing required configuration entry: {exc}") from exc

    try:
        inventory_type = InventoryType(inventory_raw.strip().lower())
    except ValueError as exc:
        log.error("Unsupported inventory type in configuration: %s", inventory_raw)
        raise ValueError(f"Unsupported inventory type: {inventory_raw}") from exc

    report_file = Path(report_raw)
    if not report_file.is_absolute():
        if base_path is None:
            base_path = Path.cwd()
        report_file = (base_path / report_file).resolve()

    discounts: Dict[Barcode, int] = {}
    if parser.has_section("Discounts"):
        for name, raw_percent in parser.items("Discounts"):
            try:
                percent = int(raw_percent)
            except ValueError as exc:
                log.error("Discount for %s is not a whole number: %s", name, raw_percent)
                raise ValueError(f"Discount for {name} is not a whole number: {raw_percent}") from exc
            require_discount_percent(percent)
            discounts[Barcode.from_name(name)] = percent

    return FarmSettings(
        farm_name=farm_name,
        inventory_type=inventory_type,
        report_file=report_file,
        discounts=discounts,
    )


def build_report_workbook(history: TransactionHistory) -> Workbook:
    """Render the transaction history as a two-sheet workbook.

    ``Transactions`` holds one row per recorded transaction in recording
    order; ``Summary`` holds one row per product type in catalogue order.
    Money columns are written as ``$X.YY`` text to match receipts.
    """

    workbook = openpyxl.Workbook()
    if workbook.active and workbook.active.title == "Sheet":
        workbook.remove(workbook.active)

    bold_font = Font(bold=True)
    for sheet_name, columns in SHEET_COLUMNS.items():
        worksheet = workbook.create_sheet(title=sheet_name)
        for column_index, column_name in enumerate(columns, start=1):
            cell = worksheet.cell(row=1, column=column_index)
            cell.value = column_name
            cell.font = bold_font

    transactions_sheet = workbook[TRANSACTIONS_SHEET]
    for transaction in history.get_transactions():
        transactions_sheet.append(serialize_transaction(transaction))

    summary_sheet = workbook[SUMMARY_SHEET]
    for barcode in Barcode:
        summary_sheet.append(
            [
                barcode.display_name,
                history.get_total_products_sold(barcode),
                format_cents(history.get_gross_earnings(barcode)),
                history.get_average_product_discount(barcode),
            ]
        )

    log.debug("Built report workbook with %d transactions", history.get_total_transactions_made())
    return workbook


def serialize_transaction(transaction: Transaction) -> List[object]:
    """Convert a finalised transaction into the ``Transactions`` column order."""

    finalised_at = transaction.finalised_at.isoformat() if transaction.finalised_at else None
    return [
        transaction.transaction_id,
        finalised_at,
        transaction.customer.name,
        transaction.kind.value,
        len(transaction.get_purchases()),
        format_cents(transaction.get_total()),
        format_cents(transaction.get_total_saved()),
    ]


def save_workbook(workbook: Workbook, destination: Path) -> Path:
    """Persist the workbook at ``destination``, creating parent directories.

    Returns:
        Path: The resolved destination.
    """

    dest = Path(destination).expanduser().resolve()
    dest.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(dest)
    log.info("Saved report workbook '%s'", dest)
    return dest
