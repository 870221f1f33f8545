"""Plain-text receipt layout.

Transactions decide *what* a receipt says (headings, one row per line item,
totals); this module only lays those values out as text. Rows may carry more
cells than there are headings: the surplus cells are annotations and are
printed on their own indented lines beneath the row.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

RULE_CHAR = "="
SEPARATOR_CHAR = "-"
COLUMN_GAP = "  "
ACTIVE_RECEIPT = "//// Transaction still active... ////"


def format_cents(cents: int) -> str:
    """Render an integer amount of cents as ``$X.YY``."""
    amount = (Decimal(cents) / 100).quantize(Decimal("0.01"))
    return f"${amount}"


def create_active_receipt() -> str:
    """Placeholder returned for transactions that have not been finalised."""
    return ACTIVE_RECEIPT


def create_receipt(
    headings: Sequence[str],
    entries: Sequence[Sequence[str]],
    total: str,
    customer_name: str,
    savings: Optional[str] = None,
) -> str:
    """Lay out a finalised receipt.

    Args:
        headings (Sequence[str]): Column titles, left to right.
        entries (Sequence[Sequence[str]]): One row per line item. Cells beyond
            ``len(headings)`` are treated as annotations for that row.
        total (str): Pre-formatted grand total, e.g. ``"$1.50"``.
        customer_name (str): Name printed in the footer.
        savings (str | None): Pre-formatted savings amount; the savings line
            is omitted when ``None``.

    Returns:
        str: Multi-line receipt text without a trailing newline.
    """
    column_count = len(headings)
    widths = [len(heading) for heading in headings]
    for entry in entries:
        for index, cell in enumerate(entry[:column_count]):
            widths[index] = max(widths[index], len(cell))

    table_width = sum(widths) + len(COLUMN_GAP) * (column_count - 1)
    lines: List[str] = [RULE_CHAR * table_width, _format_row(headings, widths), SEPARATOR_CHAR * table_width]
    for entry in entries:
        lines.append(_format_row(entry[:column_count], widths))
        for note in entry[column_count:]:
            lines.append(f"  {note}")
    lines.append(RULE_CHAR * table_width)
    lines.append(f"Total: {total}")
    if savings is not None:
        lines.append(f"***** You saved {savings}! *****")
    lines.append(f"Thank you for shopping, {customer_name}!")
    return "\n".join(lines)


def _format_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    return COLUMN_GAP.join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()
