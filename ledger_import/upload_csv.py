"""CSV rendering for manual or UI-driven upload into the ledger.

Output columns (exact order): ``Date, Payee, Memo, Outflow, Inflow``. Every
field is quoted and lines end with ``\\n``. Amounts are rendered from minor
units as positive decimals with two places; a negative amount is an outflow,
a positive one an inflow, and the other column is left empty.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from .models import CanonicalTransaction

UPLOAD_HEADER = ("Date", "Payee", "Memo", "Outflow", "Inflow")

# Ledger minor units per currency unit.
_UNITS_PER_MAJOR = Decimal(1000)


def format_minor_units(amount: int) -> str:
    """Render ``abs(amount)`` minor units as a two-decimal string."""

    d = (Decimal(abs(amount)) / _UNITS_PER_MAJOR).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{d:.2f}"


def _upload_row(tx: CanonicalTransaction) -> list[str]:
    outflow = format_minor_units(tx.amount) if tx.amount < 0 else ""
    inflow = format_minor_units(tx.amount) if tx.amount > 0 else ""
    return [tx.date, tx.payee_name, tx.memo, outflow, inflow]


def render_upload_csv(transactions: Iterable[CanonicalTransaction]) -> str:
    """Return the upload CSV text for ``transactions`` in input order."""

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(UPLOAD_HEADER)
    for tx in transactions:
        writer.writerow(_upload_row(tx))
    return buf.getvalue()


__all__ = ["UPLOAD_HEADER", "format_minor_units", "render_upload_csv"]
