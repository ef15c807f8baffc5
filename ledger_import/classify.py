"""Row classification for checking-account and credit-card exports.

The statement format is decided once per run (:class:`ImportMode`), because a
single account page only ever yields one format. Each mode has a fixed column
layout; a checking run never looks at credit-card columns and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import ClassifiedRow, ImportMode, RawRow, RowKind

# Header names as they arrive from the bank: the export is Latin-1 but read as
# UTF-8, so the umlaut in "Begünstigter" is a replacement character.
PAYEE_COLUMN = "Beg\ufffdnstigter / Auftraggeber"
MEMO_COLUMN = "Verwendungszweck"


@dataclass(frozen=True, slots=True)
class StatementLayout:
    """Columns and sentinel values of one statement format."""

    kind: RowKind
    date_column: str
    balance_sentinel: str
    amount_columns: tuple[str, ...]
    memo_column: str = MEMO_COLUMN
    payee_column: str | None = None

    @property
    def required_columns(self) -> tuple[str, ...]:
        cols = (self.date_column, self.memo_column, *self.amount_columns)
        if self.payee_column is not None:
            cols = (*cols, self.payee_column)
        return cols


CHECKING_LAYOUT = StatementLayout(
    kind=RowKind.CHECKING,
    date_column="Buchungstag",
    balance_sentinel="Kontostand",
    amount_columns=("Soll", "Haben"),
    payee_column=PAYEE_COLUMN,
)

CREDIT_CARD_LAYOUT = StatementLayout(
    kind=RowKind.CREDIT_CARD,
    date_column="Belegdatum",
    balance_sentinel="Online-Saldo:",
    amount_columns=("Betrag",),
)

LAYOUTS: dict[ImportMode, StatementLayout] = {
    ImportMode.CHECKING: CHECKING_LAYOUT,
    ImportMode.CREDIT_CARD: CREDIT_CARD_LAYOUT,
}


def layout_for(mode: ImportMode | str) -> StatementLayout:
    return LAYOUTS[ImportMode(mode)]


def classify_row(row: RawRow, mode: ImportMode | str) -> ClassifiedRow:
    """Return the :class:`RowKind` of ``row`` under the run's ``mode``.

    Order of checks: balance sentinel, reader defect, missing date, missing
    required columns. Anything left is a transaction row of the mode's kind.
    A footer line shorter than the header still counts as a balance row.
    """

    layout = layout_for(mode)

    date_val = row.get(layout.date_column)
    if date_val is not None and date_val.strip() == layout.balance_sentinel:
        return ClassifiedRow(RowKind.BALANCE, row)

    if row.defect:
        return ClassifiedRow(RowKind.MALFORMED, row, row.defect)

    if date_val is None or not date_val.strip():
        return ClassifiedRow(RowKind.MALFORMED, row, f"missing {layout.date_column!r}")

    missing = [c for c in layout.required_columns if row.get(c) is None]
    if missing:
        return ClassifiedRow(
            RowKind.MALFORMED, row, "missing columns: " + ", ".join(repr(c) for c in missing)
        )

    return ClassifiedRow(layout.kind, row)


__all__ = [
    "PAYEE_COLUMN",
    "MEMO_COLUMN",
    "StatementLayout",
    "CHECKING_LAYOUT",
    "CREDIT_CARD_LAYOUT",
    "layout_for",
    "classify_row",
]
