"""Raw export row → :class:`CanonicalTransaction` normalization.

Field rules shared by both statement formats:

- ``date``: ``DD.MM.YYYY`` → ``YYYY-MM-DD``; anything else is a
  :class:`DateParseError`.
- ``memo``: the purpose text cut to :data:`MEMO_MAX` characters.
- ``amount``: locale decimals are not parsed as decimals. Every ``,`` and
  ``.`` is removed, the digits are read as an integer (cents) and multiplied by
  :data:`MINOR_UNIT_FACTOR` to get ledger minor units. Signs are kept exactly
  as they appear in the export.
- ``cleared``: always ``cleared`` for export rows.

Rows that fail any rule are skipped and reported, never fatal to the batch.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime

from .classify import classify_row, layout_for
from .errors import AmountParseError, DateParseError, RowError
from .import_ids import provisional_import_id
from .logging_setup import get_logger
from .models import (
    CanonicalTransaction,
    ClassifiedRow,
    ClearanceState,
    ImportMode,
    NormalizationResult,
    RawRow,
    RowKind,
    RowSkipped,
)

PAYEE_MAX = 49
MEMO_MAX = 99
MINOR_UNIT_FACTOR = 10
PAYEE_MEMO_DELIMITER = "//"

_INT_RE = re.compile(r"^[+-]?\d+$")

_logger = get_logger("ledger_import.normalize")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def parse_locale_date(raw: str | None) -> str:
    """Return ``YYYY-MM-DD`` for a ``DD.MM.YYYY`` string."""

    if raw is not None and not isinstance(raw, str):
        raise DateParseError(f"date must be text, got {raw!r}")
    s = (raw or "").strip()
    try:
        dt = datetime.strptime(s, "%d.%m.%Y")
    except ValueError as exc:
        raise DateParseError(f"invalid DD.MM.YYYY date: {raw!r}") from exc
    return dt.date().isoformat()


def _strip_amount(raw: str | None, strip_chars: str) -> int:
    if raw is not None and not isinstance(raw, str):
        raise AmountParseError(f"amount must be text, got {raw!r}")
    s = (raw or "").strip()
    for ch in strip_chars:
        s = s.replace(ch, "")
    if not s:
        return 0
    if not _INT_RE.fullmatch(s):
        raise AmountParseError(f"invalid amount: {raw!r}")
    return int(s)


def checking_amount(debit: str | None, credit: str | None) -> int:
    """Minor units for a debit/credit pair: ``(strip(debit) + strip(credit)) * 10``."""

    return (_strip_amount(debit, ",.") + _strip_amount(credit, ",.")) * MINOR_UNIT_FACTOR


def credit_card_amount(raw: str | None) -> int:
    """Minor units for a single signed amount with ``,``/``.``/space stripped."""

    return _strip_amount(raw, ",. ") * MINOR_UNIT_FACTOR


def truncate_memo(memo: str | None) -> str:
    return (memo or "")[:MEMO_MAX]


def checking_payee(payee: str | None, memo: str | None) -> str:
    """Prefer the explicit payee; else the memo text before the first ``//``."""

    if payee:
        return payee[:PAYEE_MAX]
    memo = memo or ""
    if PAYEE_MEMO_DELIMITER not in memo:
        return ""
    return memo.split(PAYEE_MEMO_DELIMITER, 1)[0][:PAYEE_MAX]


def build_transaction(
    *,
    payee_name: str,
    date: str,
    memo: str,
    amount: int,
    cleared: ClearanceState,
) -> CanonicalTransaction:
    return CanonicalTransaction(
        payee_name=payee_name,
        date=date,
        memo=memo,
        amount=amount,
        cleared=cleared,
        import_id=provisional_import_id(amount, date),
    )


# ---------------------------------------------------------------------------
# Per-format mapping
# ---------------------------------------------------------------------------


def _checking_transaction(row: RawRow) -> CanonicalTransaction:
    layout = layout_for(ImportMode.CHECKING)
    assert layout.payee_column is not None
    memo = row.get(layout.memo_column)
    debit, credit = (row.get(c) for c in layout.amount_columns)
    return build_transaction(
        payee_name=checking_payee(row.get(layout.payee_column), memo),
        date=parse_locale_date(row.get(layout.date_column)),
        memo=truncate_memo(memo),
        amount=checking_amount(debit, credit),
        cleared=ClearanceState.CLEARED,
    )


def _credit_card_transaction(row: RawRow) -> CanonicalTransaction:
    layout = layout_for(ImportMode.CREDIT_CARD)
    memo = row.get(layout.memo_column) or ""
    (amount_col,) = layout.amount_columns
    return build_transaction(
        payee_name=memo[:PAYEE_MAX],
        date=parse_locale_date(row.get(layout.date_column)),
        memo=truncate_memo(memo),
        amount=credit_card_amount(row.get(amount_col)),
        cleared=ClearanceState.CLEARED,
    )


def normalize_row(classified: ClassifiedRow) -> CanonicalTransaction:
    """Map one classified transaction row to a canonical transaction.

    Raises :class:`RowError` (or a subclass) when the row cannot be mapped.
    """

    if classified.kind is RowKind.CHECKING:
        return _checking_transaction(classified.row)
    if classified.kind is RowKind.CREDIT_CARD:
        return _credit_card_transaction(classified.row)
    raise RowError(f"row of kind {classified.kind.value!r} is not a transaction")


def normalize_rows(rows: Iterable[RawRow], mode: ImportMode | str) -> NormalizationResult:
    """Classify and normalize export rows in file order.

    Balance rows are dropped silently. Malformed rows and rows failing field
    derivation are reported in ``skipped`` and logged; the rest of the batch is
    unaffected.
    """

    transactions: list[CanonicalTransaction] = []
    skipped: list[RowSkipped] = []

    for row in rows:
        classified = classify_row(row, mode)
        if classified.kind is RowKind.BALANCE:
            _logger.debug("line %d: balance row dropped", row.line)
            continue
        if classified.kind is RowKind.MALFORMED:
            reason = classified.reason or "malformed row"
            _logger.warning("line %d skipped: %s", row.line, reason)
            skipped.append(RowSkipped(line=row.line, reason=reason))
            continue
        try:
            transactions.append(normalize_row(classified))
        except RowError as exc:
            _logger.warning("line %d skipped: %s", row.line, exc)
            skipped.append(RowSkipped(line=row.line, reason=str(exc)))

    _logger.info(
        "normalized %d %s transactions (%d skipped)",
        len(transactions),
        ImportMode(mode).value,
        len(skipped),
    )
    return NormalizationResult(transactions=transactions, skipped=skipped)


__all__ = [
    "PAYEE_MAX",
    "MEMO_MAX",
    "MINOR_UNIT_FACTOR",
    "parse_locale_date",
    "checking_amount",
    "credit_card_amount",
    "checking_payee",
    "truncate_memo",
    "build_transaction",
    "normalize_row",
    "normalize_rows",
]
