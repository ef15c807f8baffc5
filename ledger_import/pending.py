"""Merge scraped pending (uncleared) transactions into a normalized batch.

Pending transactions are not part of the downloaded export; the browser
collaborator scrapes them separately as ``(date, memo, debit, credit)`` string
tuples in page order. They use the checking amount rule and carry no payee.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import RowError
from .logging_setup import get_logger
from .models import CanonicalTransaction, ClearanceState, NormalizationResult, RowSkipped
from .normalize import build_transaction, checking_amount, parse_locale_date, truncate_memo

type PendingTuple = Sequence[str]

_logger = get_logger("ledger_import.pending")


def pending_to_transaction(pending: PendingTuple) -> CanonicalTransaction:
    """Convert one pending tuple to an uncleared canonical transaction."""

    if isinstance(pending, str) or len(pending) != 4:
        raise RowError(f"pending transaction must have 4 fields, got {pending!r}")
    if not all(isinstance(f, str) for f in pending):
        raise RowError(f"pending transaction fields must be strings, got {pending!r}")
    date, memo, debit, credit = pending
    return build_transaction(
        payee_name="",
        date=parse_locale_date(date),
        memo=truncate_memo(memo),
        amount=checking_amount(debit, credit),
        cleared=ClearanceState.UNCLEARED,
    )


def convert_pending(pending: Sequence[PendingTuple]) -> NormalizationResult:
    """Convert pending tuples in scrape order.

    A tuple that cannot be converted is logged and reported in ``skipped`` with
    ``source="pending"`` and its position in the list.
    """

    added: list[CanonicalTransaction] = []
    skipped: list[RowSkipped] = []
    for pos, item in enumerate(pending):
        try:
            added.append(pending_to_transaction(item))
        except RowError as exc:
            _logger.warning("pending transaction %d skipped: %s", pos, exc)
            skipped.append(RowSkipped(line=pos, reason=str(exc), source="pending"))

    if pending:
        _logger.info("converted %d pending transactions (%d skipped)", len(added), len(skipped))
    return NormalizationResult(transactions=added, skipped=skipped)


def merge_pending(
    batch: Sequence[CanonicalTransaction], pending: Sequence[PendingTuple]
) -> NormalizationResult:
    """Append the converted pending transactions to ``batch``.

    Strictly additive: ``batch`` is not modified and keeps its order. An empty
    ``pending`` yields ``transactions`` equal to ``batch``. Pending tuples that
    fail conversion end up in ``skipped``.
    """

    if not pending:
        return NormalizationResult(transactions=list(batch))
    extra = convert_pending(pending)
    return NormalizationResult(
        transactions=[*batch, *extra.transactions], skipped=extra.skipped
    )


__all__ = ["PendingTuple", "pending_to_transaction", "convert_pending", "merge_pending"]
