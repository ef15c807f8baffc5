"""Import-id templates and batch finalization.

An import id has the shape ``ledger-ref:<amount>:<date>:<suffix>``. The ledger
rejects a transaction whose import id it has already seen for the account, so
the id is what makes re-running an import idempotent.

Suffix rule
-----------
The suffix is the number of *other* transactions in the batch that share the
same ``<amount>:<date>`` template. Siblings therefore all receive the same
suffix (``N - 1`` for ``N`` siblings) and are not told apart; the ledger will
keep only one of them. This is the established id scheme; changing it would
re-import every previously submitted sibling group, so shared templates are
only logged.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import replace

from .logging_setup import get_logger
from .models import IMPORT_ID_PREFIX, CanonicalTransaction

_logger = get_logger("ledger_import.import_ids")


def provisional_import_id(amount: int, date: str) -> str:
    """Return the template ``ledger-ref:<amount>:<date>:`` (suffix appended later)."""

    return f"{IMPORT_ID_PREFIX}:{amount}:{date}:"


def assign_import_ids(
    batch: Sequence[CanonicalTransaction], *, account_id: str
) -> list[CanonicalTransaction]:
    """Finalize import ids and attach ``account_id`` to every transaction.

    Counts are taken over the batch as given, before any suffix is applied.
    Returns new transactions in the same order; ``batch`` is not modified.
    """

    counts = Counter(tx.import_id for tx in batch)

    for template, n in counts.items():
        if n > 1:
            _logger.warning(
                "%d transactions share import id template %r; all receive suffix %d "
                "and the ledger will treat all but one as duplicates",
                n,
                template,
                n - 1,
            )

    return [
        replace(tx, import_id=f"{tx.import_id}{counts[tx.import_id] - 1}", account_id=account_id)
        for tx in batch
    ]


__all__ = ["provisional_import_id", "assign_import_ids"]
