"""Public orchestration for statement imports.

Stages run strictly in sequence over one batch:

export → rows → classify/normalize → merge pending → resolve budget/account →
assign import ids → submit.

Per-row problems are absorbed into ``skipped``; everything else propagates.
"""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike

from .import_ids import assign_import_ids
from .ledger_client import LedgerClient
from .logging_setup import get_logger
from .models import ImportMode, ImportReport, NormalizationResult, RawRow, SubmissionReport
from .normalize import normalize_rows
from .pending import PendingTuple, merge_pending
from .reader import read_export, read_export_file
from .submit import resolve_account_id, resolve_budget_id, submit_batch
from .upload_csv import render_upload_csv

_logger = get_logger("ledger_import.api")


def _prepare_rows(
    rows: Sequence[RawRow], pending: Sequence[PendingTuple], mode: ImportMode
) -> NormalizationResult:
    exported = normalize_rows(rows, mode)
    merged = merge_pending(exported.transactions, pending)
    return NormalizationResult(
        transactions=merged.transactions,
        skipped=[*exported.skipped, *merged.skipped],
    )


def _import_rows(
    rows: Sequence[RawRow],
    pending: Sequence[PendingTuple],
    *,
    mode: ImportMode,
    client: LedgerClient,
    budget_name: str,
    account_name: str,
) -> ImportReport:
    prepared = _prepare_rows(rows, pending, mode)

    if not prepared.transactions:
        _logger.info("no transactions to submit")
        return ImportReport(
            mode=mode,
            transactions=[],
            skipped=prepared.skipped,
            submission=SubmissionReport(),
        )

    budget_id = resolve_budget_id(client, budget_name)
    account_id = resolve_account_id(client, budget_id, account_name)
    batch = assign_import_ids(prepared.transactions, account_id=account_id)
    submission = submit_batch(client, budget_id, batch)

    return ImportReport(
        mode=mode,
        transactions=batch,
        skipped=prepared.skipped,
        submission=submission,
        budget_id=budget_id,
        account_id=account_id,
    )


def prepare_batch(
    export: bytes | str,
    pending: Sequence[PendingTuple] = (),
    *,
    mode: ImportMode | str,
) -> NormalizationResult:
    """Read, normalize and merge; no ids are finalized and no ledger is contacted.

    The export transactions come first in file order, followed by the pending
    transactions in scrape order.
    """

    return _prepare_rows(read_export(export), pending, ImportMode(mode))


def import_statement(
    export: bytes | str,
    pending: Sequence[PendingTuple] = (),
    *,
    mode: ImportMode | str,
    client: LedgerClient,
    budget_name: str,
    account_name: str,
) -> ImportReport:
    """Run the full import and return what was submitted and what the ledger said.

    When nothing survives normalization the ledger is not contacted at all and
    the report carries zero counts.
    """

    return _import_rows(
        read_export(export),
        pending,
        mode=ImportMode(mode),
        client=client,
        budget_name=budget_name,
        account_name=account_name,
    )


def import_statement_file(
    csv_path: str | PathLike[str],
    pending: Sequence[PendingTuple] = (),
    *,
    mode: ImportMode | str,
    client: LedgerClient,
    budget_name: str,
    account_name: str,
) -> ImportReport:
    """:func:`import_statement` for an export stored on disk."""

    return _import_rows(
        read_export_file(csv_path),
        pending,
        mode=ImportMode(mode),
        client=client,
        budget_name=budget_name,
        account_name=account_name,
    )


def convert_export_to_upload_csv(export: bytes | str, *, mode: ImportMode | str) -> str:
    """Render an export as the ledger's upload CSV (UI import path)."""

    return render_upload_csv(normalize_rows(read_export(export), mode).transactions)


__all__ = [
    "prepare_batch",
    "import_statement",
    "import_statement_file",
    "convert_export_to_upload_csv",
]
