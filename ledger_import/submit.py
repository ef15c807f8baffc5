"""Budget/account resolution and batch submission to the ledger."""

from __future__ import annotations

from collections.abc import Sequence

from .errors import ResolutionError, SubmissionError
from .ledger_client import LedgerClient
from .logging_setup import get_logger
from .models import CanonicalTransaction, LedgerResource, SubmissionReport

_logger = get_logger("ledger_import.submit")


def _find_by_name(resources: Sequence[LedgerResource], name: str) -> LedgerResource | None:
    return next((r for r in resources if r.name == name), None)


def resolve_budget_id(client: LedgerClient, budget_name: str) -> str:
    """Return the id of the budget named exactly ``budget_name``."""

    _logger.info("listing budgets")
    budget = _find_by_name(client.list_budgets(), budget_name)
    if budget is None:
        raise ResolutionError(f"target budget not found: {budget_name!r}")
    _logger.info("found target budget: %s", budget.name)
    return budget.id


def resolve_account_id(client: LedgerClient, budget_id: str, account_name: str) -> str:
    """Return the id of the account named exactly ``account_name`` in ``budget_id``."""

    _logger.info("listing accounts")
    account = _find_by_name(client.list_accounts(budget_id), account_name)
    if account is None:
        raise ResolutionError(f"target account not found: {account_name!r}")
    _logger.info("found target account: %s", account.name)
    return account.id


def submit_batch(
    client: LedgerClient, budget_id: str, batch: Sequence[CanonicalTransaction]
) -> SubmissionReport:
    """Send a finalized batch and report created vs duplicate counts.

    An empty batch makes no call and reports zeros. Any failure of the create
    call is raised as :class:`SubmissionError` with the cause chained.
    """

    if not batch:
        _logger.info("no transactions to submit")
        return SubmissionReport()

    _logger.info("uploading %d transactions", len(batch))
    try:
        resp = client.create_transactions(budget_id, batch)
    except Exception as e:
        raise SubmissionError(f"ledger rejected the batch: {e}") from e

    report = SubmissionReport(
        created=len(resp.data.transaction_ids),
        duplicates=len(resp.data.duplicate_import_ids),
    )
    _logger.info(
        "created %d, ignored %d duplicate transactions", report.created, report.duplicates
    )
    return report


__all__ = ["resolve_budget_id", "resolve_account_id", "submit_batch"]
