"""Lightweight in-memory stand-in for :class:`ledger_import.LedgerClient`.

Records every call and answers like the real ledger does for duplicates: an
import id it has already accepted for the account (in this or an earlier
call) is reported under ``duplicate_import_ids`` instead of being created.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ledger_import.models import CanonicalTransaction, CreateTransactionsResponse, LedgerResource


def _resources(items: Sequence[tuple[str, str]]) -> list[LedgerResource]:
    return [LedgerResource(id=i, name=n) for i, n in items]


class StubLedgerClient:
    def __init__(
        self,
        *,
        budgets: Sequence[tuple[str, str]] = (("b-1", "My Budget"),),
        accounts: Sequence[tuple[str, str]] = (("a-1", "Girokonto"),),
        create_error: Exception | None = None,
    ) -> None:
        self.budgets = _resources(budgets)
        self.accounts = _resources(accounts)
        self.create_error = create_error
        self.calls: list[tuple[str, Any]] = []
        self.submitted: list[list[CanonicalTransaction]] = []
        self._seen: set[tuple[str | None, str]] = set()

    def list_budgets(self) -> list[LedgerResource]:
        self.calls.append(("list_budgets", None))
        return list(self.budgets)

    def list_accounts(self, budget_id: str) -> list[LedgerResource]:
        self.calls.append(("list_accounts", budget_id))
        return list(self.accounts)

    def create_transactions(
        self, budget_id: str, transactions: Sequence[CanonicalTransaction]
    ) -> CreateTransactionsResponse:
        self.calls.append(("create_transactions", budget_id))
        self.submitted.append(list(transactions))
        if self.create_error is not None:
            raise self.create_error

        created: list[str] = []
        duplicates: list[str] = []
        for n, tx in enumerate(transactions):
            key = (tx.account_id, tx.import_id)
            if key in self._seen:
                duplicates.append(tx.import_id)
                continue
            self._seen.add(key)
            created.append(f"t-{len(self._seen)}-{n}")
        return CreateTransactionsResponse.model_validate(
            {"data": {"transaction_ids": created, "duplicate_import_ids": duplicates}}
        )

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]
