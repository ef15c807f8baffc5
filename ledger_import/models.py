"""Data models for the statement import pipeline.

Pipeline values are frozen dataclasses; stages return new instances rather
than mutating earlier ones. Ledger API payloads are validated with Pydantic
models at the HTTP boundary.

Field order of :class:`CanonicalTransaction` (exact):
    - payee_name: at most 49 characters, may be empty
    - date: ``YYYY-MM-DD``
    - memo: at most 99 characters
    - amount: signed integer in ledger minor units
    - cleared: :class:`ClearanceState`
    - import_id: provisional ``ledger-ref:<amount>:<date>:`` until finalized
    - account_id: ``None`` until finalized
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

IMPORT_ID_PREFIX = "ledger-ref"


class ImportMode(StrEnum):
    """Which statement format a run handles; fixed for the whole run."""

    CHECKING = "checking"
    CREDIT_CARD = "credit_card"


class RowKind(StrEnum):
    CHECKING = "checking"
    CREDIT_CARD = "credit_card"
    BALANCE = "balance"
    MALFORMED = "malformed"


class ClearanceState(StrEnum):
    CLEARED = "cleared"
    UNCLEARED = "uncleared"


@dataclass(frozen=True, slots=True)
class RawRow:
    """One data line of an export, keyed by the header exactly as decoded.

    ``defect`` is set by the reader when the line could not be mapped onto the
    header (e.g. wrong field count); such rows classify as malformed.
    """

    line: int
    values: Mapping[str, str]
    defect: str | None = None

    def get(self, column: str) -> str | None:
        return self.values.get(column)


@dataclass(frozen=True, slots=True)
class ClassifiedRow:
    kind: RowKind
    row: RawRow
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class CanonicalTransaction:
    """A single normalized transaction, ready for the ledger once finalized."""

    payee_name: str
    date: str
    memo: str
    amount: int
    cleared: ClearanceState
    import_id: str
    account_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON shape accepted by the ledger's create endpoint."""

        return {
            "account_id": self.account_id,
            "date": self.date,
            "amount": self.amount,
            "payee_name": self.payee_name,
            "memo": self.memo,
            "cleared": self.cleared.value,
            "import_id": self.import_id,
        }


@dataclass(frozen=True, slots=True)
class RowSkipped:
    """A row (or pending tuple) that was dropped, with the reason why.

    ``line`` is the 1-based line in the export file, or the 0-based position in
    the pending list when ``source == "pending"``.
    """

    line: int
    reason: str
    source: str = "export"


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    transactions: list[CanonicalTransaction] = field(default_factory=list)
    skipped: list[RowSkipped] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SubmissionReport:
    created: int = 0
    duplicates: int = 0


@dataclass(frozen=True, slots=True)
class ImportReport:
    """Outcome of a full import run."""

    mode: ImportMode
    transactions: list[CanonicalTransaction]
    skipped: list[RowSkipped]
    submission: SubmissionReport
    budget_id: str | None = None
    account_id: str | None = None


# ---------------------------------------------------------------------------
# Ledger API payloads
# ---------------------------------------------------------------------------


class LedgerResource(BaseModel):
    """A named budget or account as listed by the ledger."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str


class _BudgetsData(BaseModel):
    model_config = ConfigDict(extra="ignore")
    budgets: list[LedgerResource]


class BudgetsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    data: _BudgetsData


class _AccountsData(BaseModel):
    model_config = ConfigDict(extra="ignore")
    accounts: list[LedgerResource]


class AccountsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    data: _AccountsData


class _CreatedData(BaseModel):
    model_config = ConfigDict(extra="ignore")
    transaction_ids: list[str] = []
    duplicate_import_ids: list[str] = []


class CreateTransactionsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    data: _CreatedData


__all__ = [
    "IMPORT_ID_PREFIX",
    "ImportMode",
    "RowKind",
    "ClearanceState",
    "RawRow",
    "ClassifiedRow",
    "CanonicalTransaction",
    "RowSkipped",
    "NormalizationResult",
    "SubmissionReport",
    "ImportReport",
    "LedgerResource",
    "BudgetsResponse",
    "AccountsResponse",
    "CreateTransactionsResponse",
]
