"""Public interface for the ``ledger_import`` package.

Re-exports the pipeline API, data models and error types as the stable import
surface. There is no runtime logic here, only symbol re-exports.
"""

from .api import (
    convert_export_to_upload_csv,
    import_statement,
    import_statement_file,
    prepare_batch,
)
from .classify import classify_row
from .errors import (
    AmountParseError,
    ConfigError,
    DateParseError,
    FormatError,
    LedgerAPIError,
    LedgerImportError,
    ResolutionError,
    RowError,
    SessionError,
    SubmissionError,
)
from .import_ids import assign_import_ids, provisional_import_id
from .ledger_client import HttpLedgerClient, LedgerClient
from .models import (
    CanonicalTransaction,
    ClassifiedRow,
    ClearanceState,
    ImportMode,
    ImportReport,
    NormalizationResult,
    RawRow,
    RowKind,
    RowSkipped,
    SubmissionReport,
)
from .normalize import normalize_row, normalize_rows
from .pending import convert_pending, merge_pending
from .reader import read_export, read_export_file
from .submit import resolve_account_id, resolve_budget_id, submit_batch
from .upload_csv import render_upload_csv

__all__ = [
    # API
    "prepare_batch",
    "import_statement",
    "import_statement_file",
    "convert_export_to_upload_csv",
    # Stages
    "read_export",
    "read_export_file",
    "classify_row",
    "normalize_row",
    "normalize_rows",
    "convert_pending",
    "merge_pending",
    "provisional_import_id",
    "assign_import_ids",
    "resolve_budget_id",
    "resolve_account_id",
    "submit_batch",
    "render_upload_csv",
    # Ledger client
    "LedgerClient",
    "HttpLedgerClient",
    # Models / types
    "RawRow",
    "RowKind",
    "ImportMode",
    "ClearanceState",
    "ClassifiedRow",
    "CanonicalTransaction",
    "RowSkipped",
    "NormalizationResult",
    "SubmissionReport",
    "ImportReport",
    # Errors
    "LedgerImportError",
    "FormatError",
    "RowError",
    "DateParseError",
    "AmountParseError",
    "ResolutionError",
    "SubmissionError",
    "LedgerAPIError",
    "SessionError",
    "ConfigError",
]
