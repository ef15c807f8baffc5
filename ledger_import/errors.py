"""Exception taxonomy for ``ledger_import``.

Per-row problems (:class:`RowError` and subclasses) are caught by the
normalization stage and turned into :class:`~ledger_import.models.RowSkipped`
results. Everything else propagates to the caller.
"""

from __future__ import annotations


class LedgerImportError(Exception):
    """Base class for all errors raised by this package."""


class FormatError(LedgerImportError):
    """The export content is not delimited text of the expected shape."""


class RowError(LedgerImportError, ValueError):
    """A single row could not be turned into a transaction."""


class DateParseError(RowError):
    """A date field is not a valid ``DD.MM.YYYY`` calendar date."""


class AmountParseError(RowError):
    """An amount field is not a locale-formatted integer after stripping."""


class ResolutionError(LedgerImportError):
    """A configured budget or account name has no match in the ledger."""


class SubmissionError(LedgerImportError):
    """The ledger rejected or failed the create-transactions call."""


class LedgerAPIError(LedgerImportError):
    """Transport, HTTP or payload failure while talking to the ledger API."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SessionError(LedgerImportError):
    """A ledger request was attempted without an active session."""


class ConfigError(LedgerImportError):
    """A required configuration value is missing or invalid."""


__all__ = [
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
