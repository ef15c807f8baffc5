"""Pytest configuration for test isolation.

The package keeps two pieces of process-wide state: the "configured" flag of
its logging setup and the shared SQLAlchemy engine of the import history.
Both are reset around every test, and ledger/bank environment variables are
cleared so a developer's ``.env`` or shell cannot leak into assertions.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from ledger_import.db import reset_engine
from ledger_import.logging_setup import reset_logging

_ENV_VARS = (
    "LEDGER_API_KEY",
    "LEDGER_API_URL",
    "LEDGER_BUDGET",
    "LEDGER_ACCOUNT",
    "LEDGER_IMPORT_MODE",
    "LEDGER_IMPORT_LOG_LEVEL",
    "BANK_BRANCH",
    "BANK_ACCOUNT",
    "BANK_PIN",
    "ENABLE_SCREENSHOTS",
    "DATABASE_URL",
)


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_logging()
    reset_engine()
    yield
    reset_logging()
    reset_engine()
