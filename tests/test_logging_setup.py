import io
import logging

import pytest

from ledger_import.logging_setup import (
    configure_logging,
    get_logger,
    reset_logging,
    resolve_level,
)


def test_configure_once_and_respect_env_level(monkeypatch):
    monkeypatch.setenv("LEDGER_IMPORT_LOG_LEVEL", "warning")
    buf = io.StringIO()

    configure_logging(stream=buf, fmt="%(levelname)s %(message)s")
    configure_logging(level="DEBUG", stream=io.StringIO())  # no-op once configured

    log = get_logger("ledger_import.test")
    log.info("hidden")
    log.warning("line %d skipped: %s", 7, "bad date")

    pkg = logging.getLogger("ledger_import")
    assert pkg.level == logging.WARNING
    assert len(pkg.handlers) == 1
    assert pkg.propagate is False
    assert buf.getvalue() == "WARNING line 7 skipped: bad date\n"


@pytest.mark.parametrize(
    ("level", "env", "expected"),
    [
        (None, None, logging.INFO),
        ("debug", "ERROR", logging.DEBUG),
        (None, "error", logging.ERROR),
        ("15", None, 15),
        (logging.CRITICAL, "debug", logging.CRITICAL),
        ("loud", "warning", logging.WARNING),
    ],
)
def test_resolve_level(monkeypatch, level, env, expected):
    if env is not None:
        monkeypatch.setenv("LEDGER_IMPORT_LOG_LEVEL", env)

    assert resolve_level(level) == expected


def test_unconfigured_package_logger_gets_null_handler():
    reset_logging()

    get_logger("ledger_import.reader")

    handlers = logging.getLogger("ledger_import").handlers
    assert [type(h) for h in handlers] == [logging.NullHandler]
