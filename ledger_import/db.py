"""Engine and session handling for the local import history.

The history store is opt-in: nothing here runs unless a database URL is given
explicitly or through ``DATABASE_URL``. The first engine created for a URL also
creates the history tables, so callers never issue DDL themselves.

Usage
-----
from ledger_import.db import session_scope

with session_scope(database_url=url) as s:
    record_import_run(s, report)
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .errors import ConfigError
from .history import create_schema
from .logging_setup import get_logger

_logger = get_logger("ledger_import.db")

_engine: Engine | None = None
_sessions: sessionmaker[Session] | None = None
_engine_url: str | None = None


def history_url(override: str | None = None) -> str:
    """Return ``override`` or ``DATABASE_URL``; :class:`ConfigError` when neither is set."""

    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise ConfigError("DATABASE_URL is not set; cannot record import history")
    return url


def _enforce_sqlite_foreign_keys(engine: Engine) -> None:
    # SQLite leaves foreign keys off unless asked per connection
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _record):  # pragma: no cover - driver hook
        dbapi_conn.execute("PRAGMA foreign_keys = ON")


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the shared history engine, creating it and its tables on first use.

    A process talks to one history database. Asking for a different URL
    without calling :func:`reset_engine` first raises :class:`ConfigError`.
    """

    global _engine, _sessions, _engine_url
    url = history_url(database_url)
    if _engine is not None:
        if url != _engine_url:
            raise ConfigError(
                "import history is already bound to another database; "
                "call reset_engine() before switching"
            )
        return _engine

    engine = create_engine(url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        _enforce_sqlite_foreign_keys(engine)
    create_schema(engine)

    _engine, _engine_url = engine, url
    _sessions = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
    _logger.debug("import history at %s", engine.url.render_as_string(hide_password=True))
    return engine


def reset_engine() -> None:
    """Dispose the shared engine so the next call may bind a different URL."""

    global _engine, _sessions, _engine_url
    if _engine is not None:
        _engine.dispose()
    _engine = _sessions = _engine_url = None


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on any error."""

    get_engine(database_url=database_url)
    assert _sessions is not None  # bound by get_engine
    session = _sessions()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["history_url", "get_engine", "reset_engine", "session_scope"]
