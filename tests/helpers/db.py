"""DB helpers for tests: bootstrap a temporary SQLite import-history DB."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import text as sql_text

from ledger_import.db import get_engine, session_scope
from ledger_import.history import Base


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file with the history schema and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    get_engine(database_url=url)
    _assert_history_schema_in_sync(url)
    return url


def _assert_history_schema_in_sync(database_url: str) -> None:
    """ORM column sets match the SQLite tables that were created."""

    with session_scope(database_url=database_url) as session:
        for table in Base.metadata.sorted_tables:
            rows = session.execute(sql_text(f"PRAGMA table_info('{table.name}')")).fetchall()
            got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
            expected = {c.name for c in table.columns}
            assert got == expected, f"{table.name} schema drift: {expected ^ got}"
        assert session.execute(sql_text("PRAGMA foreign_keys")).scalar() == 1
