# ruff: noqa: I001
"""CLI for the ``ledger_import`` package.

This module exposes callable command handlers (``cmd_import_statement``,
``cmd_convert_csv``, ``cmd_history``) and a Typer-based console interface.
Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before delegating to command logic. Business logic lives in
:mod:`ledger_import.api` and related modules.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .config import Settings
from .errors import ConfigError, LedgerImportError
from .logging_setup import configure_logging
from .models import CanonicalTransaction, ImportMode, ImportReport


# ---- Small module-level helpers used by CLI commands -------------------------


def _err(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _read_bytes(path: str) -> bytes:
    return Path(path).read_bytes()


def _load_pending(path: str | None) -> list[list[str]]:
    """Load the scraped pending list: a JSON array of 4-element string arrays."""

    if path is None:
        return []
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(item, list) for item in data):
        raise ValueError(f"pending file must hold a JSON array of arrays: {path}")
    return [[str(v) for v in item] for item in data]


def _transactions_table(title: str, transactions: Sequence[CanonicalTransaction]) -> Table:
    table = Table(title=title)
    for col in ("Date", "Payee", "Memo", "Amount", "Cleared", "Import ID"):
        table.add_column(col)
    for tx in transactions:
        table.add_row(
            tx.date,
            tx.payee_name,
            tx.memo,
            str(tx.amount),
            tx.cleared.value,
            tx.import_id,
        )
    return table


def _print_report(console: Console, report: ImportReport) -> None:
    console.print(_transactions_table("Submitted transactions", report.transactions))
    console.print(
        f"Created {report.submission.created}, ignored {report.submission.duplicates} "
        f"duplicate transactions, skipped {len(report.skipped)} rows"
    )
    for s in report.skipped:
        console.print(f"  skipped {s.source} {s.line}: {s.reason}")


def _record_history(report: ImportReport, database_url: str | None) -> None:
    from .db import session_scope
    from .history import record_import_run

    with session_scope(database_url=database_url) as session:
        record_import_run(session, report)


# ---- Command handlers ---------------------------------------------------------


def cmd_import_statement(
    csv_path: str,
    *,
    pending_json: str | None = None,
    mode: str | None = None,
    budget: str | None = None,
    account: str | None = None,
    dry_run: bool = False,
    record_history: bool = False,
    database_url: str | None = None,
) -> int:
    """Import a bank export (plus optional pending list) into the ledger.

    Options override the environment settings. With ``dry_run`` the batch is
    normalized and printed but the ledger is not contacted. Errors are written
    to stderr and the function returns ``1``; on success it returns ``0``.
    """

    from .api import import_statement, prepare_batch
    from .ledger_client import HttpLedgerClient
    from .session import authorize, unauthenticated

    console = Console(markup=False, highlight=False)
    try:
        settings = Settings.from_env()
        run_mode = ImportMode(mode) if mode else settings.import_mode
        export = _read_bytes(csv_path)
        pending = _load_pending(pending_json)
    except FileNotFoundError as e:
        return _err(f"File not found: {e.filename}")
    except PermissionError as e:
        return _err(f"Permission denied: {e.filename}")
    except (ValueError, ConfigError) as e:
        return _err(str(e))

    if dry_run:
        try:
            prepared = prepare_batch(export, pending, mode=run_mode)
        except LedgerImportError as e:
            return _err(str(e))
        console.print(_transactions_table("Prepared transactions (dry run)", prepared.transactions))
        console.print(
            f"{len(prepared.transactions)} transactions ready, {len(prepared.skipped)} rows skipped"
        )
        return 0

    budget_name = budget or settings.ledger_budget
    account_name = account or settings.ledger_account
    try:
        settings.require("ledger_api_key")
        if not budget_name or not account_name:
            raise ConfigError(
                "budget and account names are required (LEDGER_BUDGET, LEDGER_ACCOUNT)"
            )
        assert settings.ledger_api_key is not None
        session = authorize(unauthenticated(), settings.ledger_api_key.get_secret_value())
        client = HttpLedgerClient(session, base_url=settings.ledger_api_url)
        report = import_statement(
            export,
            pending,
            mode=run_mode,
            client=client,
            budget_name=budget_name,
            account_name=account_name,
        )
    except LedgerImportError as e:
        return _err(str(e))

    _print_report(console, report)

    if record_history and report.transactions:
        try:
            _record_history(report, database_url or settings.database_url)
        except Exception as e:
            return _err(f"failed to record import history: {e}")
    return 0


def cmd_convert_csv(csv_path: str, *, mode: str | None = None, output: str | None = None) -> int:
    """Write the ledger upload CSV for an export to ``output`` (or stdout)."""

    from .api import convert_export_to_upload_csv

    try:
        settings = Settings.from_env()
        run_mode = ImportMode(mode) if mode else settings.import_mode
        text = convert_export_to_upload_csv(_read_bytes(csv_path), mode=run_mode)
    except FileNotFoundError as e:
        return _err(f"File not found: {e.filename}")
    except PermissionError as e:
        return _err(f"Permission denied: {e.filename}")
    except (ValueError, LedgerImportError) as e:
        return _err(str(e))

    if output is None:
        sys.stdout.write(text)
        return 0
    try:
        Path(output).write_text(text, encoding="utf-8")
    except OSError as e:
        return _err(f"cannot write {output}: {e}")
    return 0


def cmd_history(*, limit: int = 10, database_url: str | None = None) -> int:
    """Print the most recent recorded import runs."""

    from sqlalchemy.exc import SQLAlchemyError

    from .db import session_scope
    from .history import recent_import_runs

    try:
        url = database_url or Settings.from_env().database_url
        with session_scope(database_url=url) as session:
            runs = recent_import_runs(session, limit=limit)
            rows = [
                (
                    str(r.id),
                    r.created_at.strftime("%Y-%m-%d %H:%M"),
                    r.mode,
                    str(r.submitted),
                    str(r.created),
                    str(r.duplicates),
                    str(r.skipped),
                )
                for r in runs
            ]
    except (LedgerImportError, SQLAlchemyError) as e:
        return _err(str(e))

    table = Table(title="Import history")
    for col in ("Run", "When", "Mode", "Submitted", "Created", "Duplicates", "Skipped"):
        table.add_column(col)
    for row in rows:
        table.add_row(*row)
    Console(markup=False, highlight=False).print(table)
    return 0


# ---- Typer-based console interface -------------------------------------------

app = typer.Typer(
    add_completion=False,
    help="Normalize bank exports and import them into the budgeting ledger.",
)

# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used as a default value below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to the bank's CSV export (including its 4-line preamble)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command("import-statement")
def import_statement_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    pending_json: Path | None = typer.Option(
        None, help="JSON file with scraped pending transactions [[date, memo, debit, credit], ...]."
    ),
    mode: ImportMode | None = typer.Option(
        None, help="Statement format (falls back to LEDGER_IMPORT_MODE, then checking)."
    ),
    budget: str | None = typer.Option(
        None, help="Ledger budget name (falls back to LEDGER_BUDGET)."
    ),
    account: str | None = typer.Option(
        None, help="Ledger account name (falls back to LEDGER_ACCOUNT)."
    ),
    dry_run: bool = typer.Option(
        False, help="Normalize and print only; do not contact the ledger."
    ),
    record_history: bool = typer.Option(
        False, help="Record the submitted batch in the local import history (DATABASE_URL)."
    ),
    database_url: str | None = typer.Option(None, help="Override DATABASE_URL."),
) -> None:
    _exit(
        cmd_import_statement(
            str(csv_path),
            pending_json=str(pending_json) if pending_json else None,
            mode=mode.value if mode else None,
            budget=budget,
            account=account,
            dry_run=dry_run,
            record_history=record_history,
            database_url=database_url,
        )
    )


@app.command("convert-csv")
def convert_csv_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    mode: ImportMode | None = typer.Option(None, help="Statement format."),
    output: Path | None = typer.Option(None, help="Write the upload CSV here instead of stdout."),
) -> None:
    _exit(
        cmd_convert_csv(
            str(csv_path),
            mode=mode.value if mode else None,
            output=str(output) if output else None,
        )
    )


@app.command("history")
def history_cmd(
    *,
    limit: int = typer.Option(10, min=1, help="Number of runs to show."),
    database_url: str | None = typer.Option(None, help="Override DATABASE_URL."),
) -> None:
    _exit(cmd_history(limit=limit, database_url=database_url))


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (falls back to LEDGER_IMPORT_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover
    app()
