# ruff: noqa: I001
"""Local audit log of submitted import batches.

The ledger is the authority on duplicates; this log only records what was
sent and what the ledger answered, so past runs can be inspected without
querying the ledger.

Tables:
- ``li_import_runs``: one row per submitted batch with created/duplicate
  counts and the number of skipped rows.
- ``li_submitted_transactions``: the finalized transactions of each run,
  keyed by import id.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

from sqlalchemy import BigInteger, DateTime, Date, ForeignKey, Integer, String, Text, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship

from .logging_setup import get_logger
from .models import ImportReport

_logger = get_logger("ledger_import.history")


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ImportRun(Base):
    __tablename__ = "li_import_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    mode: Mapped[str] = mapped_column(String, nullable=False)
    budget_id: Mapped[str | None] = mapped_column(String, nullable=True)
    account_id: Mapped[str | None] = mapped_column(String, nullable=True)
    submitted: Mapped[int] = mapped_column(Integer, nullable=False)
    created: Mapped[int] = mapped_column(Integer, nullable=False)
    duplicates: Mapped[int] = mapped_column(Integer, nullable=False)
    skipped: Mapped[int] = mapped_column(Integer, nullable=False)

    transactions: Mapped[list[SubmittedTransaction]] = relationship(
        back_populates="run", cascade="all, delete-orphan", order_by="SubmittedTransaction.id"
    )


class SubmittedTransaction(Base):
    __tablename__ = "li_submitted_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    run_id: Mapped[int] = mapped_column(
        ForeignKey("li_import_runs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    import_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    account_id: Mapped[str | None] = mapped_column(String, nullable=True)
    posted_on: Mapped[date] = mapped_column("date", Date, nullable=False)
    # Ledger minor units
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payee_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    memo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cleared: Mapped[str] = mapped_column(String, nullable=False)

    run: Mapped[ImportRun] = relationship(back_populates="transactions")


def create_schema(engine: Engine) -> None:
    """Create the history tables if they do not exist."""

    Base.metadata.create_all(bind=engine)


def record_import_run(session: Session, report: ImportReport) -> ImportRun:
    """Add a run and its transactions to ``session`` (commit at caller)."""

    run = ImportRun(
        mode=report.mode.value,
        budget_id=report.budget_id,
        account_id=report.account_id,
        submitted=len(report.transactions),
        created=report.submission.created,
        duplicates=report.submission.duplicates,
        skipped=len(report.skipped),
    )
    run.transactions = [
        SubmittedTransaction(
            import_id=tx.import_id,
            account_id=tx.account_id,
            posted_on=date.fromisoformat(tx.date),
            amount=tx.amount,
            payee_name=tx.payee_name,
            memo=tx.memo,
            cleared=tx.cleared.value,
        )
        for tx in report.transactions
    ]
    session.add(run)
    session.flush()
    _logger.info("recorded import run %d (%d transactions)", run.id, run.submitted)
    return run


def recent_import_runs(session: Session, *, limit: int = 10) -> list[ImportRun]:
    """Return the most recent runs, newest first."""

    stmt = select(ImportRun).order_by(ImportRun.id.desc()).limit(limit)
    return list(session.scalars(stmt).all())


__all__ = [
    "Base",
    "ImportRun",
    "SubmittedTransaction",
    "create_schema",
    "record_import_run",
    "recent_import_runs",
]
