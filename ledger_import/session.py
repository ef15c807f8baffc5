"""Explicit ledger session context.

A :class:`SessionContext` is an immutable value. Authorization steps take the
current context and return the next one; nothing is stored at module level.

States: ``unauthenticated`` (initial) → ``authorized`` → ``revoked`` (explicit
teardown). An authorized context whose ``expires_at`` has passed, or that was
passed through :func:`expire`, is inactive.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from .errors import SessionError


class SessionState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZED = "authorized"
    REVOKED = "revoked"


@dataclass(frozen=True, slots=True)
class SessionContext:
    state: SessionState = SessionState.UNAUTHENTICATED
    access_token: str | None = None
    expires_at: datetime | None = None

    def __repr__(self) -> str:  # never leak the token into logs
        return f"SessionContext(state={self.state.value!r}, expires_at={self.expires_at!r})"

    def is_active(self, now: datetime | None = None) -> bool:
        if self.state is not SessionState.AUTHORIZED or not self.access_token:
            return False
        if self.expires_at is None:
            return True
        return (now or datetime.now(UTC)) < self.expires_at

    def bearer_token(self, now: datetime | None = None) -> str:
        """Return the access token, or raise :class:`SessionError` when inactive."""

        if not self.is_active(now):
            raise SessionError(f"ledger session is not active (state={self.state.value})")
        assert self.access_token is not None
        return self.access_token


def unauthenticated() -> SessionContext:
    return SessionContext()


def authorize(
    session: SessionContext,
    access_token: str,
    *,
    expires_in: int | None = None,
    now: datetime | None = None,
) -> SessionContext:
    """Return an authorized context for ``access_token``.

    ``expires_in`` is the token lifetime in seconds; personal API keys have
    none.
    """

    if not access_token or not access_token.strip():
        raise SessionError("access token must be non-empty")
    expires_at = None
    if expires_in is not None:
        expires_at = (now or datetime.now(UTC)) + timedelta(seconds=expires_in)
    return replace(
        session,
        state=SessionState.AUTHORIZED,
        access_token=access_token.strip(),
        expires_at=expires_at,
    )


def expire(session: SessionContext, *, now: datetime | None = None) -> SessionContext:
    """Return the context with its token lifetime ended at ``now``."""

    return replace(session, expires_at=now or datetime.now(UTC))


def revoke(session: SessionContext) -> SessionContext:
    """Return the torn-down context; the token is dropped."""

    return replace(session, state=SessionState.REVOKED, access_token=None, expires_at=None)


__all__ = [
    "SessionState",
    "SessionContext",
    "unauthenticated",
    "authorize",
    "expire",
    "revoke",
]
