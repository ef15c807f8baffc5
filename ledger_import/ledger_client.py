"""Thin client for the budgeting ledger's REST API.

Non-streaming JSON requests over ``urllib.request`` with bearer
authentication taken from an explicit :class:`SessionContext`. Response bodies
are validated with the Pydantic models in :mod:`ledger_import.models`.

Endpoints used:

- ``GET  /budgets``
- ``GET  /budgets/{budget_id}/accounts``
- ``POST /budgets/{budget_id}/transactions`` with ``{"transactions": [...]}``

No retries: a failed round trip raises :class:`LedgerAPIError` immediately.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from .errors import LedgerAPIError
from .logging_setup import get_logger
from .models import (
    AccountsResponse,
    BudgetsResponse,
    CanonicalTransaction,
    CreateTransactionsResponse,
    LedgerResource,
)
from .session import SessionContext

DEFAULT_API_URL = "https://api.youneedabudget.com/v1"

_logger = get_logger("ledger_import.ledger_client")


class LedgerClient(Protocol):
    """The operations the import pipeline needs from a ledger."""

    def list_budgets(self) -> list[LedgerResource]: ...

    def list_accounts(self, budget_id: str) -> list[LedgerResource]: ...

    def create_transactions(
        self, budget_id: str, transactions: Sequence[CanonicalTransaction]
    ) -> CreateTransactionsResponse: ...


class HttpLedgerClient:
    """:class:`LedgerClient` over HTTPS.

    Parameters
    ----------
    session:
        An authorized :class:`SessionContext`; checked on every request.
    base_url:
        API root, e.g. ``https://api.youneedabudget.com/v1``.
    timeout:
        Socket timeout in seconds per request.
    urlopen:
        Injection point for the transport (defaults to
        :func:`urllib.request.urlopen`).
    """

    def __init__(
        self,
        session: SessionContext,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        urlopen: Callable[..., Any] | None = None,
    ) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._urlopen = urlopen or urllib.request.urlopen

    # ---- public operations -------------------------------------------------

    def list_budgets(self) -> list[LedgerResource]:
        body = self._request("GET", "/budgets")
        return self._validate(BudgetsResponse, body).data.budgets

    def list_accounts(self, budget_id: str) -> list[LedgerResource]:
        body = self._request("GET", f"/budgets/{_quote(budget_id)}/accounts")
        return self._validate(AccountsResponse, body).data.accounts

    def create_transactions(
        self, budget_id: str, transactions: Sequence[CanonicalTransaction]
    ) -> CreateTransactionsResponse:
        payload = {"transactions": [tx.to_payload() for tx in transactions]}
        body = self._request("POST", f"/budgets/{_quote(budget_id)}/transactions", payload)
        return self._validate(CreateTransactionsResponse, body)

    # ---- internals ---------------------------------------------------------

    def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Any:
        token = self.session.bearer_token()
        url = f"{self.base_url}{path}"
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("Authorization", f"Bearer {token}")
        req.add_header("Accept", "application/json")
        if data is not None:
            req.add_header("Content-Type", "application/json")

        _logger.debug("%s %s", method, url)
        try:
            with self._urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            try:
                err_body = e.read().decode("utf-8", errors="replace")
            except Exception:  # noqa: BLE001 - error body is best effort
                err_body = ""
            raise LedgerAPIError(
                f"ledger API error: {e.code} {e.reason}: {err_body}", status=e.code
            ) from e
        except urllib.error.URLError as e:
            raise LedgerAPIError(f"ledger API unreachable: {e.reason}") from e

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise LedgerAPIError(f"ledger API returned invalid JSON for {method} {path}") from e

    @staticmethod
    def _validate[M: BaseModel](model: type[M], body: Any) -> M:
        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise LedgerAPIError(f"unexpected ledger API response shape: {e}") from e


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")


__all__ = ["DEFAULT_API_URL", "LedgerClient", "HttpLedgerClient"]
