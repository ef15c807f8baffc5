import pytest

from ledger_import.errors import LedgerAPIError, ResolutionError, SubmissionError
from ledger_import.import_ids import assign_import_ids
from ledger_import.models import ClearanceState, SubmissionReport
from ledger_import.normalize import build_transaction
from ledger_import.submit import resolve_account_id, resolve_budget_id, submit_batch
from tests.helpers.ledger_stub import StubLedgerClient


def _batch(*amounts):
    txs = [
        build_transaction(
            payee_name="", date="2020-03-01", memo="", amount=a, cleared=ClearanceState.CLEARED
        )
        for a in amounts
    ]
    return assign_import_ids(txs, account_id="a-1")


def test_resolve_budget_and_account_by_exact_name():
    client = StubLedgerClient(
        budgets=[("b-0", "Old Budget"), ("b-1", "My Budget")],
        accounts=[("a-0", "Kreditkarte"), ("a-1", "Girokonto")],
    )

    budget_id = resolve_budget_id(client, "My Budget")
    account_id = resolve_account_id(client, budget_id, "Girokonto")

    assert (budget_id, account_id) == ("b-1", "a-1")
    assert client.calls == [("list_budgets", None), ("list_accounts", "b-1")]


@pytest.mark.parametrize("name", ["my budget", "My Budget ", "Missing"])
def test_unknown_budget_is_a_resolution_error(name):
    client = StubLedgerClient()

    with pytest.raises(ResolutionError, match="budget"):
        resolve_budget_id(client, name)


def test_unknown_account_is_a_resolution_error():
    client = StubLedgerClient()

    with pytest.raises(ResolutionError, match="account"):
        resolve_account_id(client, "b-1", "Tagesgeld")


def test_empty_batch_makes_no_call():
    client = StubLedgerClient()

    assert submit_batch(client, "b-1", []) == SubmissionReport(created=0, duplicates=0)
    assert client.calls == []


def test_submit_reports_created_and_duplicates():
    client = StubLedgerClient()
    batch = _batch(-1000, -2000, -1000)

    first = submit_batch(client, "b-1", batch)
    second = submit_batch(client, "b-1", batch)

    # Siblings share an id, so the ledger keeps one of them
    assert first == SubmissionReport(created=2, duplicates=1)
    assert second == SubmissionReport(created=0, duplicates=3)
    assert client.call_names == ["create_transactions", "create_transactions"]


def test_submit_failure_is_wrapped():
    cause = LedgerAPIError("ledger API error: 400 Bad Request", status=400)
    client = StubLedgerClient(create_error=cause)

    with pytest.raises(SubmissionError) as ei:
        submit_batch(client, "b-1", _batch(-1000))

    assert ei.value.__cause__ is cause
