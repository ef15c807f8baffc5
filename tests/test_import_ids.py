import logging

from ledger_import.import_ids import assign_import_ids, provisional_import_id
from ledger_import.models import ClearanceState
from ledger_import.normalize import build_transaction


def _tx(amount, date, memo=""):
    return build_transaction(
        payee_name="", date=date, memo=memo, amount=amount, cleared=ClearanceState.CLEARED
    )


def test_provisional_template():
    assert provisional_import_id(-50000, "2020-03-01") == "ledger-ref:-50000:2020-03-01:"


def test_unique_template_gets_suffix_zero_and_account():
    out = assign_import_ids([_tx(-50000, "2020-03-01")], account_id="a-1")

    assert out[0].import_id == "ledger-ref:-50000:2020-03-01:0"
    assert out[0].account_id == "a-1"


def test_siblings_share_the_same_suffix():
    batch = [
        _tx(-1000, "2020-03-02", "coffee"),
        _tx(-50000, "2020-03-01"),
        _tx(-1000, "2020-03-02", "coffee again"),
        _tx(-1000, "2020-03-02", "third coffee"),
    ]

    out = assign_import_ids(batch, account_id="a-1")

    assert [t.import_id for t in out] == [
        "ledger-ref:-1000:2020-03-02:2",
        "ledger-ref:-50000:2020-03-01:0",
        "ledger-ref:-1000:2020-03-02:2",
        "ledger-ref:-1000:2020-03-02:2",
    ]
    assert [t.memo for t in out] == [t.memo for t in batch]


def test_input_batch_is_not_modified():
    batch = [_tx(-1000, "2020-03-02"), _tx(-1000, "2020-03-02")]

    assign_import_ids(batch, account_id="a-1")

    assert [t.import_id for t in batch] == ["ledger-ref:-1000:2020-03-02:"] * 2
    assert all(t.account_id is None for t in batch)


def test_shared_template_is_logged(caplog):
    batch = [_tx(-1000, "2020-03-02"), _tx(-1000, "2020-03-02"), _tx(5, "2020-03-03")]

    with caplog.at_level(logging.WARNING, logger="ledger_import"):
        assign_import_ids(batch, account_id="a-1")

    msgs = [r.getMessage() for r in caplog.records]
    assert len(msgs) == 1
    assert "ledger-ref:-1000:2020-03-02:" in msgs[0]


def test_empty_batch():
    assert assign_import_ids([], account_id="a-1") == []
