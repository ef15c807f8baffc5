import pytest

from ledger_import import ImportMode, convert_export_to_upload_csv
from ledger_import.models import ClearanceState
from ledger_import.normalize import build_transaction
from ledger_import.upload_csv import format_minor_units, render_upload_csv
from tests.helpers.exports import build_export


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(-50000, "50.00"), (1234560, "1234.56"), (5, "0.01"), (0, "0.00")],
)
def test_format_minor_units(amount, expected):
    assert format_minor_units(amount) == expected


def test_render_splits_outflow_and_inflow():
    txs = [
        build_transaction(
            payee_name="Jane Doe",
            date="2020-03-01",
            memo='Invoice "4"',
            amount=-50000,
            cleared=ClearanceState.CLEARED,
        ),
        build_transaction(
            payee_name="",
            date="2020-03-02",
            memo="Gehalt",
            amount=1234560,
            cleared=ClearanceState.CLEARED,
        ),
    ]

    text = render_upload_csv(txs)

    assert text == (
        '"Date","Payee","Memo","Outflow","Inflow"\n'
        '"2020-03-01","Jane Doe","Invoice ""4""","50.00",""\n'
        '"2020-03-02","","Gehalt","","1234.56"\n'
    )


def test_render_empty_has_header_only():
    assert render_upload_csv([]) == '"Date","Payee","Memo","Outflow","Inflow"\n'


def test_convert_export_to_upload_csv():
    export = build_export(
        [
            ("01.03.2020", "Jane Doe", "Invoice #4", "-50,00", ""),
            ("Kontostand", "", "", "", "1.234,56"),
        ]
    )

    text = convert_export_to_upload_csv(export, mode=ImportMode.CHECKING)

    assert text.splitlines() == [
        '"Date","Payee","Memo","Outflow","Inflow"',
        '"2020-03-01","Jane Doe","Invoice #4","50.00",""',
    ]
