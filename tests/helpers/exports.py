"""Builders for bank export blobs as the bank writes them (Latin-1, 4-line preamble)."""

from __future__ import annotations

from collections.abc import Sequence

CHECKING_PREAMBLE = (
    "Umsätze Girokonto;Zeitraum: 01.03.2020 - 31.03.2020;",
    "Kontoinhaber;Jane Doe",
    "",
    "Letzter Kontostand;1.234,56;EUR;",
)

CREDIT_CARD_PREAMBLE = (
    "Kreditkartentransaktionen;Karte: 4111 **** **** 1111;",
    "Abrechnungszeitraum;01.03.2020 - 31.03.2020",
    "",
    "Saldo;-123,45;EUR;",
)

# Header names as the bank writes them, before the UTF-8 mis-decoding.
CHECKING_HEADER = (
    "Buchungstag",
    "Begünstigter / Auftraggeber",
    "Verwendungszweck",
    "Soll",
    "Haben",
)
CREDIT_CARD_HEADER = ("Belegdatum", "Eingangstag", "Verwendungszweck", "Betrag")

# The same header name as it appears after reading the export as UTF-8.
PAYEE_KEY = "Beg\ufffdnstigter / Auftraggeber"


def _line(values: Sequence[str]) -> str:
    return ";".join(f'"{v}"' for v in values)


def build_export(
    rows: Sequence[Sequence[str]],
    *,
    header: Sequence[str] = CHECKING_HEADER,
    preamble: Sequence[str] = CHECKING_PREAMBLE,
    encoding: str = "latin-1",
) -> bytes:
    lines = [*preamble, _line(header), *(_line(r) for r in rows)]
    return ("\n".join(lines) + "\n").encode(encoding)


def build_credit_card_export(rows: Sequence[Sequence[str]]) -> bytes:
    return build_export(rows, header=CREDIT_CARD_HEADER, preamble=CREDIT_CARD_PREAMBLE)
