"""Reader for locale-encoded bank exports with a fixed preamble.

Contract
--------
- The export starts with exactly :data:`PREAMBLE_LINES` non-data lines (account
  summary, export date, ...). They are dropped unconditionally; nothing about
  them is inspected.
- The first remaining line is the column header. Header names are kept exactly
  as decoded. Exports are written in a legacy single-byte encoding but read as
  UTF-8, so ``Begünstigter`` arrives as ``Beg�nstigter``; lookups must use
  that form.
- The delimiter is the most frequent of ``;``, ``,`` and tab in the header
  line (``;`` when none occurs).

Failure mode
------------
:class:`~ledger_import.errors.FormatError` when no usable header remains or the
``csv`` module rejects the content. A data line whose field count differs from
the header is returned with ``defect`` set instead of raising, so a single bad
line never aborts the file.
"""

from __future__ import annotations

import csv
import io
from os import PathLike
from pathlib import Path

from .errors import FormatError
from .logging_setup import get_logger
from .models import RawRow

PREAMBLE_LINES = 4

_DELIMITERS = (";", ",", "\t")

_logger = get_logger("ledger_import.reader")


def _decode(data: bytes | str) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def _strip_preamble(text: str) -> str:
    return "\n".join(text.split("\n")[PREAMBLE_LINES:])


def _detect_delimiter(body: str) -> str:
    header_line = next((ln for ln in body.split("\n") if ln.strip()), "")
    counts = {d: header_line.count(d) for d in _DELIMITERS}
    best = max(_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ";"


def read_export(data: bytes | str) -> list[RawRow]:
    """Parse an export blob into header-keyed rows in file order."""

    body = _strip_preamble(_decode(data))
    if not body.strip():
        raise FormatError(f"export has no content after the {PREAMBLE_LINES}-line preamble")

    delimiter = _detect_delimiter(body)
    reader = csv.reader(io.StringIO(body), delimiter=delimiter)

    try:
        header = next(reader, None)
        if header is None:
            raise FormatError("export has no header row after the preamble")
        if len(header) < 2:
            raise FormatError(
                f"header row is not {delimiter!r}-delimited text: {header!r}"
            )
        named = [h for h in header if h != ""]
        dupes = sorted({h for h in named if named.count(h) > 1})
        if dupes:
            raise FormatError("duplicate column names in header: " + ", ".join(dupes))

        rows: list[RawRow] = []
        for fields in reader:
            if not fields:
                continue
            line = reader.line_num + PREAMBLE_LINES
            defect = None
            if len(fields) != len(header):
                defect = f"expected {len(header)} fields, found {len(fields)}"
            values = {
                name: value
                for name, value in zip(header, fields, strict=False)
                if name != ""
            }
            rows.append(RawRow(line=line, values=values, defect=defect))
    except csv.Error as exc:
        raise FormatError(f"export is not parseable as delimited text: {exc}") from exc

    _logger.debug("read %d rows (delimiter=%r, columns=%d)", len(rows), delimiter, len(header))
    return rows


def read_export_file(path: str | PathLike[str]) -> list[RawRow]:
    return read_export(Path(path).read_bytes())


__all__ = ["PREAMBLE_LINES", "read_export", "read_export_file"]
