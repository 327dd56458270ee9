"""
Record Codec

Decodes the schedule CSV attachment into typed Entry records and encodes
records back into the canonical CSV file.

Decoding is row-by-row: a malformed row is recorded as a ParseError and the
remaining rows are still decoded.
"""

import csv
import io
from collections.abc import Iterable

import pydantic
import structlog

from schedule_sync.shared.models.records import CSV_HEADER, Entry, ParseError

log = structlog.get_logger()

LINE_TERMINATOR = "\n"


def _describe_schema_error(error: pydantic.ValidationError) -> str:
    """Flatten pydantic errors into 'field: reason; field: reason'."""
    parts = []
    for detail in error.errors(include_url=False):
        location = ".".join(str(item) for item in detail["loc"]) or "row"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def decode(raw_text: str) -> tuple[list[Entry], list[ParseError]]:
    """
    Decode CSV text into entries and row-level errors.

    The first non-blank row is the header; ``id`` may also be spelled ``ID``.

    Args:
        raw_text: CSV text (trimmed before parsing)

    Returns:
        Tuple of (entries in input order, parse errors in input order)
    """
    entries: list[Entry] = []
    errors: list[ParseError] = []

    text = raw_text.strip()
    if not text:
        return entries, errors

    reader = csv.reader(io.StringIO(text, newline=""))
    header: list[str] | None = None

    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            errors.append(ParseError(line=reader.line_num, message=f"malformed CSV: {e}"))
            continue

        if not row:
            continue

        if header is None:
            header = [column.strip() for column in row]
            continue

        line = reader.line_num
        raw = ",".join(row)

        if len(row) != len(header):
            errors.append(
                ParseError(
                    line=line,
                    message=f"expected {len(header)} fields, found {len(row)}",
                    raw=raw,
                )
            )
            continue

        try:
            # Columns match aliases only, never field names
            entries.append(Entry.model_validate(dict(zip(header, row)), by_name=False))
        except pydantic.ValidationError as e:
            errors.append(ParseError(line=line, message=_describe_schema_error(e), raw=raw))

    log.debug(
        "csv_decoded",
        header=header,
        entry_count=len(entries),
        error_count=len(errors),
    )

    return entries, errors


def encode(entries: Iterable[Entry]) -> bytes:
    """
    Encode entries as the canonical CSV file.

    Header ``id,start_date,end_date`` is always written. Output decodes back
    to the same entries with no errors.
    """
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, lineterminator=LINE_TERMINATOR)
    writer.writerow(CSV_HEADER)
    for entry in entries:
        writer.writerow(entry.to_row())
    return buffer.getvalue().encode("utf-8")
