"""
Record Validator

Schedule rules applied to decoded entries, independent of the CSV codec.
"""

from collections.abc import Iterable

from schedule_sync.shared.models.records import Entry, ValidationError


def validate_entry(entry: Entry) -> ValidationError | None:
    """Check a single entry; None means it satisfies every rule."""
    if entry.start > entry.end:
        return ValidationError(
            entry_id=entry.id,
            start=entry.start,
            end=entry.end,
        )
    return None


def validate(entries: Iterable[Entry]) -> list[ValidationError]:
    """
    Validate entries in order.

    Returns one ValidationError per entry whose start is after its end.
    Entries with start == end are valid.
    """
    return [
        error
        for error in (validate_entry(entry) for entry in entries)
        if error is not None
    ]
