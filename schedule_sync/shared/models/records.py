"""
Schedule Record Models

Typed representation of one row of the schedule CSV plus the two kinds of
row-level problems the workflow reports back to the sender.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# strptime alone accepts unpadded values such as "2020-8-3 9:0:0" and
# non-ASCII digits
TIMESTAMP_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}"
)

CSV_HEADER: Final[tuple[str, ...]] = ("id", "start_date", "end_date")

MAX_ENTRY_ID: Final[int] = 2**32 - 1


def parse_timestamp(value: str) -> datetime:
    """
    Parse a timestamp in the canonical ``YYYY-MM-DD HH:MM:SS`` format.

    Raises:
        ValueError: If the value does not match the format exactly
    """
    if not TIMESTAMP_PATTERN.fullmatch(value):
        raise ValueError(f"'{value}' does not match format YYYY-MM-DD HH:MM:SS")
    return datetime.strptime(value, TIMESTAMP_FORMAT)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp in the canonical format."""
    return value.strftime(TIMESTAMP_FORMAT)


class Entry(BaseModel):
    """
    One decoded schedule row.

    Built from CSV columns ``id`` (or ``ID``), ``start_date`` and ``end_date``.
    Construct directly with field names in code: Entry(id=1, start=..., end=...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(
        ...,
        ge=0,
        le=MAX_ENTRY_ID,
        validation_alias=AliasChoices("id", "ID"),
        serialization_alias="id",
        description="Unsigned 32-bit entry identifier",
    )
    start: datetime = Field(
        ...,
        validation_alias="start_date",
        serialization_alias="start_date",
    )
    end: datetime = Field(
        ...,
        validation_alias="end_date",
        serialization_alias="end_date",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _digits_only(cls, value: Any) -> Any:
        if isinstance(value, str):
            if not value.isascii() or not value.isdigit():
                raise ValueError(f"'{value}' is not an unsigned integer")
            return int(value)
        return value

    @field_validator("start", "end", mode="before")
    @classmethod
    def _strict_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_timestamp(value)
        return value

    @field_serializer("start", "end")
    def _render_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_row(self) -> list[str]:
        """Values in CSV_HEADER order."""
        dumped = self.model_dump(by_alias=True)
        return [str(dumped[column]) for column in CSV_HEADER]


@dataclass(frozen=True)
class ParseError:
    """A CSV row that could not be decoded into an Entry."""

    line: int
    message: str
    raw: str = ""

    def describe(self) -> str:
        return f"line {self.line}: {self.message}"


@dataclass(frozen=True)
class ValidationError:
    """A decoded Entry that breaks a schedule rule."""

    entry_id: int
    start: datetime
    end: datetime
    rule: str = "start_date must not be after end_date"

    def describe(self) -> str:
        return (
            f"Start date after end date for entry: {self.entry_id}, "
            f"{format_timestamp(self.start)}, {format_timestamp(self.end)}"
        )
