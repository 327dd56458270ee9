"""
Notification Message Models

Value types passed to the composer and the SES transport.
"""

import re
from dataclasses import dataclass, field

CSV_CONTENT_TYPE = "text/csv; charset=utf-8"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f\x85\u2028\u2029]+")


def is_single_line(value: str) -> bool:
    return _CONTROL_CHARS.search(value) is None


def single_line(value: str) -> str:
    """Collapse CR, LF and other control characters into single spaces."""
    return _CONTROL_CHARS.sub(" ", value).strip()


def sanitize_filename(filename: str) -> str:
    """
    Make a filename safe for a quoted Content-Disposition parameter.

    Control characters become spaces; double quotes and backslashes become
    underscores. Non-ASCII characters are kept.
    """
    return single_line(filename).replace('"', "_").replace("\\", "_")


@dataclass(frozen=True)
class Attachment:
    """
    A file carried by an outbound message.

    Note on filenames:
        The composer passes the filename through sanitize_filename before it
        reaches the Content-Disposition header. Non-ASCII names are not
        transliterated; callers that need ASCII must convert them first.
    """

    content: bytes
    filename: str
    content_type: str = CSV_CONTENT_TYPE

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class OutboundMessage:
    """A notification to be rendered and sent once."""

    recipient: str
    sender: str
    subject: str
    body_text: str
    body_html: str | None = None
    attachment: Attachment | None = None


@dataclass(frozen=True)
class RenderedMessage:
    """Transport-ready message bytes plus the SES envelope."""

    data: bytes
    source: str
    destinations: list[str] = field(default_factory=list)
    subject: str = ""
