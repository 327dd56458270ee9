"""
Custom Exceptions for the Schedule Sync Workflow

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.

Row-level CSV problems are not exceptions: they are collected as
ParseError / ValidationError records and reported by email.
"""

from dataclasses import dataclass
from typing import Any


class ScheduleSyncError(Exception):
    """Base exception for the schedule sync workflow."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class InvalidEmailFormatError(ScheduleSyncError):
    """Email address is malformed; the message cannot be built."""

    email_address: str
    expected_pattern: str | None = None

    def __init__(
        self,
        email_address: str,
        expected_pattern: str | None = None,
    ) -> None:
        self.email_address = email_address
        self.expected_pattern = expected_pattern
        pattern_hint = f" Expected pattern: {expected_pattern}" if expected_pattern else ""
        super().__init__(
            f"Invalid email format: '{email_address}'.{pattern_hint}",
            email_address=email_address,
            expected_pattern=expected_pattern,
        )


@dataclass
class MissingAttachmentError(ScheduleSyncError):
    """Inbound email has no part with an attachment disposition."""

    bucket: str
    key: str

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(
            f"No attachment found in email s3://{bucket}/{key}",
            bucket=bucket,
            key=key,
        )


@dataclass
class UnrecognizedEventError(ScheduleSyncError):
    """Lambda payload is neither an S3 notification nor a scheduled event."""

    event_keys: list[str]

    def __init__(self, event_keys: list[str]) -> None:
        self.event_keys = event_keys
        super().__init__(
            "Unrecognized event format",
            event_keys=event_keys,
        )


@dataclass
class SESError(ScheduleSyncError):
    """SES email operation failed."""

    operation: str  # "send_raw"
    recipient: str | None = None

    def __init__(
        self,
        operation: str,
        recipient: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.recipient = recipient
        super().__init__(
            f"SES {operation} failed{f' for {recipient}' if recipient else ''}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            recipient=recipient,
            error_message=error_message,
        )


@dataclass
class S3Error(ScheduleSyncError):
    """S3 operation failed."""

    operation: str  # "download", "upload"
    bucket: str
    key: str | None = None

    def __init__(
        self,
        operation: str,
        bucket: str,
        key: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.bucket = bucket
        self.key = key
        super().__init__(
            f"S3 {operation} failed for s3://{bucket}/{key or '*'}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            bucket=bucket,
            key=key,
            error_message=error_message,
        )


class ObjectNotFoundError(S3Error):
    """S3 object (or its bucket) does not exist."""

    def __init__(self, bucket: str, key: str, error_message: str | None = None) -> None:
        super().__init__(
            operation="download",
            bucket=bucket,
            key=key,
            error_message=error_message or "Object not found",
        )
