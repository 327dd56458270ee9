# Shared Models
"""
Pydantic models and value types for schedule records, events and messages.
"""

from schedule_sync.shared.models.events import (
    StorageNotification,
    TimerTrigger,
    WorkflowEvent,
    parse_lambda_event,
)
from schedule_sync.shared.models.message import (
    CSV_CONTENT_TYPE,
    Attachment,
    OutboundMessage,
    RenderedMessage,
)
from schedule_sync.shared.models.records import (
    CSV_HEADER,
    TIMESTAMP_FORMAT,
    Entry,
    ParseError,
    ValidationError,
)

__all__ = [
    # Events
    "StorageNotification",
    "TimerTrigger",
    "WorkflowEvent",
    "parse_lambda_event",
    # Messages
    "CSV_CONTENT_TYPE",
    "Attachment",
    "OutboundMessage",
    "RenderedMessage",
    # Records
    "CSV_HEADER",
    "TIMESTAMP_FORMAT",
    "Entry",
    "ParseError",
    "ValidationError",
]
