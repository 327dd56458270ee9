# Shared Infrastructure for Schedule Sync
"""
Shared infrastructure components for the schedule sync workflow.

This package provides:
- Pydantic models for schedule records and trigger events
- Message value types and the MIME composer
- Tool implementations for S3 and SES
- Configuration management
- Custom exceptions
"""

from schedule_sync.shared.config import Settings, get_settings
from schedule_sync.shared.exceptions import (
    InvalidEmailFormatError,
    MissingAttachmentError,
    ObjectNotFoundError,
    S3Error,
    ScheduleSyncError,
    SESError,
    UnrecognizedEventError,
)

__all__ = [
    # Exceptions
    "ScheduleSyncError",
    "InvalidEmailFormatError",
    "MissingAttachmentError",
    "ObjectNotFoundError",
    "S3Error",
    "SESError",
    "UnrecognizedEventError",
    # Config
    "Settings",
    "get_settings",
]
