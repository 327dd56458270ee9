# Shared Tools
"""
AWS-facing tools and the MIME composer.

All tools take an optional boto3 client so callers can build clients once
per invocation.
"""

from schedule_sync.shared.tools.composer import build_message
from schedule_sync.shared.tools.email import (
    send_raw_email,
    validate_email_address,
)
from schedule_sync.shared.tools.s3 import (
    fetch_object,
    put_object,
)

__all__ = [
    # Composer
    "build_message",
    # Email tools
    "send_raw_email",
    "validate_email_address",
    # S3 tools
    "fetch_object",
    "put_object",
]
