"""
ProcessScheduleEmail Lambda

Keeps a canonical schedule CSV in sync with files emailed in by its owner,
and periodically reminds the owner to review it.

Flow:
    Owner Reply
    → SES Receipt Rule
    → S3 (raw email)
    → This Lambda
    → S3 (canonical CSV) + SES confirmation / error report

    EventBridge Schedule
    → This Lambda
    → SES reminder (with canonical CSV when present)
"""

from lambdas.process_schedule_email.dispatcher import (
    WorkflowAction,
    WorkflowDispatcher,
    WorkflowOutcome,
    render_error_report,
)
from lambdas.process_schedule_email.email_parser import (
    AttachmentData,
    EmailParseResult,
    parse_email,
)
from lambdas.process_schedule_email.handler import lambda_handler
from lambdas.process_schedule_email.record_codec import decode, encode
from lambdas.process_schedule_email.record_validator import validate, validate_entry

__all__ = [
    "AttachmentData",
    "EmailParseResult",
    "WorkflowAction",
    "WorkflowDispatcher",
    "WorkflowOutcome",
    "decode",
    "encode",
    "lambda_handler",
    "parse_email",
    "render_error_report",
    "validate",
    "validate_entry",
]
