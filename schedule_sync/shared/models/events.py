"""
Event Models

Pydantic models for the two triggers the workflow accepts, plus the adapter
that turns a raw Lambda payload into exactly one of them.
"""

from typing import Annotated, Any, Literal
from urllib.parse import unquote_plus

import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from schedule_sync.shared.exceptions import UnrecognizedEventError

log = structlog.get_logger()

SCHEDULED_EVENT_SOURCE = "aws.events"
SCHEDULED_EVENT_DETAIL_TYPE = "Scheduled Event"


class StorageNotification(BaseModel):
    """
    An inbound email was stored in S3.

    Bucket and key are kept exactly as delivered by S3 (percent-encoded,
    spaces as '+'); use the decoded_* properties before calling S3.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["storage_notification"] = "storage_notification"
    bucket: str = Field(..., min_length=1, description="Percent-encoded bucket name")
    object_key: str = Field(..., min_length=1, description="Percent-encoded object key")

    @property
    def decoded_bucket(self) -> str:
        return unquote_plus(self.bucket)

    @property
    def decoded_key(self) -> str:
        return unquote_plus(self.object_key)


class TimerTrigger(BaseModel):
    """A scheduled reminder tick. Its fields are diagnostic only."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["timer_trigger"] = "timer_trigger"
    rule: str | None = Field(default=None, description="ARN of the schedule rule")
    time: str | None = Field(default=None, description="Scheduled time (ISO 8601)")


WorkflowEvent = Annotated[
    StorageNotification | TimerTrigger,
    Field(discriminator="kind"),
]

_workflow_event_adapter = TypeAdapter(WorkflowEvent)


def _is_scheduled_event(payload: dict[str, Any]) -> bool:
    return (
        payload.get("source") == SCHEDULED_EVENT_SOURCE
        or payload.get("detail-type") == SCHEDULED_EVENT_DETAIL_TYPE
    )


def _storage_notification_from_records(records: list[dict[str, Any]]) -> StorageNotification:
    if len(records) > 1:
        log.warning(
            "extra_s3_records_ignored",
            record_count=len(records),
        )

    s3_data = records[0].get("s3", {})
    return StorageNotification(
        bucket=s3_data.get("bucket", {}).get("name", ""),
        object_key=s3_data.get("object", {}).get("key", ""),
    )


def parse_lambda_event(payload: dict[str, Any]) -> StorageNotification | TimerTrigger:
    """
    Normalize a Lambda payload into one workflow event variant.

    Accepts:
        - S3 event notifications (Records[].s3); the first record is used
        - EventBridge / CloudWatch scheduled events
        - Payloads already carrying a "kind" discriminator (local testing)

    Raises:
        UnrecognizedEventError: If the payload matches none of the above
        pydantic.ValidationError: If a recognized payload is missing fields
    """
    if "kind" in payload:
        return _workflow_event_adapter.validate_python(payload)

    records = payload.get("Records")
    if records and isinstance(records, list) and "s3" in records[0]:
        return _storage_notification_from_records(records)

    if _is_scheduled_event(payload):
        resources = payload.get("resources") or []
        return TimerTrigger(
            rule=resources[0] if resources else None,
            time=payload.get("time"),
        )

    raise UnrecognizedEventError(event_keys=sorted(payload.keys()))
