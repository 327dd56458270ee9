"""
Unit tests for trigger event models and payload parsing.
"""

import pydantic
import pytest

from schedule_sync.shared.exceptions import UnrecognizedEventError
from schedule_sync.shared.models.events import (
    StorageNotification,
    TimerTrigger,
    parse_lambda_event,
)


class TestParseLambdaEvent:
    """Tests for parse_lambda_event function."""

    def test_s3_notification(self, s3_event, inbound_key):
        event = parse_lambda_event(s3_event)

        assert isinstance(event, StorageNotification)
        assert event.kind == "storage_notification"
        assert event.bucket == "test-schedule-inbound"
        assert event.object_key == inbound_key

    def test_s3_notification_uses_first_record(self, generator):
        payload = generator.generate_s3_event("bucket-a", "first-key", record_count=3)

        event = parse_lambda_event(payload)

        assert event.object_key == "first-key"

    def test_scheduled_event(self, scheduled_event):
        event = parse_lambda_event(scheduled_event)

        assert isinstance(event, TimerTrigger)
        assert event.rule.endswith("rule/schedule-sync-reminder")
        assert event.time == "2025-02-06T09:00:00Z"

    def test_scheduled_event_detected_by_detail_type(self):
        event = parse_lambda_event({"detail-type": "Scheduled Event"})

        assert isinstance(event, TimerTrigger)
        assert event.rule is None

    def test_generated_scheduled_event(self, generator):
        assert isinstance(parse_lambda_event(generator.generate_scheduled_event()), TimerTrigger)

    def test_kind_discriminator(self):
        event = parse_lambda_event(
            {"kind": "storage_notification", "bucket": "b", "object_key": "k"}
        )

        assert event == StorageNotification(bucket="b", object_key="k")
        assert parse_lambda_event({"kind": "timer_trigger"}) == TimerTrigger()

    def test_unknown_kind_raises_validation_error(self):
        with pytest.raises(pydantic.ValidationError):
            parse_lambda_event({"kind": "something_else"})

    def test_missing_key_raises_validation_error(self):
        with pytest.raises(pydantic.ValidationError):
            parse_lambda_event({"Records": [{"s3": {"bucket": {"name": "b"}, "object": {}}}]})

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"foo": "bar"},
            {"Records": []},
            {"Records": [{"Sns": {"Message": "{}"}}]},
            {"source": "aws.s3"},
        ],
    )
    def test_unrecognized_payload_raises(self, payload):
        with pytest.raises(UnrecognizedEventError) as exc_info:
            parse_lambda_event(payload)

        assert exc_info.value.event_keys == sorted(payload.keys())


class TestStorageNotification:
    """Tests for StorageNotification key decoding."""

    def test_decoded_key_unquotes_plus_and_percent(self):
        event = StorageNotification(bucket="inbound", object_key="emails/My+File%281%29.eml")

        assert event.decoded_key == "emails/My File(1).eml"
        assert event.decoded_bucket == "inbound"

    def test_frozen(self):
        event = StorageNotification(bucket="b", object_key="k")

        with pytest.raises(pydantic.ValidationError):
            event.bucket = "other"

    def test_empty_bucket_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            StorageNotification(bucket="", object_key="k")
