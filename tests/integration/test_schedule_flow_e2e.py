"""
End-to-end tests for the schedule sync workflow.

Covers the owner's round trip: reminder without a file, a rejected upload,
a corrected upload, then a reminder carrying the stored file.
"""

import pytest

from lambdas.process_schedule_email.dispatcher import WorkflowAction
from schedule_sync.shared.models.events import parse_lambda_event
from tests.utils.mailbox import (
    CANONICAL_BUCKET,
    INBOUND_BUCKET,
    attachment_of,
    body_of,
    sent_messages,
)


def _deliver(s3, generator, content: bytes | None, filename: str = "schedule.csv"):
    """Store an inbound email and return the S3 notification for it."""
    key = generator.generate_email_key()
    s3.put_object(
        Bucket=INBOUND_BUCKET,
        Key=key,
        Body=generator.generate_raw_email(attachment=content, filename=filename),
    )
    return parse_lambda_event(generator.generate_s3_event(INBOUND_BUCKET, key))


class TestScheduleFlowE2E:
    """Full workflow against mocked S3 and SES."""

    def test_owner_round_trip(self, workflow, mock_aws_all, ses_spy, generator):
        s3 = mock_aws_all["s3"]
        timer = parse_lambda_event(generator.generate_scheduled_event())

        # 1. No canonical file yet
        assert workflow.dispatch(timer).action == WorkflowAction.REMINDER_SENT

        # 2. Upload with one bad row
        rows = generator.generate_rows(count=6, invalid_ids=(4,))
        rejected = _deliver(s3, generator, generator.generate_csv(rows).encode(), "week.csv")
        outcome = workflow.dispatch(rejected)
        assert outcome.action == WorkflowAction.ERRORS_REPORTED
        assert outcome.validation_error_count == 1
        assert s3.list_objects_v2(Bucket=CANONICAL_BUCKET).get("KeyCount", 0) == 0

        # 3. Corrected upload
        fixed_rows = generator.generate_rows(count=6)
        fixed_csv = generator.generate_csv(fixed_rows)
        accepted = _deliver(s3, generator, fixed_csv.encode(), "week.csv")
        outcome = workflow.dispatch(accepted)
        assert outcome.action == WorkflowAction.CANONICAL_UPDATED
        assert outcome.record_count == 6

        stored = s3.get_object(Bucket=CANONICAL_BUCKET, Key="current.csv")["Body"].read()
        assert stored == fixed_csv.encode()

        # 4. Reminder now carries the stored file
        assert workflow.dispatch(timer).action == WorkflowAction.REMINDER_SENT

        messages = sent_messages(ses_spy)
        assert [m["Subject"] for m in messages] == [
            "Please reply with file",
            "Errors in file: week.csv",
            "File updated successfully!",
            "Please verify and update attached file",
        ]
        assert "entry: 4," in body_of(messages[1])
        assert attachment_of(messages[2]) == ("week.csv", stored)
        assert attachment_of(messages[3]) == ("current.csv", stored)
        assert mock_aws_all["ses"].get_send_quota()["SentLast24Hours"] == 4

    def test_rejected_upload_keeps_previous_canonical(
        self, workflow, mock_aws_all, generator, valid_csv, invalid_csv
    ):
        s3 = mock_aws_all["s3"]

        workflow.dispatch(_deliver(s3, generator, valid_csv.encode()))
        workflow.dispatch(_deliver(s3, generator, invalid_csv.encode()))

        stored = s3.get_object(Bucket=CANONICAL_BUCKET, Key="current.csv")["Body"].read()
        assert stored == valid_csv.encode()

    @pytest.mark.parametrize("count", [1, 50, 500])
    def test_large_files(self, workflow, mock_aws_all, generator, count):
        s3 = mock_aws_all["s3"]
        csv_text = generator.generate_csv(generator.generate_rows(count=count))

        outcome = workflow.dispatch(_deliver(s3, generator, csv_text.encode()))

        assert outcome.action == WorkflowAction.CANONICAL_UPDATED
        assert outcome.record_count == count
