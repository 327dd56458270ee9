"""
Workflow Dispatcher

Drives one invocation of the schedule sync workflow for a single event.

Flow (storage notification):
1. Fetch the raw email from S3
2. Locate the attachment
3. Decode CSV rows, then validate entries
4a. Errors: email an error report with the original attachment
4b. Clean: overwrite the canonical file, then email a confirmation

Flow (timer trigger):
1. Fetch the canonical file (absence is not an error)
2. Email a reminder, attaching the file when it exists

Nothing is retried here. Only the timer path absorbs failures; every other
failure propagates so the invocation is reported as failed.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Any

import structlog

from lambdas.process_schedule_email import record_codec, record_validator
from lambdas.process_schedule_email.email_parser import parse_email
from schedule_sync.shared.config import Settings
from schedule_sync.shared.exceptions import MissingAttachmentError, S3Error, SESError
from schedule_sync.shared.models.events import StorageNotification, TimerTrigger
from schedule_sync.shared.models.message import Attachment, OutboundMessage
from schedule_sync.shared.models.records import ParseError, ValidationError
from schedule_sync.shared.tools import email as email_tools
from schedule_sync.shared.tools import s3 as s3_tools
from schedule_sync.shared.tools.composer import build_message

log = structlog.get_logger()

REMINDER_WITH_FILE_SUBJECT = "Please verify and update attached file"
REMINDER_WITH_FILE_BODY = "Please verify and update the attached file"
REMINDER_NO_FILE_SUBJECT = "Please reply with file"
REMINDER_NO_FILE_BODY = "Please reply with file"
SUCCESS_SUBJECT = "File updated successfully!"
SUCCESS_BODY = "File updated successfully!\nAttached for reference."
MISSING_ATTACHMENT_SUBJECT = "No attachment found in your email"


class WorkflowAction(str, Enum):
    """What an invocation ended up doing."""

    REMINDER_SENT = "reminder_sent"
    REMINDER_FAILED = "reminder_failed"
    ERRORS_REPORTED = "errors_reported"
    CANONICAL_UPDATED = "canonical_updated"


@dataclass
class WorkflowOutcome:
    """Summary of one dispatch."""

    action: WorkflowAction
    message_id: str | None = None
    filename: str | None = None
    record_count: int = 0
    parse_error_count: int = 0
    validation_error_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the handler response."""
        return {
            "action": self.action.value,
            "message_id": self.message_id,
            "filename": self.filename,
            "record_count": self.record_count,
            "parse_error_count": self.parse_error_count,
            "validation_error_count": self.validation_error_count,
        }


def render_error_report(
    parse_errors: list[ParseError],
    validation_errors: list[ValidationError],
) -> str:
    """
    Build the error report body.

    Parse errors come first, then validation errors, one line each.
    """
    sections = ["Errors found in attached file:"]
    if parse_errors:
        sections.append(
            "Parse errors:\n" + "\n".join(error.describe() for error in parse_errors)
        )
    if validation_errors:
        sections.append(
            "Validation errors:\n"
            + "\n".join(error.describe() for error in validation_errors)
        )
    return "\n".join(sections)


class WorkflowDispatcher:
    """
    Runs the schedule sync workflow for one event.

    Clients are built from the settings unless injected, so every invocation
    gets its own.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        s3_client=None,
        ses_client=None,
    ) -> None:
        self.settings = settings
        self._s3 = s3_client or s3_tools.get_client(settings)
        self._ses = ses_client or email_tools.get_client(settings)

    def dispatch(self, event: StorageNotification | TimerTrigger) -> WorkflowOutcome:
        """
        Process one event start to finish.

        Raises:
            S3Error: Storage path read failure, or canonical write failure
            SESError: Send failure on the storage path
            MissingAttachmentError: Inbound email has no attachment
            InvalidEmailFormatError: Configured sender/recipient is malformed
        """
        if event.kind == "timer_trigger":
            return self._handle_timer(event)
        if event.kind == "storage_notification":
            return self._handle_storage_notification(event)
        raise ValueError(f"Unsupported event kind: {event.kind}")

    # --- Timer path ---

    def _handle_timer(self, event: TimerTrigger) -> WorkflowOutcome:
        log.info("timer_trigger_received", rule=event.rule, time=event.time)

        canonical = self._fetch_canonical()
        if canonical is not None:
            message = self._message(
                REMINDER_WITH_FILE_SUBJECT,
                REMINDER_WITH_FILE_BODY,
                attachment=self._csv_attachment(canonical, self.canonical_filename),
            )
        else:
            message = self._message(REMINDER_NO_FILE_SUBJECT, REMINDER_NO_FILE_BODY)

        try:
            message_id = self._send(message)
        except SESError as e:
            # Best-effort reminder
            log.error(
                "reminder_send_failed",
                subject=message.subject,
                error=str(e),
            )
            return WorkflowOutcome(action=WorkflowAction.REMINDER_FAILED)

        return WorkflowOutcome(
            action=WorkflowAction.REMINDER_SENT,
            message_id=message_id,
            filename=self.canonical_filename if canonical is not None else None,
        )

    def _fetch_canonical(self) -> bytes | None:
        try:
            return s3_tools.fetch_object(
                self.settings.canonical_bucket,
                self.settings.canonical_key,
                client=self._s3,
            )
        except S3Error as e:
            log.warning(
                "canonical_file_unavailable",
                bucket=self.settings.canonical_bucket,
                key=self.settings.canonical_key,
                error=str(e),
            )
            return None

    # --- Storage notification path ---

    def _handle_storage_notification(self, event: StorageNotification) -> WorkflowOutcome:
        bucket = event.decoded_bucket
        key = event.decoded_key

        log.info("storage_notification_received", bucket=bucket, key=key)

        raw_email = s3_tools.fetch_object(bucket, key, client=self._s3)
        parsed = parse_email(raw_email)

        if parsed.attachment is None:
            log.error(
                "missing_attachment",
                bucket=bucket,
                key=key,
                from_address=parsed.from_address,
                subject=parsed.subject,
            )
            if self.settings.notify_on_missing_attachment:
                self._notify_missing_attachment(parsed.subject)
            raise MissingAttachmentError(bucket=bucket, key=key)

        attachment = parsed.attachment
        entries, parse_errors = record_codec.decode(attachment.text)
        validation_errors = record_validator.validate(entries)

        log.info(
            "attachment_checked",
            filename=attachment.filename,
            record_count=len(entries),
            parse_error_count=len(parse_errors),
            validation_error_count=len(validation_errors),
        )

        if parse_errors or validation_errors:
            return self._report_errors(
                attachment.filename,
                attachment.content,
                len(entries),
                parse_errors,
                validation_errors,
            )

        return self._update_canonical(attachment.filename, entries)

    def _report_errors(
        self,
        filename: str,
        original: bytes,
        record_count: int,
        parse_errors: list[ParseError],
        validation_errors: list[ValidationError],
    ) -> WorkflowOutcome:
        body = render_error_report(parse_errors, validation_errors)
        message = self._message(
            f"Errors in file: {filename}",
            body,
            attachment=self._csv_attachment(original, filename),
        )
        message_id = self._send(message)

        log.warning(
            "errors_reported",
            filename=filename,
            parse_error_count=len(parse_errors),
            validation_error_count=len(validation_errors),
            message_id=message_id,
        )

        return WorkflowOutcome(
            action=WorkflowAction.ERRORS_REPORTED,
            message_id=message_id,
            filename=filename,
            record_count=record_count,
            parse_error_count=len(parse_errors),
            validation_error_count=len(validation_errors),
        )

    def _update_canonical(self, filename: str, entries: list) -> WorkflowOutcome:
        canonical = record_codec.encode(entries)

        s3_tools.put_object(
            self.settings.canonical_bucket,
            self.settings.canonical_key,
            canonical,
            content_type=self.settings.attachment_content_type,
            client=self._s3,
        )

        message = self._message(
            SUCCESS_SUBJECT,
            SUCCESS_BODY,
            attachment=self._csv_attachment(canonical, filename),
        )
        message_id = self._send(message)

        log.info(
            "canonical_updated",
            bucket=self.settings.canonical_bucket,
            key=self.settings.canonical_key,
            record_count=len(entries),
            message_id=message_id,
        )

        return WorkflowOutcome(
            action=WorkflowAction.CANONICAL_UPDATED,
            message_id=message_id,
            filename=filename,
            record_count=len(entries),
        )

    def _notify_missing_attachment(self, original_subject: str) -> None:
        body = (
            "Your email"
            + (f" \"{original_subject}\"" if original_subject else "")
            + " did not contain an attachment.\n"
            "Please reply with the schedule file attached."
        )
        try:
            self._send(self._message(MISSING_ATTACHMENT_SUBJECT, body))
        except SESError as e:
            log.error("missing_attachment_notice_failed", error=str(e))

    # --- Helpers ---

    @property
    def canonical_filename(self) -> str:
        return PurePosixPath(self.settings.canonical_key).name or self.settings.canonical_key

    def _csv_attachment(self, content: bytes, filename: str) -> Attachment:
        return Attachment(
            content=content,
            filename=filename,
            content_type=self.settings.attachment_content_type,
        )

    def _message(
        self,
        subject: str,
        body_text: str,
        *,
        attachment: Attachment | None = None,
    ) -> OutboundMessage:
        return OutboundMessage(
            recipient=self.settings.recipient,
            sender=self.settings.sender,
            subject=subject,
            body_text=body_text,
            attachment=attachment,
        )

    def _send(self, message: OutboundMessage) -> str:
        rendered = build_message(message)
        log.debug("raw_email", data=rendered.data.decode("utf-8", errors="replace"))
        return email_tools.send_raw_email(
            rendered,
            client=self._ses,
            configuration_set=self.settings.ses_configuration_set,
        )
