"""
Email Parser Module

Parses a raw inbound email (as stored in S3 by the SES receipt rule) and
locates the schedule attachment.
"""

import email
from dataclasses import dataclass
from email.message import EmailMessage
from email.policy import default as default_policy

import structlog

from schedule_sync.shared.models.message import sanitize_filename

log = structlog.get_logger()

DEFAULT_ATTACHMENT_NAME = "attachment.csv"


@dataclass(frozen=True)
class AttachmentData:
    """Raw attachment data from email parse."""

    filename: str
    content: bytes
    content_type: str
    charset: str | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def text(self) -> str:
        """Attachment payload decoded with its declared charset (UTF-8 default)."""
        charset = self.charset or "utf-8"
        try:
            return self.content.decode(charset, errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


@dataclass
class EmailParseResult:
    """Result of parsing an inbound email."""

    from_address: str
    subject: str
    message_id: str
    attachment: AttachmentData | None = None
    attachment_count: int = 0


def _attachment_parts(msg: EmailMessage) -> list[EmailMessage]:
    """Every part, at any depth, whose disposition is 'attachment'."""
    return [
        part
        for part in msg.walk()
        if part.get_content_disposition() == "attachment"
    ]


def _to_attachment_data(part: EmailMessage) -> AttachmentData:
    # The name is echoed into outbound Subject and Content-Disposition headers
    filename = sanitize_filename(part.get_filename() or "")
    if not filename:
        log.warning(
            "attachment_without_filename",
            content_type=part.get_content_type(),
            fallback=DEFAULT_ATTACHMENT_NAME,
        )
        filename = DEFAULT_ATTACHMENT_NAME

    return AttachmentData(
        filename=filename,
        content=part.get_payload(decode=True) or b"",
        content_type=part.get_content_type(),
        charset=part.get_content_charset(),
    )


def parse_email(raw_email: str | bytes) -> EmailParseResult:
    """
    Parse raw email content (MIME format) and pick its first attachment.

    Args:
        raw_email: Raw email content as string or bytes

    Returns:
        EmailParseResult; attachment is None when the email has none
    """
    raw_bytes = raw_email.encode("utf-8") if isinstance(raw_email, str) else raw_email
    msg = email.message_from_bytes(raw_bytes, policy=default_policy)

    parts = _attachment_parts(msg)
    if len(parts) > 1:
        log.warning(
            "multiple_attachments_using_first",
            attachment_count=len(parts),
            filenames=[part.get_filename() for part in parts],
        )

    attachment = _to_attachment_data(parts[0]) if parts else None

    result = EmailParseResult(
        from_address=str(msg.get("From", "") or ""),
        subject=str(msg.get("Subject", "") or ""),
        message_id=str(msg.get("Message-ID", "") or ""),
        attachment=attachment,
        attachment_count=len(parts),
    )

    log.debug(
        "email_parsed",
        from_address=result.from_address,
        subject=result.subject,
        attachment_count=result.attachment_count,
        attachment_filename=attachment.filename if attachment else None,
    )

    return result
