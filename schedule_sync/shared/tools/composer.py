"""
Notification Composer

Renders an OutboundMessage into a transport-ready MIME message for SES
SendRawEmail.

Layout:
    multipart/mixed
    ├── text/plain (quoted-printable)          # no HTML body
    │   or
    ├── multipart/alternative                  # with HTML body
    │   ├── text/plain (quoted-printable)
    │   └── text/html (8bit)
    └── <attachment content type> (base64)     # optional, disposition=attachment

Rendering is deterministic: no Date or Message-ID headers are written (SES
assigns them) and MIME boundaries are derived from the message content.
"""

import hashlib
from email.message import EmailMessage, Message, MIMEPart
from email.policy import SMTP

import structlog

from schedule_sync.shared.models.message import (
    Attachment,
    OutboundMessage,
    RenderedMessage,
    sanitize_filename,
    single_line,
)
from schedule_sync.shared.tools.email import validate_email_address

log = structlog.get_logger()

CHARSET = "utf-8"


def _boundary_seed(message: OutboundMessage) -> str:
    digest = hashlib.sha256()
    for value in (
        message.sender,
        message.recipient,
        message.subject,
        message.body_text,
        message.body_html or "",
    ):
        digest.update(value.encode(CHARSET, errors="surrogatepass"))
        digest.update(b"\x00")
    if message.attachment is not None:
        digest.update(message.attachment.filename.encode(CHARSET, errors="surrogatepass"))
        digest.update(message.attachment.content)
    return digest.hexdigest()[:32]


def _boundary(seed: str, label: str) -> str:
    # "=_" cannot start a line of quoted-printable or base64 output
    return f"=_{label}_{seed}"


def _text_part(text: str, subtype: str, cte: str) -> MIMEPart:
    part = MIMEPart(policy=SMTP)
    part.set_content(text, subtype=subtype, charset=CHARSET, cte=cte)
    return part


def _split_content_type(content_type: str) -> tuple[str, str, dict[str, str]]:
    """Split 'text/csv; charset=utf-8' into maintype, subtype and params."""
    header = Message()
    header["Content-Type"] = content_type
    params = {key: value for key, value in header.get_params()[1:]}
    return header.get_content_maintype(), header.get_content_subtype(), params


def _attachment_part(attachment: Attachment) -> MIMEPart:
    maintype, subtype, params = _split_content_type(attachment.content_type)
    part = MIMEPart(policy=SMTP)
    part.set_content(
        attachment.content,
        maintype=maintype,
        subtype=subtype,
        cte="base64",
        params=params,
    )
    filename = sanitize_filename(attachment.filename) or "attachment"
    part["Content-Disposition"] = f'attachment; filename="{filename}"'
    return part


def _body_part(message: OutboundMessage, seed: str) -> MIMEPart:
    plain = _text_part(message.body_text, "plain", "quoted-printable")
    if message.body_html is None:
        return plain

    alternative = MIMEPart(policy=SMTP)
    alternative.make_alternative(boundary=_boundary(seed, "alt"))
    alternative.attach(plain)
    alternative.attach(_text_part(message.body_html, "html", "8bit"))
    return alternative


def build_message(message: OutboundMessage) -> RenderedMessage:
    """
    Render a message to RFC 5322 bytes with its SES envelope.

    Args:
        message: Message to render

    Returns:
        RenderedMessage with the raw bytes, source, destinations and subject

    Raises:
        InvalidEmailFormatError: If sender or recipient is malformed
    """
    validate_email_address(message.sender)
    validate_email_address(message.recipient)

    seed = _boundary_seed(message)

    msg = EmailMessage(policy=SMTP)
    msg["From"] = message.sender
    msg["To"] = message.recipient
    msg["Subject"] = single_line(message.subject)
    msg["MIME-Version"] = "1.0"
    msg.make_mixed(boundary=_boundary(seed, "mixed"))

    msg.attach(_body_part(message, seed))
    if message.attachment is not None:
        msg.attach(_attachment_part(message.attachment))

    data = msg.as_bytes()

    log.debug(
        "message_rendered",
        subject=message.subject,
        has_html=message.body_html is not None,
        has_attachment=message.attachment is not None,
        size_bytes=len(data),
    )

    return RenderedMessage(
        data=data,
        source=message.sender,
        destinations=[message.recipient],
        subject=single_line(message.subject),
    )
