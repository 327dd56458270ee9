"""
Email Tools

SES transport for rendered messages and address validation used by the
composer.
"""

from email.utils import parseaddr

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError
from email_validator import EmailNotValidError, validate_email

from schedule_sync.shared.config import Settings, get_settings
from schedule_sync.shared.exceptions import InvalidEmailFormatError, SESError
from schedule_sync.shared.models.message import RenderedMessage, is_single_line

log = structlog.get_logger()


def get_client(settings: Settings | None = None):
    """Get SES client."""
    settings = settings or get_settings()
    return boto3.client("ses", **settings.ses_config)


def validate_email_address(email: str) -> str:
    """
    Validate a mailbox string such as "Name <user@example.com>".

    Uses email-validator library for RFC compliance (no deliverability check).

    Args:
        email: Mailbox or bare address

    Returns:
        The bare address part

    Raises:
        InvalidEmailFormatError: If invalid
    """
    _, address = parseaddr(email)
    if not address or "@" not in address or not is_single_line(email):
        raise InvalidEmailFormatError(
            email_address=email,
            expected_pattern="Display Name <local@domain>",
        )

    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidEmailFormatError(
            email_address=email,
            expected_pattern="RFC 5321",
        ) from e

    return address


def send_raw_email(
    message: RenderedMessage,
    *,
    client=None,
    configuration_set: str | None = None,
) -> str:
    """
    Send a fully rendered MIME message via SES.

    Single attempt: failures are raised, never retried here.

    Args:
        message: Rendered message with its envelope
        client: Optional SES client (default: built from settings)
        configuration_set: Optional SES configuration set

    Returns:
        SES message ID

    Raises:
        SESError: If send fails
    """
    client = client or get_client()
    recipient = ", ".join(message.destinations)

    send_params = {
        "Source": message.source,
        "Destinations": list(message.destinations),
        "RawMessage": {"Data": message.data},
    }

    if configuration_set:
        send_params["ConfigurationSetName"] = configuration_set

    log.info(
        "sending_raw_email",
        to=recipient,
        subject=message.subject[:50],
        size_bytes=len(message.data),
    )

    try:
        response = client.send_raw_email(**send_params)
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        error_message = e.response["Error"]["Message"]

        log.error(
            "ses_send_failed",
            to=recipient,
            error_code=error_code,
            error_message=error_message,
        )

        raise SESError(
            operation="send_raw",
            recipient=recipient,
            error_message=f"{error_code}: {error_message}",
        ) from e
    except BotoCoreError as e:
        log.error("ses_send_failed", to=recipient, error=str(e))
        raise SESError(
            operation="send_raw",
            recipient=recipient,
            error_message=str(e),
        ) from e

    message_id = response["MessageId"]

    log.info(
        "ses_email_sent",
        message_id=message_id,
        to=recipient,
    )

    return message_id
