"""
Pytest Configuration and Shared Fixtures

Provides moto AWS mocking, sample files and events, and test utilities.
"""

import os
from typing import Any
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["SCHEDULE_SYNC_RECIPIENT"] = "Schedule Owner <owner@example.com>"
os.environ["SCHEDULE_SYNC_SENDER"] = "Schedule Sync <noreply@example.com>"
os.environ["SCHEDULE_SYNC_CANONICAL_BUCKET"] = "test-schedule-output"
os.environ["SCHEDULE_SYNC_CANONICAL_KEY"] = "current.csv"
os.environ["SCHEDULE_SYNC_AWS_REGION"] = "us-east-1"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from schedule_sync.shared.config import Settings  # noqa: E402
from tests.utils.event_generator import MockEventGenerator  # noqa: E402
from tests.utils.mailbox import (  # noqa: E402
    CANONICAL_BUCKET,
    INBOUND_BUCKET,
    RECIPIENT,
    SENDER,
)


# --- Settings Fixtures ---


@pytest.fixture
def settings() -> Settings:
    """Settings matching the mocked AWS environment."""
    return Settings(
        recipient=RECIPIENT,
        sender=SENDER,
        canonical_bucket=CANONICAL_BUCKET,
        canonical_key="current.csv",
        aws_region="us-east-1",
        environment="development",
        log_level="DEBUG",
    )


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-east-1",
    }


@pytest.fixture
def mock_s3(aws_credentials):
    """Create mocked inbound and canonical buckets."""
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(Bucket=INBOUND_BUCKET)
        s3.create_bucket(Bucket=CANONICAL_BUCKET)
        yield s3


@pytest.fixture
def mock_ses(aws_credentials):
    """Create a mocked SES client with verified identity."""
    with mock_aws():
        ses = boto3.client("ses", **aws_credentials)
        ses.verify_email_identity(EmailAddress="noreply@example.com")
        yield ses


@pytest.fixture
def mock_aws_all(aws_credentials):
    """
    Mock all AWS services used by the application.

    Provides a complete mocked AWS environment.
    """
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(Bucket=INBOUND_BUCKET)
        s3.create_bucket(Bucket=CANONICAL_BUCKET)

        ses = boto3.client("ses", **aws_credentials)
        ses.verify_email_identity(EmailAddress="noreply@example.com")

        yield {
            "s3": s3,
            "ses": ses,
        }


@pytest.fixture
def ses_client() -> MagicMock:
    """SES client double that records every raw message."""
    client = MagicMock()
    client.send_raw_email.return_value = {"MessageId": "test-message-id"}
    return client


# --- Data Fixtures ---


@pytest.fixture
def generator() -> MockEventGenerator:
    """Seeded generator for reproducible data."""
    return MockEventGenerator(seed=42)


@pytest.fixture
def valid_csv() -> str:
    """Two well-formed, valid rows."""
    return (
        "id,start_date,end_date\n"
        "1,2020-01-01 00:00:00,2020-01-02 00:00:00\n"
        "2,2020-02-01 12:00:00,2020-02-01 12:00:00\n"
    )


@pytest.fixture
def invalid_csv() -> str:
    """One good row, one malformed id, one reversed window."""
    return (
        "id,start_date,end_date\n"
        "1,2020-01-01 00:00:00,2020-01-02 00:00:00\n"
        "x,2020-01-01 00:00:00,2020-01-02 00:00:00\n"
        "3,2020-03-02 00:00:00,2020-03-01 00:00:00\n"
    )


@pytest.fixture
def inbound_key() -> str:
    return "inbound/message-0001"


@pytest.fixture
def s3_event(inbound_key: str) -> dict[str, Any]:
    """Minimal S3 ObjectCreated notification."""
    return {
        "Records": [
            {
                "eventSource": "aws:s3",
                "eventName": "ObjectCreated:Put",
                "s3": {
                    "bucket": {"name": INBOUND_BUCKET},
                    "object": {"key": inbound_key},
                },
            }
        ]
    }


@pytest.fixture
def scheduled_event() -> dict[str, Any]:
    """Minimal EventBridge scheduled event."""
    return {
        "version": "0",
        "detail-type": "Scheduled Event",
        "source": "aws.events",
        "time": "2025-02-06T09:00:00Z",
        "resources": ["arn:aws:events:us-east-1:123456789012:rule/schedule-sync-reminder"],
        "detail": {},
    }


@pytest.fixture
def lambda_context() -> MagicMock:
    context = MagicMock()
    context.aws_request_id = "test-request-id"
    return context
