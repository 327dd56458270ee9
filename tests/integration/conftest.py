"""
Integration test fixtures and configuration.

Integration tests run the whole workflow against moto-mocked S3 and SES.
"""

import os
from unittest.mock import MagicMock

import pytest

from lambdas.process_schedule_email.dispatcher import WorkflowDispatcher

# Set integration test environment
os.environ["INTEGRATION_TEST"] = "true"


@pytest.fixture
def ses_spy(mock_aws_all) -> MagicMock:
    """Real moto SES client wrapped so sent messages can be inspected."""
    return MagicMock(wraps=mock_aws_all["ses"])


@pytest.fixture
def workflow(settings, mock_aws_all, ses_spy) -> WorkflowDispatcher:
    """Dispatcher wired to the mocked AWS environment."""
    return WorkflowDispatcher(
        settings,
        s3_client=mock_aws_all["s3"],
        ses_client=ses_spy,
    )
