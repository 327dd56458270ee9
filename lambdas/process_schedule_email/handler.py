"""
ProcessScheduleEmail Lambda Handler

Main entry point for the schedule sync workflow.

Triggers:
    - S3 ObjectCreated notification for an email stored by an SES receipt rule
    - EventBridge scheduled rule for the periodic reminder

Output: SES raw emails to the schedule owner, and the canonical CSV in S3.
"""

import json
import logging
from typing import Any

import pydantic
import structlog

from lambdas.process_schedule_email.dispatcher import WorkflowDispatcher
from schedule_sync.shared.config import get_settings
from schedule_sync.shared.exceptions import UnrecognizedEventError
from schedule_sync.shared.models.events import parse_lambda_event

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


def _configure_log_level(level: str) -> None:
    # Lambda installs its own handler on the root logger
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(message)s")
    root.setLevel(level)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda handler for the schedule sync workflow.

    Args:
        event: S3 notification or scheduled event
        context: Lambda context

    Returns:
        Response dict with the workflow outcome

    Raises:
        ScheduleSyncError: Any fatal workflow failure, so the invocation
            is reported as failed
    """
    settings = get_settings()
    _configure_log_level(settings.log_level)

    request_id = getattr(context, "aws_request_id", "local")

    log.info(
        "processing_schedule_event",
        request_id=request_id,
        event_keys=sorted(event.keys()),
    )

    try:
        workflow_event = parse_lambda_event(event)
    except (UnrecognizedEventError, pydantic.ValidationError) as e:
        log.error("unknown_event_format", request_id=request_id, error=str(e))
        return {
            "statusCode": 400,
            "body": json.dumps({"error": "Unknown event format"}),
        }

    try:
        outcome = WorkflowDispatcher(settings).dispatch(workflow_event)
    except Exception as e:
        log.error(
            "lambda_handler_failed",
            request_id=request_id,
            event_kind=workflow_event.kind,
            error=str(e),
            exc_info=True,
        )
        raise

    log.info(
        "schedule_event_processed",
        request_id=request_id,
        **outcome.to_dict(),
    )

    return {
        "statusCode": 200,
        "body": json.dumps(outcome.to_dict()),
    }
