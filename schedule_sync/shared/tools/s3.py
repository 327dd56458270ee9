"""
S3 Tools

Object Store access for the schedule sync workflow: read inbound emails and
the canonical schedule, overwrite the canonical schedule.
"""

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from schedule_sync.shared.config import Settings, get_settings
from schedule_sync.shared.exceptions import ObjectNotFoundError, S3Error

log = structlog.get_logger()

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "404"})


def get_client(settings: Settings | None = None):
    """Get S3 client."""
    settings = settings or get_settings()
    return boto3.client("s3", **settings.s3_config)


def fetch_object(bucket: str, key: str, *, client=None) -> bytes:
    """
    Download an object from S3.

    Args:
        bucket: Bucket name (already percent-decoded)
        key: Object key (already percent-decoded)
        client: Optional S3 client (default: built from settings)

    Returns:
        Object content as bytes

    Raises:
        ObjectNotFoundError: If the bucket or key does not exist
        S3Error: If the download fails for any other reason
    """
    client = client or get_client()

    log.info(
        "fetching_object",
        bucket=bucket,
        key=key,
    )

    try:
        response = client.get_object(Bucket=bucket, Key=key)
        content = response["Body"].read()
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "")

        if error_code in NOT_FOUND_CODES:
            log.warning("object_not_found", bucket=bucket, key=key, error_code=error_code)
            raise ObjectNotFoundError(
                bucket=bucket,
                key=key,
                error_message=str(e),
            ) from e

        log.error("s3_download_failed", bucket=bucket, key=key, error=str(e))
        raise S3Error(
            operation="download",
            bucket=bucket,
            key=key,
            error_message=str(e),
        ) from e
    except BotoCoreError as e:
        log.error("s3_download_failed", bucket=bucket, key=key, error=str(e))
        raise S3Error(
            operation="download",
            bucket=bucket,
            key=key,
            error_message=str(e),
        ) from e

    log.debug(
        "object_fetched",
        bucket=bucket,
        key=key,
        size_bytes=len(content),
    )

    return content


def put_object(
    bucket: str,
    key: str,
    body: bytes,
    *,
    content_type: str = "application/octet-stream",
    client=None,
) -> None:
    """
    Upload (overwrite) an object in S3.

    No versioning or conditional-write semantics are used.

    Raises:
        ValueError: If bucket or key is empty
        S3Error: If the upload fails
    """
    if not bucket:
        raise ValueError("S3 bucket name cannot be empty")
    if not key:
        raise ValueError("S3 object key cannot be empty")

    client = client or get_client()

    log.info(
        "uploading_object",
        bucket=bucket,
        key=key,
        content_type=content_type,
        size_bytes=len(body),
    )

    try:
        client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
    except (ClientError, BotoCoreError) as e:
        log.error(
            "s3_upload_failed",
            bucket=bucket,
            key=key,
            error=str(e),
        )
        raise S3Error(
            operation="upload",
            bucket=bucket,
            key=key,
            error_message=str(e),
        ) from e

    log.info(
        "object_uploaded",
        bucket=bucket,
        key=key,
    )
