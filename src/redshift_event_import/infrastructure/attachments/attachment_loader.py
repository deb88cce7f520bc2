"""Load transformation attachments from the local filesystem or S3."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from redshift_event_import.domain.errors import ImportConfigurationError

logger = logging.getLogger(__name__)


class AttachmentLoader:
    """Read an attachment's raw bytes from a path or an `s3://bucket/key` URI."""

    def __init__(self, region: str | None = None, s3_client: Any | None = None) -> None:
        self._region = region
        self._s3_client = s3_client

    def load(self, location: str | None) -> bytes | None:
        """Return the attachment contents, or None when no location is configured."""

        if location is None or not location.strip():
            return None

        normalized = location.strip()
        parsed = urlparse(normalized)
        if parsed.scheme.lower() == "s3":
            return self._load_from_s3(parsed.netloc, parsed.path.lstrip("/"))

        path = Path(normalized).expanduser()
        try:
            contents = path.read_bytes()
        except OSError as exc:
            raise ImportConfigurationError(f"Unable to read attachment {path}: {exc}") from exc
        logger.info("Loaded attachment %s (%s bytes).", path, len(contents))
        return contents

    def _load_from_s3(self, bucket: str, key: str) -> bytes:
        if not bucket or not key:
            raise ImportConfigurationError("S3 attachment URI must look like s3://bucket/key.")

        client = self._get_s3_client()
        try:
            response = client.get_object(Bucket=bucket, Key=key)
            contents = response["Body"].read()
        except Exception as exc:
            raise ImportConfigurationError(
                f"Unable to read attachment s3://{bucket}/{key}: {exc}"
            ) from exc
        logger.info("Loaded attachment s3://%s/%s (%s bytes).", bucket, key, len(contents))
        return bytes(contents)

    def _get_s3_client(self) -> Any:
        if self._s3_client is not None:
            return self._s3_client

        try:
            import boto3  # type: ignore[import-not-found]
        except ModuleNotFoundError as exc:
            raise RuntimeError(
                "boto3 is required for S3 attachments. Install project dependencies first."
            ) from exc

        self._s3_client = boto3.client("s3", region_name=self._region)
        return self._s3_client


__all__ = ["AttachmentLoader"]
