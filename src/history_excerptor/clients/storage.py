"""S3-compatible (Ceph) object storage."""

from __future__ import annotations

from typing import Protocol

import boto3
import structlog
from botocore.config import Config

logger = structlog.get_logger(__name__)


class ObjectStorage(Protocol):
    """Minimal interface the signature gateway needs."""

    def put_content(self, bucket: str, key: str, content: str) -> None:
        """Store text content under bucket/key."""
        raise NotImplementedError


class S3ObjectStorage:
    """
    Object storage over boto3.

    Works with Ceph RGW, MinIO and AWS S3. Pass `client` to inject a
    pre-built (or stubbed) boto3 S3 client.
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        region: str = "us-east-1",
        access_key: str | None = None,
        secret_key: str | None = None,
        client=None,
    ) -> None:
        if client is None:
            client_kwargs = {
                "service_name": "s3",
                "region_name": region,
                "config": Config(signature_version="s3v4"),
            }
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            if access_key and secret_key:
                client_kwargs["aws_access_key_id"] = access_key
                client_kwargs["aws_secret_access_key"] = secret_key
            client = boto3.client(**client_kwargs)
        self.client = client

    def put_content(self, bucket: str, key: str, content: str) -> None:
        body = content.encode("utf-8")
        self.client.put_object(Bucket=bucket, Key=key, Body=body, ContentType="application/json")
        logger.debug("object_stored", bucket=bucket, key=key, size=len(body))
