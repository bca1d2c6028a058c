"""
relpub — Object store client.

Aliyun OSS is reached through its S3-compatible API with boto3:
virtual-hosted bucket addressing against https?://oss-<region>.aliyuncs.com
(or an explicit endpoint). Uploads are single PUTs; botocore's own retries
are switched off so a failed transfer is reported once and left to the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from relpub.core.config import StoreConfig
from relpub.errors import UploadError
from relpub.utils.logging import logger

CONNECT_TIMEOUT = 30


class ObjectStoreClient(Protocol):
    def put(self, key: str, local_path: Path) -> None:
        """Store local_path under key. Raises on any failure."""


class OSSClient:
    """Thin wrapper around a boto3 S3 client bound to one bucket."""

    def __init__(self, bucket: str, s3: Any):
        self.bucket = bucket
        self.s3 = s3

    @classmethod
    def from_config(cls, config: StoreConfig) -> OSSClient:
        s3 = boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            region_name=config.region_id,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.access_key_secret,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "virtual"},
                connect_timeout=CONNECT_TIMEOUT,
                read_timeout=config.timeout,
                retries={"total_max_attempts": 1, "mode": "standard"},
            ),
        )
        logger.debug("OSS client → %s (bucket=%s)", config.endpoint_url, config.bucket)
        return cls(bucket=config.bucket, s3=s3)

    def put(self, key: str, local_path: Path) -> None:
        try:
            with open(local_path, "rb") as fh:
                self.s3.put_object(Bucket=self.bucket, Key=key, Body=fh)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            reason = f"{error.get('Code', 'ClientError')}: {error.get('Message', str(exc))}"
            raise UploadError(key, reason) from exc
        except (BotoCoreError, OSError) as exc:
            raise UploadError(key, str(exc)) from exc
