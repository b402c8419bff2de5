"""S3 storage gateway: HeadObject for existence, presigned GET via boto3.

boto3 is synchronous; each call runs in a worker thread so a batch can fan out
on the event loop. The client is shared across requests and tasks.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from object_access.core.config import AccessConfig
from object_access.core.logging_redaction import redact_url
from object_access.core.metrics import record_existence_check, record_signed_url
from object_access.services.classifier import FailureReason, classify_exception, error_signal
from object_access.services.storage.base import ExistenceResult, SignedAccessResult, StorageGateway

logger = logging.getLogger(__name__)


def _get_client(config: AccessConfig):
    boto_config = Config(
        signature_version="s3v4",
        connect_timeout=config.connect_timeout_seconds,
        read_timeout=config.read_timeout_seconds,
        retries={"max_attempts": 1, "mode": "standard"},
        max_pool_connections=max(config.max_concurrency, 10),
    )
    return boto3.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.endpoint_url,
        config=boto_config,
    )


class S3Gateway(StorageGateway):
    """S3 backend: HeadObject probe and presigned get_object URLs."""

    def __init__(self, config: AccessConfig) -> None:
        self._config = config
        self._client = _get_client(config)

    async def check_exists(self, container: str, key: str) -> ExistenceResult:
        logger.debug("head_object bucket=%s key=%s", container, key)
        try:
            await asyncio.to_thread(self._client.head_object, Bucket=container, Key=key)
        except (ClientError, BotoCoreError) as e:
            reason = classify_exception(e)
            logger.warning(
                "head_object failed bucket=%s key=%s code=%s reason=%s",
                container, key, error_signal(e) or type(e).__name__, reason.label,
            )
            record_existence_check(reason.label)
            return ExistenceResult(key=key, reason=reason)
        except Exception:
            logger.exception("head_object raised unexpectedly bucket=%s key=%s", container, key)
            record_existence_check(FailureReason.UNKNOWN.label)
            return ExistenceResult(key=key, reason=FailureReason.UNKNOWN)
        record_existence_check("present")
        return ExistenceResult(key=key)

    async def issue_signed_access(self, container: str, key: str, ttl: timedelta) -> SignedAccessResult:
        try:
            url = await asyncio.to_thread(
                self._client.generate_presigned_url,
                "get_object",
                Params={"Bucket": container, "Key": key},
                ExpiresIn=int(ttl.total_seconds()),
            )
        except (ClientError, BotoCoreError) as e:
            reason = classify_exception(e)
            logger.warning(
                "presign failed bucket=%s key=%s code=%s reason=%s",
                container, key, error_signal(e) or type(e).__name__, reason.label,
            )
            record_signed_url(False)
            return SignedAccessResult(key=key, reason=reason)
        except Exception:
            logger.exception("presign raised unexpectedly bucket=%s key=%s", container, key)
            record_signed_url(False)
            return SignedAccessResult(key=key, reason=FailureReason.UNKNOWN)
        logger.debug("presigned bucket=%s key=%s url=%s", container, key, redact_url(url))
        record_signed_url(True)
        return SignedAccessResult(key=key, url=url)
