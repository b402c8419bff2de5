"""Request validation: required fields, batch ceiling, bucket allowlist, key decoding."""
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from object_access.core.config import AccessConfig
from object_access.services.classifier import FailureReason

BUCKET_REQUIRED = "Hey Buddy, we need the bucket name"
KEY_REQUIRED = "Hey Buddy, we need the object key"
OBJECTS_REQUIRED = "Hey Buddy, we need some objects to process. we couldn't find them in the body of your request"


class RequestValidationFailure(Exception):
    """Request rejected before any backend call."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class AccessRequest:
    """Keys as the caller sent them, plus the decoded storage key for each."""

    container: str
    keys: tuple[str, ...]
    ttl: timedelta
    storage_keys: Mapping[str, str] = field(default_factory=dict)

    def storage_key(self, key: str) -> str:
        return self.storage_keys.get(key, key)


def decode_object_key(value: str | None) -> str:
    """Turn transport-encoded spaces (%20 and +) back into literal spaces. Idempotent."""
    if not value:
        return ""
    return value.replace("%20", " ").replace("+", " ")


def batch_too_large_message(max_batch_size: int) -> str:
    return f"Sorry, but we can only process {max_batch_size} objects at a time"


def _require_container(bucket_name: str | None, config: AccessConfig) -> str:
    if not bucket_name or not bucket_name.strip():
        raise RequestValidationFailure(400, BUCKET_REQUIRED)
    if config.allowed_buckets and bucket_name not in config.allowed_buckets:
        reason = FailureReason.FORBIDDEN
        raise RequestValidationFailure(reason.status_code, reason.message)
    return bucket_name


def validate_single(bucket_name: str | None, object_key: str | None, config: AccessConfig) -> AccessRequest:
    container = _require_container(bucket_name, config)
    if not object_key:
        raise RequestValidationFailure(400, KEY_REQUIRED)
    return AccessRequest(
        container=container,
        keys=(object_key,),
        ttl=config.ttl,
        storage_keys={object_key: decode_object_key(object_key)},
    )


def validate_batch(bucket_name: str | None, objects: Any, config: AccessConfig) -> AccessRequest:
    """Validate a batch. `objects` is the raw `objects` field of the request body."""
    container = _require_container(bucket_name, config)
    if not objects or not isinstance(objects, list):
        raise RequestValidationFailure(400, OBJECTS_REQUIRED)
    if len(objects) > config.max_batch_size:
        raise RequestValidationFailure(400, batch_too_large_message(config.max_batch_size))
    if not all(isinstance(o, str) and o for o in objects):
        raise RequestValidationFailure(400, OBJECTS_REQUIRED)
    # Results are keyed by the key as sent; only exact repeats collapse
    storage_keys = {o: decode_object_key(o) for o in objects}
    return AccessRequest(container=container, keys=tuple(storage_keys), ttl=config.ttl, storage_keys=storage_keys)
