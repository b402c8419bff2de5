"""Map backend error signals (S3 error codes, HTTP statuses) onto the user-facing failure taxonomy.

This is the only place that knows backend error names. Everything downstream
works with `FailureReason`.
"""
from enum import Enum

from botocore.exceptions import ClientError


class FailureReason(Enum):
    """Closed set of per-object failure reasons, each with a fixed status and message."""

    NOT_FOUND = (404, "Unfortunately, we couldn't find your object. please verify the key")
    FORBIDDEN = (
        403,
        "Hey, We don't have access to this bucket/object, ask your favorite Operation Team to give us access",
    )
    MOVED = (
        301,
        "Hey, The bucket you're looking for was moved to another region. please contact your favorite Operation Team",
    )
    MALFORMED = (
        400,
        "Hey, The bucket you're looking for doesn't exist. please contact your favorite Operation Team",
    )
    UNKNOWN = (500, "Unknown Error, contact your favorite Operation Team")

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message

    @property
    def is_fatal(self) -> bool:
        """True when the reason applies to the whole request (permissions, relocation, backend fault)."""
        return self in _FATAL

    @property
    def label(self) -> str:
        return self.name.lower()


_FATAL = frozenset({FailureReason.FORBIDDEN, FailureReason.MOVED, FailureReason.UNKNOWN})

_SIGNALS: dict[str, FailureReason] = {
    "404": FailureReason.NOT_FOUND,
    "NotFound": FailureReason.NOT_FOUND,
    "NoSuchKey": FailureReason.NOT_FOUND,
    "NoSuchBucket": FailureReason.NOT_FOUND,
    "403": FailureReason.FORBIDDEN,
    "Forbidden": FailureReason.FORBIDDEN,
    "AccessDenied": FailureReason.FORBIDDEN,
    "AllAccessDisabled": FailureReason.FORBIDDEN,
    "301": FailureReason.MOVED,
    "PermanentRedirect": FailureReason.MOVED,
    "Redirect": FailureReason.MOVED,
    "400": FailureReason.MALFORMED,
    "BadRequest": FailureReason.MALFORMED,
    "InvalidBucketName": FailureReason.MALFORMED,
}


def classify(signal: str | int | None) -> FailureReason:
    """Total mapping from a native error signal to a FailureReason; unrecognized -> UNKNOWN."""
    if signal is None:
        return FailureReason.UNKNOWN
    return _SIGNALS.get(str(signal).strip(), FailureReason.UNKNOWN)


def error_signal(exc: BaseException) -> str | None:
    """Native error code carried by a botocore ClientError (code first, then HTTP status)."""
    if not isinstance(exc, ClientError):
        return None
    resp = exc.response or {}
    code = (resp.get("Error") or {}).get("Code")
    if code and str(code) in _SIGNALS:
        return str(code)
    status = (resp.get("ResponseMetadata") or {}).get("HTTPStatusCode")
    if status is not None:
        return str(status)
    return str(code) if code else None


def classify_exception(exc: BaseException) -> FailureReason:
    """Classify any exception raised by a backend call; non-ClientError failures are UNKNOWN."""
    return classify(error_signal(exc))
