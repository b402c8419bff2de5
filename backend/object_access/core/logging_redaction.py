"""Redact sensitive data from structured logs. Never log credentials or presigned URL signatures."""
import re
from typing import Any

# Keys (case-insensitive) that must be redacted in dicts
REDACT_KEYS = frozenset({
    "password", "secret", "authorization", "cookie", "token", "api_key",
})

# Query parameters of a SigV4 presigned URL that grant access
_SIGNED_QUERY_RE = re.compile(
    r"(X-Amz-(?:Signature|Credential|Security-Token)=)[^&\s]+",
    re.IGNORECASE,
)


def _redact_key(key: str) -> bool:
    k = key.lower()
    return any(r in k for r in REDACT_KEYS)


def redact_url(url: str) -> str:
    """Strip signature material from a presigned URL, keeping host and path readable."""
    return _SIGNED_QUERY_RE.sub(r"\1[REDACTED]", url)


def redact_for_log(obj: Any) -> Any:
    """Return a copy of obj safe for logging: sensitive keys replaced with '[REDACTED]'."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if isinstance(k, str) and _redact_key(k) else redact_for_log(v)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return type(obj)(redact_for_log(x) for x in obj)
    if isinstance(obj, str):
        if _looks_like_secret(obj):
            return "[REDACTED]"
        return redact_url(obj)
    return obj


def _looks_like_secret(s: str) -> bool:
    """Heuristic: basic/bearer authorization values."""
    low = s.lower()
    return low.startswith("basic ") or low.startswith("bearer ")
