"""Basic-auth decoding and credential verification (argon2 hashes, never plaintext at rest)."""
import base64
import binascii
from typing import Protocol

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_ph = PasswordHasher()


def hash_password(plain: str) -> str:
    return _ph.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        _ph.verify(hashed, plain)
        return True
    except (VerificationError, InvalidHashError):
        return False


def decode_basic_authorization(authorization: str | None) -> tuple[str, str]:
    """Split a `Basic <base64(user:pass)>` header into (username, password). Raise ValueError if malformed."""
    if not authorization or not authorization.startswith("Basic "):
        raise ValueError("Invalid authorization header")
    encoded = authorization[len("Basic "):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError("Invalid authorization header") from e
    username, sep, password = decoded.partition(":")
    if not sep:
        raise ValueError("Invalid authorization header")
    return username, password


class CredentialVerifier(Protocol):
    """Anything that can answer allow/deny for a username/password pair."""

    def verify(self, username: str, password: str) -> bool:
        ...


class StaticCredentialStore:
    """In-memory credential store; keeps argon2 hashes of the configured pairs."""

    def __init__(self, credentials: dict[str, str] | None = None) -> None:
        self._hashes: dict[str, str] = {}
        for username, password in (credentials or {}).items():
            self.add(username, password)

    def add(self, username: str, password: str) -> None:
        if not username or not password:
            return
        self._hashes[username] = hash_password(password)

    def verify(self, username: str, password: str) -> bool:
        if not username or not password:
            return False
        hashed = self._hashes.get(username)
        if hashed is None:
            return False
        return verify_password(password, hashed)

    def __len__(self) -> int:
        return len(self._hashes)
