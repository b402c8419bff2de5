"""FastAPI dependencies: credentials, storage gateway, access config, metrics guard."""
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request, status

from object_access.core.config import AccessConfig, get_settings
from object_access.core.security import CredentialVerifier, StaticCredentialStore, decode_basic_authorization
from object_access.services.resolver import BatchResolver
from object_access.services.storage import StorageGateway, get_storage

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Basic"}


@lru_cache
def _static_credentials() -> StaticCredentialStore:
    s = get_settings()
    return StaticCredentialStore({s.access_username: s.access_password})


def get_credential_verifier() -> CredentialVerifier:
    """Credential lookup used by require_credentials. Override to plug in another store."""
    return _static_credentials()


def get_access_config() -> AccessConfig:
    return get_settings().access_config()


def get_gateway() -> StorageGateway:
    return get_storage()


def get_resolver(
    gateway: StorageGateway = Depends(get_gateway),
    config: AccessConfig = Depends(get_access_config),
) -> BatchResolver:
    return BatchResolver(gateway, config)


def require_credentials(
    request: Request,
    authorization: str | None = Header(None),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> str:
    """Require a valid basic-auth pair; 401 otherwise. Returns the username."""
    try:
        username, password = decode_basic_authorization(authorization)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=_UNAUTHORIZED_HEADERS,
        )
    if not verifier.verify(username, password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers=_UNAUTHORIZED_HEADERS,
        )
    request.state.principal = username
    return username


def require_metrics_access(
    x_metrics_secret: str | None = Header(None, alias="X-Metrics-Secret"),
) -> None:
    """Allow /metrics if no secret is configured, or the X-Metrics-Secret header matches."""
    s = get_settings()
    if s.metrics_secret and x_metrics_secret != s.metrics_secret:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing X-Metrics-Secret",
        )
