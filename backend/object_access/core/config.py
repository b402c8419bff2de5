"""Application settings and the immutable access config threaded through the core."""
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


@dataclass(frozen=True)
class AccessConfig:
    """Values the validator, gateway and resolver need. Built once from Settings."""

    max_batch_size: int
    ttl: timedelta
    region: str
    endpoint_url: str | None = None
    allowed_buckets: frozenset[str] = frozenset()
    signing_failures_fatal: bool = False
    max_concurrency: int = 16
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 10.0


class Settings(BaseSettings):
    """App config from env."""

    app_name: str = "Object Access Gateway"
    debug: bool = False
    # Structured logging: set LOG_JSON=1 for one-JSON-object-per-line (CloudWatch, etc.)
    log_json: bool = False
    # If set, /metrics requires the X-Metrics-Secret header
    metrics_secret: str | None = None

    # Storage backend (S3 or an S3-compatible endpoint such as MinIO)
    aws_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    # Comma-separated bucket allowlist; empty means any bucket the role can reach
    allowed_buckets: str = ""
    # Network bounds for backend calls (not the signed URL lifetime)
    storage_connect_timeout_seconds: float = 5.0
    storage_read_timeout_seconds: float = 10.0
    storage_max_concurrency: int = 16

    # Signed URL lifetime in minutes
    cache_ttl_minutes: int = 15
    max_processed_objects: int = 50
    # Treat Forbidden/Moved/Unknown at signing time as batch-fatal (off: recorded per key)
    signing_failures_fatal: bool = False

    # Basic auth credential pair checked before any object route
    access_username: str = ""
    access_password: str = ""

    cors_origins: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("cache_ttl_minutes", "max_processed_objects", "storage_max_concurrency")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    def access_config(self) -> AccessConfig:
        buckets = frozenset(b.strip() for b in self.allowed_buckets.split(",") if b.strip())
        return AccessConfig(
            max_batch_size=self.max_processed_objects,
            ttl=timedelta(minutes=self.cache_ttl_minutes),
            region=self.aws_region,
            endpoint_url=self.s3_endpoint_url or None,
            allowed_buckets=buckets,
            signing_failures_fatal=self.signing_failures_fatal,
            max_concurrency=self.storage_max_concurrency,
            connect_timeout_seconds=self.storage_connect_timeout_seconds,
            read_timeout_seconds=self.storage_read_timeout_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
