"""Storage gateway factory. One S3 client per process, reused across requests."""
from functools import lru_cache

from object_access.core.config import get_settings
from object_access.services.storage.base import ExistenceResult, SignedAccessResult, StorageGateway

__all__ = ["ExistenceResult", "SignedAccessResult", "StorageGateway", "get_storage"]


@lru_cache
def get_storage() -> StorageGateway:
    """Return the process-wide gateway built from settings. Avoids importing boto3 until first use."""
    from object_access.services.storage.s3 import S3Gateway
    return S3Gateway(get_settings().access_config())
