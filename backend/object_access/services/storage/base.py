"""Storage gateway interface: existence probe and signed GET URL. Both return tagged results, never raise."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta

from object_access.services.classifier import FailureReason


@dataclass(frozen=True)
class ExistenceResult:
    key: str
    reason: FailureReason | None = None

    @property
    def present(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class SignedAccessResult:
    key: str
    url: str | None = None
    reason: FailureReason | None = None

    @property
    def ok(self) -> bool:
        return self.url is not None and self.reason is None


class StorageGateway(ABC):
    """Abstract object store access. Implementations must be safe to call concurrently for many keys."""

    @abstractmethod
    async def check_exists(self, container: str, key: str) -> ExistenceResult:
        """Metadata-only probe. Failures are classified into the result's reason."""
        ...

    @abstractmethod
    async def issue_signed_access(self, container: str, key: str, ttl: timedelta) -> SignedAccessResult:
        """Return a GET URL valid for ttl. Failures are classified into the result's reason."""
        ...
