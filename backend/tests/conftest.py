"""Pytest fixtures: fake storage gateway, access config, credentials, test client."""
import asyncio
import base64
from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from object_access.core.config import AccessConfig
from object_access.core.deps import get_access_config, get_credential_verifier, get_gateway
from object_access.core.security import StaticCredentialStore
from object_access.main import app
from object_access.services.classifier import FailureReason
from object_access.services.storage.base import ExistenceResult, SignedAccessResult, StorageGateway

TEST_USERNAME = "tester"
TEST_PASSWORD = "s3cret:with-colon"


class FakeGateway(StorageGateway):
    """In-memory gateway: every key exists unless listed in `absent`; records every call."""

    def __init__(self) -> None:
        self.absent: dict[str, FailureReason] = {}
        self.sign_failures: dict[str, FailureReason] = {}
        self.delays: dict[str, float] = {}
        self.exists_calls: list[tuple[str, str]] = []
        self.sign_calls: list[tuple[str, str, timedelta]] = []
        self.completed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _work(self, key: str) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
        finally:
            self.in_flight -= 1

    async def check_exists(self, container: str, key: str) -> ExistenceResult:
        self.exists_calls.append((container, key))
        await self._work(key)
        self.completed.append(key)
        return ExistenceResult(key=key, reason=self.absent.get(key))

    async def issue_signed_access(self, container: str, key: str, ttl: timedelta) -> SignedAccessResult:
        self.sign_calls.append((container, key, ttl))
        await self._work(key)
        reason = self.sign_failures.get(key)
        if reason is not None:
            return SignedAccessResult(key=key, reason=reason)
        return SignedAccessResult(key=key, url=signed_url(container, key, ttl))


def signed_url(container: str, key: str, ttl: timedelta) -> str:
    return f"https://{container}.s3.example/{key}?X-Amz-Expires={int(ttl.total_seconds())}"


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def access_config() -> AccessConfig:
    return AccessConfig(max_batch_size=5, ttl=timedelta(minutes=15), region="us-east-1")


@pytest.fixture(scope="session")
def credentials() -> StaticCredentialStore:
    return StaticCredentialStore({TEST_USERNAME: TEST_PASSWORD})


def basic_auth(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return basic_auth(TEST_USERNAME, TEST_PASSWORD)


@pytest.fixture
async def client(gateway, access_config, credentials):
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_access_config] = lambda: access_config
    app.dependency_overrides[get_credential_verifier] = lambda: credentials
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
