"""S3 gateway: error classification and presigning with a mocked boto3 client (no real AWS)."""
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError

from object_access.core.config import AccessConfig
from object_access.services.classifier import FailureReason
from object_access.services.storage import get_storage
from object_access.services.storage.s3 import S3Gateway, _get_client

CONFIG = AccessConfig(
    max_batch_size=10,
    ttl=timedelta(minutes=15),
    region="eu-west-1",
    connect_timeout_seconds=2.0,
    read_timeout_seconds=3.0,
)


def _client_error(code: str, status: int, op: str = "HeadObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "x"}, "ResponseMetadata": {"HTTPStatusCode": status}}, op)


@pytest.fixture
def s3_client():
    with patch("object_access.services.storage.s3._get_client") as m_get_client:
        client = MagicMock()
        m_get_client.return_value = client
        yield client


@pytest.mark.asyncio
async def test_head_object_present(s3_client):
    s3_client.head_object.return_value = {"ContentLength": 3}
    result = await S3Gateway(CONFIG).check_exists("photos", "a.png")
    assert result.present
    assert result.key == "a.png"
    s3_client.head_object.assert_called_once_with(Bucket="photos", Key="a.png")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (_client_error("404", 404), FailureReason.NOT_FOUND),
        (_client_error("403", 403), FailureReason.FORBIDDEN),
        (_client_error("301", 301), FailureReason.MOVED),
        (_client_error("400", 400), FailureReason.MALFORMED),
        (_client_error("500", 500), FailureReason.UNKNOWN),
        (EndpointConnectionError(endpoint_url="https://s3.eu-west-1.amazonaws.com"), FailureReason.UNKNOWN),
    ],
)
async def test_head_object_failures_classified(s3_client, error, expected):
    s3_client.head_object.side_effect = error
    result = await S3Gateway(CONFIG).check_exists("photos", "a.png")
    assert not result.present
    assert result.reason is expected


@pytest.mark.asyncio
async def test_presign_uses_ttl_seconds(s3_client):
    s3_client.generate_presigned_url.return_value = "https://photos.s3/a.png?X-Amz-Signature=abc"
    result = await S3Gateway(CONFIG).issue_signed_access("photos", "a.png", timedelta(minutes=15))
    assert result.ok
    assert result.url == "https://photos.s3/a.png?X-Amz-Signature=abc"
    s3_client.generate_presigned_url.assert_called_once_with(
        "get_object",
        Params={"Bucket": "photos", "Key": "a.png"},
        ExpiresIn=900,
    )


@pytest.mark.asyncio
async def test_presign_failure_returned_not_raised(s3_client):
    s3_client.generate_presigned_url.side_effect = NoCredentialsError()
    result = await S3Gateway(CONFIG).issue_signed_access("photos", "a.png", timedelta(minutes=1))
    assert not result.ok
    assert result.url is None
    assert result.reason is FailureReason.UNKNOWN


@pytest.mark.asyncio
async def test_unexpected_errors_become_unknown(s3_client):
    s3_client.head_object.side_effect = RuntimeError("boom")
    s3_client.generate_presigned_url.side_effect = KeyError("Bucket")
    gateway = S3Gateway(CONFIG)
    check = await gateway.check_exists("photos", "a.png")
    signed = await gateway.issue_signed_access("photos", "a.png", timedelta(minutes=1))
    assert check.reason is FailureReason.UNKNOWN
    assert signed.reason is FailureReason.UNKNOWN
    assert signed.url is None


def test_client_config_bounds_network_calls():
    client = _get_client(CONFIG)
    assert client.meta.region_name == "eu-west-1"
    assert client.meta.config.connect_timeout == 2.0
    assert client.meta.config.read_timeout == 3.0
    assert client.meta.config.signature_version == "s3v4"
    assert client.meta.config.retries["max_attempts"] == 1


@pytest.mark.asyncio
async def test_real_presign_offline(monkeypatch):
    """Presigning is local computation; a real boto3 client works with dummy credentials."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIDEXAMPLE")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY")
    monkeypatch.delenv("AWS_SESSION_TOKEN", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    result = await S3Gateway(CONFIG).issue_signed_access("photos", "dir/a b.png", timedelta(minutes=15))
    assert result.ok
    assert "X-Amz-Expires=900" in result.url
    assert "X-Amz-Signature=" in result.url
    assert "photos" in result.url


def test_get_storage_is_process_wide():
    get_storage.cache_clear()
    try:
        with patch("object_access.services.storage.s3._get_client") as m_get_client:
            m_get_client.return_value = MagicMock()
            first = get_storage()
            second = get_storage()
        assert first is second
        assert isinstance(first, S3Gateway)
        m_get_client.assert_called_once()
    finally:
        get_storage.cache_clear()
