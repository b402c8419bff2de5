"""Basic-auth decoding, credential store, log redaction."""
import base64

import pytest

from object_access.core.logging_redaction import redact_for_log, redact_url
from object_access.core.security import StaticCredentialStore, decode_basic_authorization


def _basic(raw: str) -> str:
    return "Basic " + base64.b64encode(raw.encode()).decode()


def test_decode_basic_authorization():
    assert decode_basic_authorization(_basic("alice:pw")) == ("alice", "pw")


def test_decode_password_with_colon():
    assert decode_basic_authorization(_basic("alice:a:b:c")) == ("alice", "a:b:c")


@pytest.mark.parametrize(
    "header",
    [None, "", "Bearer abc", "Basic !!!not-base64", _basic("no-separator")],
)
def test_decode_rejects_malformed(header):
    with pytest.raises(ValueError):
        decode_basic_authorization(header)


def test_credential_store_verifies_configured_pair():
    store = StaticCredentialStore({"alice": "pw"})
    assert store.verify("alice", "pw") is True
    assert store.verify("alice", "wrong") is False
    assert store.verify("bob", "pw") is False
    assert store.verify("", "") is False


def test_credential_store_ignores_empty_configuration():
    store = StaticCredentialStore({"": ""})
    assert len(store) == 0
    assert store.verify("", "") is False


def test_redact_presigned_url():
    url = "https://b.s3.amazonaws.com/k?X-Amz-Credential=AKID%2F2024&X-Amz-Expires=900&X-Amz-Signature=deadbeef"
    out = redact_url(url)
    assert "deadbeef" not in out
    assert "AKID" not in out
    assert "X-Amz-Expires=900" in out


def test_redact_for_log_dict():
    out = redact_for_log({"authorization": "Basic abc", "path": "/b/k", "nested": ["Bearer x"]})
    assert out == {"authorization": "[REDACTED]", "path": "/b/k", "nested": ["[REDACTED]"]}
