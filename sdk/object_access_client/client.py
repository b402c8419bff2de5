"""
Python client for the object access API: one signed URL, or a batch of them.
Authenticates with HTTP basic auth on every request.
"""
from urllib.parse import quote

import httpx


class ObjectAccessError(Exception):
    """Non-200 response from the API; carries the status and the API's message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ObjectAccessClient:
    """Client for signed object URLs."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._session = httpx.Client(
            base_url=self.base_url,
            auth=httpx.BasicAuth(username, password),
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "ObjectAccessClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @staticmethod
    def _data(r: httpx.Response):
        try:
            body = r.json()
        except ValueError:
            body = {}
        if r.status_code != 200:
            message = body.get("message") if isinstance(body, dict) else None
            raise ObjectAccessError(r.status_code, message or r.reason_phrase)
        return body["data"]

    def get_url(self, bucket: str, key: str) -> str:
        """Signed GET URL for one object. Raises ObjectAccessError (e.g. 404) on failure."""
        path = f"/{quote(bucket, safe='')}/{quote(key, safe='/')}"
        r = self._session.get(path)
        return self._data(r)

    def get_urls(self, bucket: str, keys: list[str]) -> dict[str, str]:
        """Signed URLs for many objects. Missing objects map to the API's per-key message."""
        r = self._session.post(f"/{quote(bucket, safe='')}", json={"objects": list(keys)})
        return self._data(r)
