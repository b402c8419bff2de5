"""Pydantic request/response schemas for the object routes."""
from typing import Any

from pydantic import BaseModel, ConfigDict


class BatchAccessRequest(BaseModel):
    """POST body. `objects` is checked by the validator so missing/oversized lists get the API's own messages."""

    model_config = ConfigDict(extra="ignore")
    objects: Any = None


class ObjectUrlResponse(BaseModel):
    data: str


class BatchUrlResponse(BaseModel):
    # key -> signed URL, or the failure message for that key
    data: dict[str, str]


class ErrorResponse(BaseModel):
    message: str
