"""Turn resolver outcomes into wire responses: {data: ...} on success, {message: ...} on failure."""
from fastapi.responses import JSONResponse

from object_access.api.schemas import BatchUrlResponse, ErrorResponse, ObjectUrlResponse
from object_access.services.classifier import FailureReason
from object_access.services.resolver import BatchOutcome, SingleOutcome


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


def failure_response(reason: FailureReason) -> JSONResponse:
    return error_response(reason.status_code, reason.message)


def batch_response(outcome: BatchOutcome) -> JSONResponse:
    if outcome.failure is not None:
        return failure_response(outcome.failure)
    data = {
        key: value.message if isinstance(value, FailureReason) else value
        for key, value in outcome.results.items()
    }
    return JSONResponse(status_code=200, content=BatchUrlResponse(data=data).model_dump())


def single_response(outcome: SingleOutcome) -> JSONResponse:
    if outcome.failure is not None or outcome.url is None:
        return failure_response(outcome.failure or FailureReason.UNKNOWN)
    return JSONResponse(status_code=200, content=ObjectUrlResponse(data=outcome.url).model_dump())
