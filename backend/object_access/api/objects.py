"""Object routes: GET one signed URL, POST a batch. Credential-gated."""
from fastapi import APIRouter, Depends

from object_access.api.responses import batch_response, error_response, single_response
from object_access.api.schemas import BatchAccessRequest, BatchUrlResponse, ErrorResponse, ObjectUrlResponse
from object_access.core.config import AccessConfig
from object_access.core.deps import get_access_config, get_resolver, require_credentials
from object_access.services.resolver import BatchResolver
from object_access.services.validation import RequestValidationFailure, validate_batch, validate_single

router = APIRouter(tags=["objects"], dependencies=[Depends(require_credentials)])

METHOD_NOT_SUPPORTED = "Bad Request, we only accept GET or POST request"

_ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (301, 400, 401, 403, 404, 500)
}


@router.get("/{bucket_name}/{object_key:path}", response_model=ObjectUrlResponse, responses=_ERROR_RESPONSES)
async def get_object_url(
    bucket_name: str,
    object_key: str,
    resolver: BatchResolver = Depends(get_resolver),
    config: AccessConfig = Depends(get_access_config),
):
    try:
        access = validate_single(bucket_name, object_key, config)
    except RequestValidationFailure as e:
        return error_response(e.status_code, e.message)
    outcome = await resolver.resolve_one(access)
    return single_response(outcome)


@router.get("/{bucket_name}", response_model=ObjectUrlResponse, responses=_ERROR_RESPONSES, include_in_schema=False)
async def get_object_url_without_key(
    bucket_name: str,
    resolver: BatchResolver = Depends(get_resolver),
    config: AccessConfig = Depends(get_access_config),
):
    return await get_object_url(bucket_name, "", resolver, config)


@router.post("/{bucket_name}", response_model=BatchUrlResponse, responses=_ERROR_RESPONSES)
async def get_object_urls(
    bucket_name: str,
    body: BatchAccessRequest | None = None,
    resolver: BatchResolver = Depends(get_resolver),
    config: AccessConfig = Depends(get_access_config),
):
    try:
        access = validate_batch(bucket_name, body.objects if body else None, config)
    except RequestValidationFailure as e:
        return error_response(e.status_code, e.message)
    outcome = await resolver.resolve_batch(access)
    return batch_response(outcome)


@router.api_route("/{bucket_name}", methods=["PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"], include_in_schema=False)
@router.api_route("/{bucket_name}/{object_key:path}", methods=["POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"], include_in_schema=False)
async def unsupported_method():
    return error_response(400, METHOD_NOT_SUPPORTED)
