"""
API Client Management API

Provides CRUD endpoints for API clients, answered with the uniform envelopes.
"""

import posixpath
from typing import Optional

from fastapi import APIRouter, Query, Request

from datagate.api.deps import ApiClientServiceDep, ResponderDep, UploadDiskDep
from datagate.common.images import decoder_base64
from datagate.common.utils import decode_search_query
from datagate.common.validation import validate_array
from datagate.domain.api_client import (
    ApiClientCreate,
    ApiClientSearch,
    ApiClientUpdate,
    LogoUpload,
)

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
)

# Directory of client logos on the upload disk
LOGO_PATH = "logos"


@router.get("")
async def list_clients(
    request: Request,
    service: ApiClientServiceDep,
    responder: ResponderDep,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: Optional[int] = Query(None, ge=1, le=1000, description="Items per page"),
    order_by: str = Query("id", description="Sort attribute"),
    order: str = Query("desc", description="Sort direction (asc or desc)"),
):
    """
    Get Client List

    Filters are passed as a JSON object in the `condition` query parameter.
    """
    search = validate_array(
        decode_search_query(request.query_params),
        ApiClientSearch,
        message="Invalid search condition",
    )
    result = await service.get_all(
        search,
        page=page,
        per_page=per_page,
        order_by=order_by,
        order=order,
    )
    return responder.response_success(result)


@router.get("/by-app-id/{app_id}")
async def get_client_by_app_id(
    app_id: str,
    service: ApiClientServiceDep,
    responder: ResponderDep,
):
    """
    Get raw client record by App ID
    """
    client = await service.get_by_app_id(app_id)
    return responder.respond_with(client)


@router.get("/{client_id}")
async def get_client(
    client_id: int,
    service: ApiClientServiceDep,
    responder: ResponderDep,
):
    """
    Get single Client details
    """
    client = await service.get_by_id(client_id)
    if client is None:
        responder.response_error("NOT_FOUND", f"Client {client_id} not found")
    return responder.response_success({"data": client.model_dump(mode="json")})


@router.post("")
async def create_client(
    data: ApiClientCreate,
    service: ApiClientServiceDep,
    responder: ResponderDep,
):
    """
    Create Client

    The plain secret is only returned here and on rotation.
    """
    client = await service.create(data)
    return responder.response_success({"data": client.model_dump(mode="json")})


@router.put("/{client_id}")
async def update_client(
    client_id: int,
    data: ApiClientUpdate,
    service: ApiClientServiceDep,
    responder: ResponderDep,
):
    """
    Update Client
    """
    client = await service.update(client_id, data)
    if client is None:
        responder.response_error("NOT_FOUND", f"Client {client_id} not found")
    return responder.response_success({"data": client.model_dump(mode="json")})


@router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    service: ApiClientServiceDep,
    responder: ResponderDep,
):
    """
    Delete Client
    """
    if not await service.delete(client_id):
        responder.response_error("NOT_FOUND", f"Client {client_id} not found")
    return responder.response_success()


@router.post("/{client_id}/secret")
async def rotate_client_secret(
    client_id: int,
    service: ApiClientServiceDep,
    responder: ResponderDep,
):
    """
    Rotate Client Secret

    Disabled clients are refused with 403.
    """
    client = await service.rotate_secret(client_id)
    if client is None:
        responder.response_error("NOT_FOUND", f"Client {client_id} not found")
    return responder.response_success({"data": client.model_dump(mode="json")})


@router.post("/{client_id}/logo")
async def upload_client_logo(
    client_id: int,
    data: LogoUpload,
    service: ApiClientServiceDep,
    responder: ResponderDep,
    disk: UploadDiskDep,
):
    """
    Upload Client Logo

    Accepts a png or jpeg base64 data URI.
    """
    if await service.get_by_id(client_id) is None:
        responder.response_error("NOT_FOUND", f"Client {client_id} not found")

    path = await decoder_base64(data.image, LOGO_PATH, suffix=f"_{client_id}", disk=disk)
    if path is None:
        responder.response_error("BAD_REQUEST", "Logo must be a png or jpeg base64 data URI")

    client = await service.set_logo(client_id, path)
    if client is None:
        # Client deleted while the file was being written
        await disk.delete(posixpath.relpath(path, disk.name))
        responder.response_error("NOT_FOUND", f"Client {client_id} not found")
    return responder.response_success({"data": client.model_dump(mode="json")})
