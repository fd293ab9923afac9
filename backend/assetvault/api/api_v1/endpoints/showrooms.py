"""
Showroom endpoints: showrooms, templates and showroom assets
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from typing import List, Optional
import logging

from assetvault.api.deps import get_current_user, get_showroom_service
from assetvault.api.uploads import read_uploads
from assetvault.core.security import AuthenticatedUser
from assetvault.schemas.asset import ShowroomAssetResponse
from assetvault.schemas.showroom import (
    ShowroomAssetCreate, ShowroomAssetUpdate, ShowroomCreate, ShowroomResponse,
    ShowroomUpdate, TemplateInput, TemplateUpdate,
)
from assetvault.services.showrooms import ShowroomService

logger = logging.getLogger(__name__)

router = APIRouter()


# Showrooms

@router.post("/", response_model=ShowroomResponse, status_code=status.HTTP_201_CREATED)
async def create_showroom(
    showroom_data: ShowroomCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.create_showroom(showroom_data, user)


@router.get("/", response_model=List[ShowroomResponse])
async def list_showrooms(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.list_showrooms(user)


@router.get("/{showroom_id}", response_model=ShowroomResponse)
async def get_showroom(
    showroom_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.get_showroom(showroom_id, user)


@router.patch("/{showroom_id}", response_model=ShowroomResponse)
async def update_showroom(
    showroom_id: str,
    showroom_data: ShowroomUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.update_showroom(showroom_id, showroom_data, user)


@router.delete("/{showroom_id}")
async def delete_showroom(
    showroom_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    """
    Delete a showroom together with its assets and their files
    """
    removed = service.remove_showroom(showroom_id, user)
    return {"message": "Showroom deleted", "id": showroom_id, "assets_deleted": removed}


# Templates

@router.post("/{showroom_id}/templates", response_model=ShowroomResponse, status_code=status.HTTP_201_CREATED)
async def add_template(
    showroom_id: str,
    template_data: TemplateInput,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.add_template(showroom_id, template_data, user)


@router.patch("/{showroom_id}/templates/{template_id}", response_model=ShowroomResponse)
async def update_template(
    showroom_id: str,
    template_id: str,
    template_data: TemplateUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.update_template(showroom_id, template_id, template_data, user)


@router.delete("/{showroom_id}/templates/{template_id}", response_model=ShowroomResponse)
async def delete_template(
    showroom_id: str,
    template_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.remove_template(showroom_id, template_id, user)


# Showroom assets

@router.post(
    "/{showroom_id}/assets",
    response_model=ShowroomAssetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_showroom_asset(
    showroom_id: str,
    asset_data: ShowroomAssetCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.create_asset(showroom_id, asset_data, user)


@router.get("/{showroom_id}/assets", response_model=List[ShowroomAssetResponse])
async def list_showroom_assets(
    showroom_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.list_assets(showroom_id, user)


@router.get("/{showroom_id}/assets/{asset_id}", response_model=ShowroomAssetResponse)
async def get_showroom_asset(
    showroom_id: str,
    asset_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.get_asset(showroom_id, asset_id, user)


@router.patch("/{showroom_id}/assets/{asset_id}", response_model=ShowroomAssetResponse)
async def update_showroom_asset(
    showroom_id: str,
    asset_id: str,
    asset_data: ShowroomAssetUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.update_asset(showroom_id, asset_id, asset_data, user)


@router.delete("/{showroom_id}/assets/{asset_id}")
async def delete_showroom_asset(
    showroom_id: str,
    asset_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    service.remove_asset(showroom_id, asset_id, user)
    return {"message": "Showroom asset deleted", "id": asset_id}


@router.post("/{showroom_id}/assets/{asset_id}/files", response_model=ShowroomAssetResponse)
async def upload_showroom_asset_files(
    showroom_id: str,
    asset_id: str,
    files: Optional[List[UploadFile]] = File(None),
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    uploads = await read_uploads(files)
    return service.add_asset_files(showroom_id, asset_id, uploads, user)


@router.delete(
    "/{showroom_id}/assets/{asset_id}/files/{file_id}",
    response_model=ShowroomAssetResponse,
)
async def delete_showroom_asset_file(
    showroom_id: str,
    asset_id: str,
    file_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ShowroomService = Depends(get_showroom_service),
):
    return service.remove_asset_file(showroom_id, asset_id, file_id, user)
