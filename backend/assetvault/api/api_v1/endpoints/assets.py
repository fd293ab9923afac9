"""
Asset endpoints
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from typing import List, Optional
import logging

from assetvault.api.deps import get_asset_service, get_current_user
from assetvault.api.uploads import read_uploads
from assetvault.core.security import AuthenticatedUser
from assetvault.schemas.asset import AssetCreate, AssetResponse, AssetUpdate, CredentialResponse
from assetvault.services.assets import AssetService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset_data: AssetCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    """
    Create an asset under the caller's client
    """
    return service.create(asset_data, user)


@router.get("/", response_model=List[AssetResponse])
async def list_assets(
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    return service.list(user)


@router.get("/credentials", response_model=List[CredentialResponse])
async def list_credentials(
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    """
    Assets without attachments, with their secret fields decrypted
    """
    return service.credentials(user)


@router.get("/{asset_id}", response_model=AssetResponse)
async def get_asset(
    asset_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    return service.get(asset_id, user)


@router.patch("/{asset_id}", response_model=AssetResponse)
async def update_asset(
    asset_id: str,
    asset_data: AssetUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    """
    Partially update an asset; keys absent from the body are left untouched
    """
    return service.update(asset_id, asset_data, user)


@router.delete("/{asset_id}")
async def delete_asset(
    asset_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    service.remove(asset_id, user)
    return {"message": "Asset deleted", "id": asset_id}


@router.post("/{asset_id}/files", response_model=AssetResponse)
async def upload_asset_files(
    asset_id: str,
    files: Optional[List[UploadFile]] = File(None),
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    """
    Attach one or more files to an asset
    """
    uploads = await read_uploads(files)
    return service.add_files(asset_id, uploads, user)


@router.delete("/{asset_id}/files/{file_id}", response_model=AssetResponse)
async def delete_asset_file(
    asset_id: str,
    file_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: AssetService = Depends(get_asset_service),
):
    return service.remove_file(asset_id, file_id, user)
