"""
Asset service: CRUD and file attachments for assets stored under a client
"""

import logging
from typing import List

from assetvault.core.security import AuthenticatedUser
from assetvault.models.asset import Asset
from assetvault.models.base import as_utc
from assetvault.schemas.asset import AssetCreate, AssetResponse, AssetUpdate, CredentialResponse
from assetvault.services.fields import fields_for_response
from assetvault.services.records import ScopedRecordService, UploadedFile

logger = logging.getLogger(__name__)


class AssetService(ScopedRecordService):
    """Assets that belong directly to the caller's client"""

    model = Asset
    entity_name = "Asset"

    def create(self, data: AssetCreate, user: AuthenticatedUser) -> AssetResponse:
        asset = self._new_entity(data, user)
        return self.to_response(asset)

    def list(self, user: AuthenticatedUser) -> List[AssetResponse]:
        """All assets of the caller's client, newest first"""
        return [self.to_response(asset) for asset in self._newest_first(self._scoped(user))]

    def credentials(self, user: AuthenticatedUser) -> List[CredentialResponse]:
        """
        Text-only assets (no attached files) with their fields decrypted
        """
        assets = self._newest_first(self._scoped(user))
        return [
            CredentialResponse(
                id=asset.id,
                name=asset.name,
                type=asset.type,
                fields=fields_for_response(self.encryption, asset.field_items()),
                tags=list(asset.tags or []),
                created_at=as_utc(asset.created_at),
                updated_at=as_utc(asset.updated_at),
            )
            for asset in assets
            if not asset.has_files()
        ]

    def get(self, asset_id: str, user: AuthenticatedUser) -> AssetResponse:
        return self.to_response(self._get_entity(asset_id, user))

    def update(self, asset_id: str, data: AssetUpdate, user: AuthenticatedUser) -> AssetResponse:
        asset = self._get_entity(asset_id, user)
        self._apply_update(asset, data)
        return self.to_response(asset)

    def remove(self, asset_id: str, user: AuthenticatedUser) -> None:
        """
        Delete the asset and its upload directory
        """
        asset = self._get_entity(asset_id, user)
        directory = asset.storage_parts()
        self.db.delete(asset)
        self.db.commit()
        self.storage.delete_tree(directory)
        logger.info(f"Deleted asset {asset_id} for client {user.client_id}")

    def add_files(self, asset_id: str, uploads: List[UploadedFile], user: AuthenticatedUser) -> AssetResponse:
        asset = self._get_entity(asset_id, user)
        return self.to_response(self._attach_files(asset, uploads, user))

    def remove_file(self, asset_id: str, file_id: str, user: AuthenticatedUser) -> AssetResponse:
        asset = self._get_entity(asset_id, user)
        return self.to_response(self._detach_file(asset, file_id))

    def to_response(self, asset: Asset) -> AssetResponse:
        return AssetResponse(**self._base_response(asset))
