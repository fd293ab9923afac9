"""
Showroom service: showrooms, their templates, and the assets inside them
"""

import logging
from typing import Any, Dict, Iterable, List

from assetvault.core.exceptions import NotFoundError
from assetvault.core.security import AuthenticatedUser, require_client_id
from assetvault.models.base import as_utc
from assetvault.models.collections import append_items, build_collection, get_item, remove_item, replace_item
from assetvault.models.showroom import Showroom, ShowroomAsset
from assetvault.schemas.showroom import (
    ShowroomAssetCreate, ShowroomAssetUpdate, ShowroomCreate, ShowroomUpdate,
    ShowroomResponse, TemplateInput, TemplateResponse, TemplateSize, TemplateUpdate,
)
from assetvault.schemas.asset import ShowroomAssetResponse
from assetvault.services.records import ScopedRecordService, UploadedFile

logger = logging.getLogger(__name__)


def _template_for_storage(template: TemplateInput) -> Dict[str, Any]:
    return {
        "name": template.name,
        "description": template.description,
        "sizes": _sizes_for_storage(template.sizes),
        "meta_fields": [meta.model_dump() for meta in template.meta_fields],
    }


def _sizes_for_storage(sizes: Iterable[TemplateSize]) -> List[Dict[str, Any]]:
    return [
        {"label": size.label, "width": size.width, "height": size.height, "unit": size.unit or "px"}
        for size in sizes
    ]


class ShowroomService(ScopedRecordService):
    """
    Showrooms of the caller's client

    Every showroom-asset operation first resolves the parent showroom inside
    the caller's scope.
    """

    model = ShowroomAsset
    entity_name = "Showroom asset"

    # ------------------------------------------------------------------
    # Showrooms
    # ------------------------------------------------------------------

    def _get_showroom(self, showroom_id: str, user: AuthenticatedUser) -> Showroom:
        client_id = require_client_id(user)
        showroom = self.db.query(Showroom).filter(
            Showroom.id == showroom_id,
            Showroom.tenant_id == user.tenant_id,
            Showroom.client_id == client_id,
        ).first()
        if showroom is None:
            raise NotFoundError("Showroom")
        return showroom

    def create_showroom(self, data: ShowroomCreate, user: AuthenticatedUser) -> ShowroomResponse:
        client_id = require_client_id(user)
        showroom = Showroom(
            name=data.name,
            location=data.location,
            tenant_id=user.tenant_id,
            client_id=client_id,
            meta_fields=[meta.model_dump() for meta in data.meta_fields],
            templates=build_collection(_template_for_storage(t) for t in data.templates),
        )
        self.db.add(showroom)
        self.db.commit()
        self.db.refresh(showroom)
        logger.info(f"Created showroom {showroom.id} for client {client_id}")
        return self.showroom_response(showroom)

    def list_showrooms(self, user: AuthenticatedUser) -> List[ShowroomResponse]:
        client_id = require_client_id(user)
        showrooms = self.db.query(Showroom).filter(
            Showroom.tenant_id == user.tenant_id,
            Showroom.client_id == client_id,
        ).order_by(Showroom.created_at.desc()).all()
        return [self.showroom_response(showroom) for showroom in showrooms]

    def get_showroom(self, showroom_id: str, user: AuthenticatedUser) -> ShowroomResponse:
        return self.showroom_response(self._get_showroom(showroom_id, user))

    def update_showroom(self, showroom_id: str, data: ShowroomUpdate, user: AuthenticatedUser) -> ShowroomResponse:
        showroom = self._get_showroom(showroom_id, user)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("name") is not None:
            showroom.name = data.name
        if "location" in changes:
            showroom.location = data.location
        if data.meta_fields is not None:
            showroom.meta_fields = [meta.model_dump() for meta in data.meta_fields]
        if data.templates is not None:
            showroom.templates = build_collection(_template_for_storage(t) for t in data.templates)

        self.db.commit()
        self.db.refresh(showroom)
        return self.showroom_response(showroom)

    def remove_showroom(self, showroom_id: str, user: AuthenticatedUser) -> int:
        """
        Delete a showroom, all of its showroom assets, and its upload tree

        Returns:
            Number of showroom assets removed
        """
        showroom = self._get_showroom(showroom_id, user)
        directory = showroom.storage_parts()

        removed = self._scoped(user, showroom_id=showroom.id).delete()
        self.db.delete(showroom)
        self.db.commit()

        self.storage.delete_tree(directory)
        logger.info(f"Deleted showroom {showroom_id} and {removed} showroom asset(s)")
        return removed

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def add_template(self, showroom_id: str, data: TemplateInput, user: AuthenticatedUser) -> ShowroomResponse:
        showroom = self._get_showroom(showroom_id, user)
        showroom.templates = append_items(showroom.templates, [_template_for_storage(data)])
        self.db.commit()
        self.db.refresh(showroom)
        return self.showroom_response(showroom)

    def update_template(
        self, showroom_id: str, template_id: str, data: TemplateUpdate, user: AuthenticatedUser
    ) -> ShowroomResponse:
        showroom = self._get_showroom(showroom_id, user)
        template = get_item(showroom.templates, template_id)
        if template is None:
            raise NotFoundError("Template")

        if data.name is not None:
            template["name"] = data.name
        if data.description is not None:
            template["description"] = data.description
        if data.sizes is not None:
            template["sizes"] = _sizes_for_storage(data.sizes)
        if data.meta_fields is not None:
            template["meta_fields"] = [meta.model_dump() for meta in data.meta_fields]

        showroom.templates = replace_item(showroom.templates, template_id, template)
        self.db.commit()
        self.db.refresh(showroom)
        return self.showroom_response(showroom)

    def remove_template(self, showroom_id: str, template_id: str, user: AuthenticatedUser) -> ShowroomResponse:
        showroom = self._get_showroom(showroom_id, user)
        templates, removed = remove_item(showroom.templates, template_id)
        if removed is None:
            raise NotFoundError("Template")

        showroom.templates = templates
        self.db.commit()
        self.db.refresh(showroom)
        return self.showroom_response(showroom)

    # ------------------------------------------------------------------
    # Showroom assets
    # ------------------------------------------------------------------

    def create_asset(self, showroom_id: str, data: ShowroomAssetCreate, user: AuthenticatedUser) -> ShowroomAssetResponse:
        showroom = self._get_showroom(showroom_id, user)
        asset = self._new_entity(data, user, showroom_id=showroom.id)
        return self.asset_response(asset)

    def list_assets(self, showroom_id: str, user: AuthenticatedUser) -> List[ShowroomAssetResponse]:
        showroom = self._get_showroom(showroom_id, user)
        assets = self._newest_first(self._scoped(user, showroom_id=showroom.id))
        return [self.asset_response(asset) for asset in assets]

    def get_asset(self, showroom_id: str, asset_id: str, user: AuthenticatedUser) -> ShowroomAssetResponse:
        showroom = self._get_showroom(showroom_id, user)
        return self.asset_response(self._get_entity(asset_id, user, showroom_id=showroom.id))

    def update_asset(
        self, showroom_id: str, asset_id: str, data: ShowroomAssetUpdate, user: AuthenticatedUser
    ) -> ShowroomAssetResponse:
        showroom = self._get_showroom(showroom_id, user)
        asset = self._get_entity(asset_id, user, showroom_id=showroom.id)
        self._apply_update(asset, data)
        return self.asset_response(asset)

    def remove_asset(self, showroom_id: str, asset_id: str, user: AuthenticatedUser) -> None:
        showroom = self._get_showroom(showroom_id, user)
        asset = self._get_entity(asset_id, user, showroom_id=showroom.id)
        directory = asset.storage_parts()
        self.db.delete(asset)
        self.db.commit()
        self.storage.delete_tree(directory)
        logger.info(f"Deleted showroom asset {asset_id} from showroom {showroom_id}")

    def add_asset_files(
        self, showroom_id: str, asset_id: str, uploads: List[UploadedFile], user: AuthenticatedUser
    ) -> ShowroomAssetResponse:
        showroom = self._get_showroom(showroom_id, user)
        asset = self._get_entity(asset_id, user, showroom_id=showroom.id)
        return self.asset_response(self._attach_files(asset, uploads, user))

    def remove_asset_file(
        self, showroom_id: str, asset_id: str, file_id: str, user: AuthenticatedUser
    ) -> ShowroomAssetResponse:
        showroom = self._get_showroom(showroom_id, user)
        asset = self._get_entity(asset_id, user, showroom_id=showroom.id)
        return self.asset_response(self._detach_file(asset, file_id))

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def showroom_response(self, showroom: Showroom) -> ShowroomResponse:
        return ShowroomResponse(
            id=showroom.id,
            name=showroom.name,
            location=showroom.location,
            tenant_id=showroom.tenant_id,
            client_id=showroom.client_id,
            meta_fields=list(showroom.meta_fields or []),
            templates=[TemplateResponse(**item) for item in showroom.template_items()],
            created_at=as_utc(showroom.created_at),
            updated_at=as_utc(showroom.updated_at),
        )

    def asset_response(self, asset: ShowroomAsset) -> ShowroomAssetResponse:
        return ShowroomAssetResponse(showroom_id=asset.showroom_id, **self._base_response(asset))
