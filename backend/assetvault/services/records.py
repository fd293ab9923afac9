"""
Tenant/client scoped CRUD shared by standalone and showroom assets
"""

import logging
import uuid
from pathlib import PurePosixPath
from typing import Any, Dict, List, NamedTuple, Type

from sqlalchemy.orm import Query, Session

from assetvault.core.encryption import FieldEncryption
from assetvault.core.exceptions import NotFoundError, ValidationError
from assetvault.core.security import AuthenticatedUser, require_client_id
from assetvault.models.asset import AssetType, VaultRecordMixin
from assetvault.models.base import as_utc, utcnow
from assetvault.models.collections import append_items, remove_item
from assetvault.schemas.asset import AssetCreate, AssetUpdate
from assetvault.services.fields import fields_for_response, fields_for_storage, file_for_response
from assetvault.services.file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

# Columns that may be cleared with an explicit null
NULLABLE_UPDATES = {"description", "expiration_date"}


class UploadedFile(NamedTuple):
    """File received from the transport layer"""

    original_name: str
    content: bytes
    mime_type: str = "application/octet-stream"


class ScopedRecordService:
    """
    Base service for records owned by a tenant/client pair

    Every query built here filters on the caller's tenant and client; an
    entity outside that scope is reported exactly like a missing one.
    """

    model: Type[VaultRecordMixin]
    entity_name = "Asset"

    def __init__(self, db: Session, encryption: FieldEncryption, storage: LocalFileStorage):
        self.db = db
        self.encryption = encryption
        self.storage = storage

    def _scoped(self, user: AuthenticatedUser, **filters: Any) -> Query:
        client_id = require_client_id(user)
        query = self.db.query(self.model).filter(
            self.model.tenant_id == user.tenant_id,
            self.model.client_id == client_id,
        )
        for column, value in filters.items():
            query = query.filter(getattr(self.model, column) == value)
        return query

    def _get_entity(self, record_id: str, user: AuthenticatedUser, **filters: Any):
        entity = self._scoped(user, **filters).filter(self.model.id == record_id).first()
        if entity is None:
            raise NotFoundError(self.entity_name)
        return entity

    def _new_entity(self, data: AssetCreate, user: AuthenticatedUser, **extra: Any):
        client_id = require_client_id(user)
        entity = self.model(
            name=data.name,
            description=data.description,
            type=(data.type or AssetType.GENERAL).value,
            tenant_id=user.tenant_id,
            client_id=client_id,
            fields=fields_for_storage(self.encryption, data.fields),
            tags=list(data.tags),
            expiration_date=data.expiration_date,
            expiration_notifications_enabled=data.expiration_notifications_enabled,
            notifications_sent_at=[],
            **extra,
        )
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        logger.info(f"Created {self.entity_name.lower()} {entity.id} for client {client_id}")
        return entity

    def _apply_update(self, entity, data: AssetUpdate) -> None:
        """
        Apply only the keys the caller actually sent
        """
        changes = data.model_dump(exclude_unset=True)
        payload: Dict[str, Any] = {}

        for key, value in changes.items():
            if value is None and key not in NULLABLE_UPDATES:
                continue
            if key == "fields":
                payload["fields"] = fields_for_storage(self.encryption, data.fields or [])
            elif key == "type":
                payload["type"] = data.type.value
            elif key == "tags":
                payload["tags"] = list(value)
            else:
                payload[key] = value

        entity.update_from_dict(payload)
        self.db.commit()
        self.db.refresh(entity)

    def _attach_files(self, entity, uploads: List[UploadedFile], user: AuthenticatedUser):
        if not uploads:
            raise ValidationError("No files uploaded")

        directory = entity.storage_parts()
        new_files = []
        for upload in uploads:
            extension = PurePosixPath(upload.original_name or "").suffix
            filename = f"{uuid.uuid4()}{extension}"
            relative_path = self.storage.write([*directory, filename], upload.content)
            new_files.append({
                "filename": filename,
                "original_name": upload.original_name,
                "relative_path": relative_path,
                "url": self.storage.url_for(relative_path),
                "size": len(upload.content),
                "mime_type": upload.mime_type,
                "uploaded_by": user.user_id,
                "uploaded_at": utcnow().isoformat(),
            })

        entity.files = append_items(entity.files, new_files)
        self.db.commit()
        self.db.refresh(entity)
        logger.info(f"Attached {len(new_files)} file(s) to {self.entity_name.lower()} {entity.id}")
        return entity

    def _detach_file(self, entity, file_id: str):
        files, removed = remove_item(entity.files, file_id)
        if removed is None:
            raise NotFoundError("File")

        entity.files = files
        self.db.commit()
        self.db.refresh(entity)
        self.storage.delete(removed["relative_path"])
        return entity

    def _base_response(self, entity) -> Dict[str, Any]:
        return {
            "id": entity.id,
            "name": entity.name,
            "description": entity.description,
            "type": entity.type,
            "tenant_id": entity.tenant_id,
            "client_id": entity.client_id,
            "tags": list(entity.tags or []),
            "fields": fields_for_response(self.encryption, entity.field_items()),
            "files": [file_for_response(item) for item in entity.file_items()],
            "expiration_date": as_utc(entity.expiration_date),
            "expiration_notifications_enabled": bool(entity.expiration_notifications_enabled),
            "created_at": as_utc(entity.created_at),
            "updated_at": as_utc(entity.updated_at),
        }

    def _newest_first(self, query: Query) -> List[Any]:
        return query.order_by(self.model.created_at.desc()).all()
