"""
Showroom model and the assets that live inside a showroom
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import validates
from typing import Dict, Any, List

from assetvault.models.asset import VaultRecordMixin
from assetvault.models.base import BaseModel, JSONType
from assetvault.models.collections import empty_collection, list_items


class Showroom(BaseModel):
    """
    Named grouping of showroom assets owned by a client
    """
    __tablename__ = "showrooms"

    name = Column(
        String(255),
        nullable=False,
        comment="Display name of the showroom"
    )

    location = Column(
        String(255),
        nullable=True,
        comment="Physical or logical location"
    )

    tenant_id = Column(
        String(100),
        nullable=False,
        index=True,
        comment="Owning tenant"
    )

    client_id = Column(
        String(36),
        nullable=False,
        index=True,
        comment="Owning client within the tenant"
    )

    meta_fields = Column(
        JSONType,
        default=lambda: [],
        nullable=False,
        comment="List of {key, value} metadata pairs"
    )

    templates = Column(
        JSONType,
        default=empty_collection,
        nullable=False,
        comment="Template collection (named size/meta presets)"
    )

    @validates('name')
    def validate_name(self, key: str, name: str) -> str:
        if name is None or not name.strip():
            raise ValueError("Showroom name cannot be empty")
        return name.strip()

    def template_items(self) -> List[Dict[str, Any]]:
        return list_items(self.templates)

    def storage_parts(self) -> List[str]:
        """Path segments of this showroom's upload directory"""
        return [self.tenant_id, self.client_id, "showrooms", self.id]

    def __repr__(self) -> str:
        return f"<Showroom(id={self.id}, name={self.name})>"


class ShowroomAsset(VaultRecordMixin, BaseModel):
    """
    Asset stored inside a showroom
    """
    __tablename__ = "showroom_assets"

    showroom_id = Column(
        String(36),
        nullable=False,
        index=True,
        comment="Parent showroom"
    )

    def storage_parts(self) -> List[str]:
        return [self.tenant_id, self.client_id, "showrooms", self.showroom_id, self.id]

    def __repr__(self) -> str:
        return f"<ShowroomAsset(id={self.id}, name={self.name}, showroom={self.showroom_id})>"
