"""
Pydantic schemas for showrooms, their templates and showroom assets
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from assetvault.schemas.asset import AssetCreate, AssetUpdate


class MetaField(BaseModel):
    """Key/value metadata pair"""

    key: str = Field(..., min_length=1)
    value: str


class TemplateSize(BaseModel):
    """Named size preset"""

    label: str = Field(..., min_length=1)
    width: float
    height: float
    unit: str = "px"


class TemplateInput(BaseModel):
    """Schema for adding a template"""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    sizes: List[TemplateSize] = Field(default_factory=list)
    meta_fields: List[MetaField] = Field(default_factory=list)


class TemplateUpdate(BaseModel):
    """Schema for updating a template; absent keys keep their value"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    sizes: Optional[List[TemplateSize]] = None
    meta_fields: Optional[List[MetaField]] = None


class TemplateResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    sizes: List[TemplateSize] = Field(default_factory=list)
    meta_fields: List[MetaField] = Field(default_factory=list)


class ShowroomCreate(BaseModel):
    """Schema for creating a showroom"""

    name: str = Field(..., min_length=1, max_length=255, examples=["Main showroom"])
    location: Optional[str] = Field(None, max_length=255)
    meta_fields: List[MetaField] = Field(default_factory=list)
    templates: List[TemplateInput] = Field(default_factory=list)


class ShowroomUpdate(BaseModel):
    """
    Schema for updating a showroom

    Sending templates replaces the whole template collection.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    meta_fields: Optional[List[MetaField]] = None
    templates: Optional[List[TemplateInput]] = None


class ShowroomResponse(BaseModel):
    """Schema for showroom API responses"""

    id: str
    name: str
    location: Optional[str] = None
    tenant_id: str
    client_id: str
    meta_fields: List[MetaField] = Field(default_factory=list)
    templates: List[TemplateResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShowroomAssetCreate(AssetCreate):
    """Schema for creating an asset inside a showroom"""
    pass


class ShowroomAssetUpdate(AssetUpdate):
    """Schema for updating an asset inside a showroom"""
    pass
