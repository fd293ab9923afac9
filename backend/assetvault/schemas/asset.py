"""
Pydantic schemas for asset requests and responses
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime

from assetvault.models.asset import AssetType, AssetFieldType
from assetvault.models.base import as_utc


class AssetFieldInput(BaseModel):
    """A field as submitted by the client; value is plaintext on the wire"""

    key: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Field label",
        examples=["password"]
    )

    type: AssetFieldType = Field(
        AssetFieldType.TEXT,
        description="Rendering hint for the value"
    )

    is_secret: bool = Field(
        False,
        description="Encrypt the value at rest"
    )

    value: Optional[str] = Field(
        None,
        description="Field value"
    )

    @field_validator('key')
    @classmethod
    def strip_key(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field key cannot be blank")
        return v


class AssetFieldResponse(BaseModel):
    """A field with its value decrypted for the caller"""

    id: str
    key: str
    type: AssetFieldType
    is_secret: bool
    value: str = ""


class AssetFileResponse(BaseModel):
    """Metadata of an attached file"""

    id: str
    filename: str
    original_name: str
    relative_path: str
    url: str
    size: int
    mime_type: str
    uploaded_by: str
    uploaded_at: datetime


class AssetCreate(BaseModel):
    """Schema for creating an asset"""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name of the asset",
        examples=["Production database"]
    )

    description: Optional[str] = Field(None, description="Free-form description")

    type: AssetType = Field(AssetType.GENERAL, description="Asset type")

    fields: List[AssetFieldInput] = Field(default_factory=list)

    tags: List[str] = Field(default_factory=list)

    expiration_date: Optional[datetime] = Field(
        None,
        description="When the asset expires"
    )

    expiration_notifications_enabled: bool = Field(
        False,
        description="Send reminders before the expiration date"
    )

    @field_validator('type', mode='before')
    @classmethod
    def blank_type_is_default(cls, v):
        """Treat an empty type as the default"""
        if v == "" or v is None:
            return AssetType.GENERAL
        return v

    @field_validator('expiration_date')
    @classmethod
    def expiration_date_to_utc(cls, v):
        """Naive values are taken as UTC; aware values are converted"""
        return as_utc(v)


class AssetUpdate(BaseModel):
    """
    Schema for updating an asset

    Only keys present in the request are applied; send expiration_date as
    null to clear it.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[AssetType] = None
    fields: Optional[List[AssetFieldInput]] = None
    tags: Optional[List[str]] = None
    expiration_date: Optional[datetime] = None
    expiration_notifications_enabled: Optional[bool] = None

    @field_validator('expiration_date', mode='before')
    @classmethod
    def blank_date_is_none(cls, v):
        return None if v == "" else v

    @field_validator('expiration_date')
    @classmethod
    def expiration_date_to_utc(cls, v):
        return as_utc(v)


class AssetResponse(BaseModel):
    """Schema for asset API responses"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Unique asset identifier")
    name: str
    description: Optional[str] = None
    type: str
    tenant_id: str
    client_id: str
    tags: List[str] = Field(default_factory=list)
    fields: List[AssetFieldResponse] = Field(default_factory=list)
    files: List[AssetFileResponse] = Field(default_factory=list)
    expiration_date: Optional[datetime] = None
    expiration_notifications_enabled: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShowroomAssetResponse(AssetResponse):
    """Schema for showroom asset API responses"""

    showroom_id: str


class CredentialResponse(BaseModel):
    """Text-only asset as returned by the credentials listing"""

    id: str
    name: str
    type: str
    fields: List[AssetFieldResponse] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
