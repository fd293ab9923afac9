"""
Pydantic schemas for API request/response validation
"""

from .asset import (
    AssetFieldInput, AssetFieldResponse, AssetFileResponse,
    AssetCreate, AssetUpdate, AssetResponse, ShowroomAssetResponse, CredentialResponse
)
from .showroom import (
    MetaField, TemplateSize, TemplateInput, TemplateUpdate, TemplateResponse,
    ShowroomCreate, ShowroomUpdate, ShowroomResponse,
    ShowroomAssetCreate, ShowroomAssetUpdate
)
from .notification import NotificationResponse, UnreadCount

__all__ = [
    # Asset schemas
    "AssetFieldInput", "AssetFieldResponse", "AssetFileResponse",
    "AssetCreate", "AssetUpdate", "AssetResponse", "ShowroomAssetResponse", "CredentialResponse",
    # Showroom schemas
    "MetaField", "TemplateSize", "TemplateInput", "TemplateUpdate", "TemplateResponse",
    "ShowroomCreate", "ShowroomUpdate", "ShowroomResponse",
    "ShowroomAssetCreate", "ShowroomAssetUpdate",
    # Notification schemas
    "NotificationResponse", "UnreadCount",
]
