"""
Database models package
"""

from .base import Base, BaseModel
from .client import Client, User
from .asset import Asset, AssetType, AssetFieldType
from .showroom import Showroom, ShowroomAsset
from .notification import Notification, NotificationType

__all__ = [
    "Base", "BaseModel", "Client", "User", "Asset", "Showroom", "ShowroomAsset",
    "Notification", "AssetType", "AssetFieldType", "NotificationType"
]
