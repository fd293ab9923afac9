"""
Pydantic schemas for notifications
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class NotificationResponse(BaseModel):
    """Schema for notification API responses"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    type: str
    is_read: bool = False
    asset_id: Optional[str] = None
    showroom_asset_id: Optional[str] = None
    asset_name: Optional[str] = None
    showroom_name: Optional[str] = None
    days_until_expiry: Optional[int] = None
    created_at: Optional[datetime] = None


class UnreadCount(BaseModel):
    count: int = Field(..., ge=0, description="Unread notifications visible to the caller")
