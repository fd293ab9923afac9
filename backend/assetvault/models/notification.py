"""
Notification model for expiration reminders
"""

from sqlalchemy import Column, String, Text, Integer, Boolean
from enum import Enum

from assetvault.models.base import BaseModel


class NotificationType(str, Enum):
    """Kinds of notification produced by the expiration sweep"""
    EXPIRATION_REMINDER = "EXPIRATION_REMINDER"
    EXPIRATION_TODAY = "EXPIRATION_TODAY"


class Notification(BaseModel):
    """
    A fired reminder; a null user_id means every user of the tenant sees it
    """
    __tablename__ = "notifications"

    title = Column(String(500), nullable=False)

    message = Column(Text, nullable=False)

    type = Column(
        String(50),
        nullable=False,
        comment="EXPIRATION_REMINDER or EXPIRATION_TODAY"
    )

    tenant_id = Column(String(100), nullable=False, index=True)

    client_id = Column(String(36), nullable=False, index=True)

    user_id = Column(
        String(36),
        nullable=True,
        index=True,
        comment="Recipient; null for tenant-wide notifications"
    )

    asset_id = Column(String(36), nullable=True)

    showroom_asset_id = Column(String(36), nullable=True)

    asset_name = Column(String(255), nullable=True)

    showroom_name = Column(String(255), nullable=True)

    days_until_expiry = Column(Integer, nullable=True)

    is_read = Column(
        Boolean,
        default=False,
        nullable=False,
        index=True
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, type={self.type}, read={self.is_read})>"
