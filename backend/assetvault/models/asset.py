"""
Asset model: a named vault record of mixed plaintext/secret fields and files
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime
from sqlalchemy.orm import validates
from typing import Dict, Any, Optional, List
from datetime import date, datetime
from enum import Enum

from assetvault.models.base import BaseModel, JSONType, as_utc
from assetvault.models.collections import count_items, empty_collection, list_items


class AssetType(str, Enum):
    """Kinds of asset; FILES marks an attachment-only record"""
    GENERAL = "GENERAL"
    CREDENTIALS = "CREDENTIALS"
    FILES = "FILES"
    LINKS = "LINKS"


class AssetFieldType(str, Enum):
    """Rendering hint for a field value; has no effect on encryption"""
    TEXT = "TEXT"
    PASSWORD = "PASSWORD"
    EMAIL = "EMAIL"
    USERNAME = "USERNAME"
    URL = "URL"
    NOTE = "NOTE"
    NUMBER = "NUMBER"


class VaultRecordMixin:
    """
    Columns and behaviour shared by standalone and showroom assets
    """

    name = Column(
        String(255),
        nullable=False,
        comment="Display name of the asset"
    )

    description = Column(
        Text,
        nullable=True,
        comment="Free-form description"
    )

    type = Column(
        String(50),
        nullable=False,
        default=AssetType.GENERAL.value,
        index=True,
        comment="Asset type (GENERAL, CREDENTIALS, FILES, LINKS)"
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

    fields = Column(
        JSONType,
        default=empty_collection,
        nullable=False,
        comment="Field collection; secret values hold only their encrypted envelope"
    )

    files = Column(
        JSONType,
        default=empty_collection,
        nullable=False,
        comment="Attached file metadata collection"
    )

    tags = Column(
        JSONType,
        default=lambda: [],
        nullable=False,
        comment="Tag list"
    )

    expiration_date = Column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        comment="When the underlying credential or contract expires"
    )

    expiration_notifications_enabled = Column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
        comment="Whether the expiration sweep should remind about this asset"
    )

    notifications_sent_at = Column(
        JSONType,
        default=lambda: [],
        nullable=False,
        comment="ISO timestamps of recent expiration notifications (dedup log)"
    )

    @validates('name')
    def validate_name(self, key: str, name: str) -> str:
        """
        Names are required and trimmed
        """
        if name is None or not name.strip():
            raise ValueError("Asset name cannot be empty")
        return name.strip()

    def field_items(self) -> List[Dict[str, Any]]:
        return list_items(self.fields)

    def file_items(self) -> List[Dict[str, Any]]:
        return list_items(self.files)

    def has_files(self) -> bool:
        return count_items(self.files) > 0

    def sent_dates(self) -> List[datetime]:
        """
        Parsed notification timestamps, oldest first
        """
        return [as_utc(datetime.fromisoformat(value)) for value in (self.notifications_sent_at or [])]

    def was_notified_on(self, day: date) -> bool:
        """
        Whether a notification went out on the given calendar date (UTC)
        """
        return any(sent.date() == day for sent in self.sent_dates())

    def record_notification_sent(self, sent_at: datetime, history_limit: Optional[int] = None) -> None:
        """
        Append a send timestamp to the dedup log

        Only the newest history_limit entries are kept; the log is never
        cleared otherwise.
        """
        history = list(self.notifications_sent_at or [])
        history.append(as_utc(sent_at).isoformat())
        if history_limit is not None and history_limit > 0:
            history = history[-history_limit:]
        # New list so SQLAlchemy picks up the change
        self.notifications_sent_at = history


class Asset(VaultRecordMixin, BaseModel):
    """
    Asset stored directly under a client
    """
    __tablename__ = "assets"

    def storage_parts(self) -> List[str]:
        """Path segments of this asset's upload directory"""
        return [self.tenant_id, self.client_id, self.id]

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, name={self.name}, client={self.client_id})>"
