"""
Notification ledger: persisted expiration reminders and their read state
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from assetvault.core.exceptions import NotFoundError
from assetvault.models.base import utcnow
from assetvault.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
DEFAULT_RETENTION_DAYS = 30


class NotificationLedger:
    """
    Notifications of a tenant

    A notification without a user_id is broadcast to every user of its
    tenant; one with a user_id is visible to that user only.
    """

    def __init__(self, db: Session, list_limit: int = DEFAULT_LIST_LIMIT):
        self.db = db
        self.list_limit = list_limit

    def _visible(self, tenant_id: str, user_id: Optional[str]) -> Query:
        query = self.db.query(Notification).filter(Notification.tenant_id == tenant_id)
        if user_id:
            query = query.filter(or_(Notification.user_id == user_id, Notification.user_id.is_(None)))
        return query

    def create(
        self,
        *,
        title: str,
        message: str,
        type: NotificationType,
        tenant_id: str,
        client_id: str,
        user_id: Optional[str] = None,
        asset_id: Optional[str] = None,
        showroom_asset_id: Optional[str] = None,
        asset_name: Optional[str] = None,
        showroom_name: Optional[str] = None,
        days_until_expiry: Optional[int] = None,
        commit: bool = True,
    ) -> Notification:
        """
        Record a notification

        With commit=False the row is only flushed so the caller can make it
        part of a larger transaction.
        """
        notification = Notification(
            title=title,
            message=message,
            type=NotificationType(type).value,
            tenant_id=tenant_id,
            client_id=client_id,
            user_id=user_id,
            asset_id=asset_id,
            showroom_asset_id=showroom_asset_id,
            asset_name=asset_name,
            showroom_name=showroom_name,
            days_until_expiry=days_until_expiry,
            is_read=False,
        )
        self.db.add(notification)
        if commit:
            self.db.commit()
            self.db.refresh(notification)
        else:
            self.db.flush()
        return notification

    def list_for_user(self, tenant_id: str, user_id: Optional[str] = None, limit: Optional[int] = None) -> List[Notification]:
        """Latest notifications visible to the user, newest first"""
        return (
            self._visible(tenant_id, user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit or self.list_limit)
            .all()
        )

    def mark_read(self, notification_id: str, tenant_id: str, user_id: Optional[str] = None) -> Notification:
        """
        Raises:
            NotFoundError: if the notification is absent or not visible to the caller
        """
        notification = self._visible(tenant_id, user_id).filter(Notification.id == notification_id).first()
        if notification is None:
            raise NotFoundError("Notification")
        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_read(self, tenant_id: str, user_id: Optional[str] = None) -> int:
        updated = (
            self._visible(tenant_id, user_id)
            .filter(Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated

    def unread_count(self, tenant_id: str, user_id: Optional[str] = None) -> int:
        return self._visible(tenant_id, user_id).filter(Notification.is_read.is_(False)).count()

    def purge_read(self, older_than_days: int = DEFAULT_RETENTION_DAYS, now: Optional[datetime] = None) -> int:
        """
        Delete read notifications older than the cutoff; unread ones are kept
        regardless of age

        Returns:
            Number of notifications deleted
        """
        cutoff = (now or utcnow()) - timedelta(days=older_than_days)
        deleted = (
            self.db.query(Notification)
            .filter(Notification.created_at < cutoff, Notification.is_read.is_(True))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Purged {deleted} read notification(s) older than {older_than_days} days")
        return deleted
