"""
Notification endpoints
"""

from fastapi import APIRouter, Depends
from typing import List

from assetvault.api.deps import get_current_user, get_notification_ledger
from assetvault.core.security import AuthenticatedUser
from assetvault.schemas.notification import NotificationResponse, UnreadCount
from assetvault.services.notifications import NotificationLedger

router = APIRouter()


@router.get("/", response_model=List[NotificationResponse])
async def list_notifications(
    user: AuthenticatedUser = Depends(get_current_user),
    ledger: NotificationLedger = Depends(get_notification_ledger),
):
    """
    Latest notifications visible to the caller, newest first
    """
    return ledger.list_for_user(user.tenant_id, user.user_id)


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(
    user: AuthenticatedUser = Depends(get_current_user),
    ledger: NotificationLedger = Depends(get_notification_ledger),
):
    return UnreadCount(count=ledger.unread_count(user.tenant_id, user.user_id))


@router.patch("/read-all")
async def mark_all_read(
    user: AuthenticatedUser = Depends(get_current_user),
    ledger: NotificationLedger = Depends(get_notification_ledger),
):
    updated = ledger.mark_all_read(user.tenant_id, user.user_id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    ledger: NotificationLedger = Depends(get_notification_ledger),
):
    ledger.mark_read(notification_id, user.tenant_id, user.user_id)
    return {"message": "Notification marked as read", "id": notification_id}
