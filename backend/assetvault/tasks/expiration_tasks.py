"""
Background tasks for expiration reminders and notification retention
"""

import logging
from typing import Dict, Any, Optional

from celery import shared_task

from assetvault.core.config import settings
from assetvault.core.database import SessionLocal
from assetvault.services.expiration_checker import ExpirationChecker
from assetvault.services.mail import MailService
from assetvault.services.notifications import NotificationLedger

logger = logging.getLogger(__name__)


def build_checker() -> ExpirationChecker:
    """
    Expiration checker wired to the configured database and SMTP relay
    """
    return ExpirationChecker(
        session_factory=SessionLocal,
        mail_sender=MailService.from_settings(settings),
        reminder_days=settings.REMINDER_DAYS,
        sent_history_limit=settings.SENT_HISTORY_LIMIT,
        mail_max_workers=settings.MAIL_MAX_WORKERS,
    )


@shared_task(name='assetvault.tasks.expiration_tasks.check_expiring_assets')
def check_expiring_assets() -> Dict[str, Any]:
    """
    Daily sweep: create reminders for assets expiring on a reminder offset

    Not retried: a partial run has already recorded its sends, and a
    re-run on the same day is deduplicated anyway.

    Returns:
        Dict with sweep counts
    """
    result = build_checker().run()
    return {'status': 'completed', **result}


@shared_task(bind=True, max_retries=3, name='assetvault.tasks.expiration_tasks.purge_read_notifications')
def purge_read_notifications(self, older_than_days: Optional[int] = None) -> Dict[str, Any]:
    """
    Delete read notifications past the retention period

    Args:
        older_than_days: Retention override; defaults to NOTIFICATION_RETENTION_DAYS

    Returns:
        Dict with the number of notifications deleted
    """
    days = older_than_days or settings.NOTIFICATION_RETENTION_DAYS
    db = SessionLocal()

    try:
        deleted = NotificationLedger(db).purge_read(older_than_days=days)
        return {'status': 'completed', 'deleted': deleted}

    except Exception as e:
        logger.error(f"Error purging read notifications: {e}")
        db.rollback()
        # Retry with exponential backoff
        raise self.retry(exc=e, countdown=60 * (2 ** self.request.retries))

    finally:
        db.close()
