"""
Daily expiration sweep

For every reminder offset the sweep selects assets and showroom assets that
expire on that day, records one tenant-wide notification per entity and
emails every active user of the tenant.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Protocol, Sequence, Tuple, Type

from sqlalchemy.orm import Session, sessionmaker

from assetvault.core.database_utils import get_db_session
from assetvault.models.asset import Asset, AssetType, VaultRecordMixin
from assetvault.models.base import as_utc, utcnow
from assetvault.models.client import Client, User
from assetvault.models.notification import NotificationType
from assetvault.models.showroom import Showroom, ShowroomAsset
from assetvault.services.mail import compose_expiration_email, day_word
from assetvault.services.notifications import NotificationLedger

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_DAYS = (5, 3, 2, 0)


class MailSender(Protocol):
    def send(self, to: str, subject: str, body: str) -> bool:
        ...


class Recipient(NamedTuple):
    email: str
    name: str


class PendingEmails(NamedTuple):
    """Emails owed for one notified entity, sent after its transaction commits"""

    recipients: List[Recipient]
    asset_name: str
    days_until_expiry: int
    client_name: str
    showroom_name: Optional[str] = None


def compose_reminder(
    asset_name: str, days_until_expiry: int, showroom_name: Optional[str] = None
) -> Tuple[NotificationType, str, str]:
    """
    Type, title and message of an expiration notification

    Returns:
        (type, title, message)
    """
    subject = f'"{asset_name}" in "{showroom_name}"' if showroom_name else f'"{asset_name}"'
    described = f'The asset "{asset_name}" in showroom "{showroom_name}"' if showroom_name else f'The asset "{asset_name}"'

    if days_until_expiry == 0:
        return (
            NotificationType.EXPIRATION_TODAY,
            f"{subject} expires TODAY!",
            f"{described} is expiring today. Please take action to renew.",
        )

    return (
        NotificationType.EXPIRATION_REMINDER,
        f"{subject} expires in {days_until_expiry} days",
        f"{described} will expire in {days_until_expiry} {day_word(days_until_expiry)}. Please plan for renewal.",
    )


def day_window(day: date) -> Tuple[datetime, datetime]:
    """Half-open UTC interval covering one calendar day"""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class ExpirationChecker:
    """
    Runs the expiration sweep

    Each entity is evaluated and written back inside one locked
    transaction, so two evaluations of the same entity cannot both send.
    Mail delivery happens after commit on a bounded pool; failed sends are
    logged and counted, never raised.
    """

    SWEPT_MODELS: Sequence[Type[VaultRecordMixin]] = (Asset, ShowroomAsset)

    def __init__(
        self,
        session_factory: sessionmaker,
        mail_sender: MailSender,
        reminder_days: Iterable[int] = DEFAULT_REMINDER_DAYS,
        sent_history_limit: Optional[int] = 10,
        mail_max_workers: int = 4,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.mail_sender = mail_sender
        self.reminder_days = list(reminder_days)
        self.sent_history_limit = sent_history_limit
        self.mail_max_workers = max(1, mail_max_workers)
        self.clock = clock

    def run(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """
        Run one sweep

        Args:
            now: Moment the sweep runs at; defaults to the clock

        Returns:
            Summary counts: notified, skipped, failed, emails_sent, emails_failed
        """
        now = as_utc(now or self.clock())
        summary = {"notified": 0, "skipped": 0, "failed": 0, "emails_sent": 0, "emails_failed": 0}
        logger.info(f"Starting expiration check for {now.date().isoformat()}")

        with ThreadPoolExecutor(max_workers=self.mail_max_workers, thread_name_prefix="expiration-mail") as pool:
            deliveries: List[Future] = []

            for days in self.reminder_days:
                for model in self.SWEPT_MODELS:
                    for entity_id in self._candidate_ids(model, days, now):
                        try:
                            pending = self._notify_entity(model, entity_id, days, now)
                        except Exception as e:
                            logger.error(f"Failed to process {model.__tablename__} {entity_id}: {e}")
                            summary["failed"] += 1
                            continue

                        if pending is None:
                            summary["skipped"] += 1
                            continue

                        summary["notified"] += 1
                        deliveries.extend(self._submit_emails(pool, pending))

            for delivery in deliveries:
                if delivery.result():
                    summary["emails_sent"] += 1
                else:
                    summary["emails_failed"] += 1

        logger.info(f"Expiration check completed: {summary}")
        return summary

    def _candidate_ids(self, model: Type[VaultRecordMixin], days: int, now: datetime) -> List[str]:
        start, end = day_window(now.date() + timedelta(days=days))
        with get_db_session(self.session_factory) as db:
            rows = db.query(model.id).filter(
                model.expiration_date >= start,
                model.expiration_date < end,
                model.expiration_notifications_enabled.is_(True),
                model.type != AssetType.FILES.value,
            ).all()
        return [row[0] for row in rows]

    def _notify_entity(
        self, model: Type[VaultRecordMixin], entity_id: str, days: int, now: datetime
    ) -> Optional[PendingEmails]:
        """
        Record the notification for one entity

        Returns:
            The emails to send, or None when the entity is no longer due, was
            already notified today, or its client/showroom no longer exists
        """
        with get_db_session(self.session_factory) as db:
            entity = db.query(model).filter(model.id == entity_id).with_for_update().first()
            if entity is None or not self._still_due(entity, days, now):
                return None
            if entity.was_notified_on(now.date()):
                return None

            client = db.query(Client).filter(Client.id == entity.client_id).first()
            if client is None:
                return None

            showroom_name = None
            if isinstance(entity, ShowroomAsset):
                showroom = db.query(Showroom).filter(Showroom.id == entity.showroom_id).first()
                if showroom is None:
                    return None
                showroom_name = showroom.name

            notification_type, title, message = compose_reminder(entity.name, days, showroom_name)
            NotificationLedger(db).create(
                title=title,
                message=message,
                type=notification_type,
                tenant_id=entity.tenant_id,
                client_id=entity.client_id,
                asset_id=entity.id if isinstance(entity, Asset) else None,
                showroom_asset_id=entity.id if isinstance(entity, ShowroomAsset) else None,
                asset_name=entity.name,
                showroom_name=showroom_name,
                days_until_expiry=days,
                commit=False,
            )
            entity.record_notification_sent(now, self.sent_history_limit)

            pending = PendingEmails(
                recipients=self._recipients(db, entity.tenant_id),
                asset_name=entity.name,
                days_until_expiry=days,
                client_name=client.name,
                showroom_name=showroom_name,
            )

        logger.info(f"Notified {model.__tablename__} {entity_id} expiring in {days} day(s)")
        return pending

    @staticmethod
    def _still_due(entity: VaultRecordMixin, days: int, now: datetime) -> bool:
        """The selection criteria, re-applied to the locked row"""
        if not entity.expiration_notifications_enabled or entity.type == AssetType.FILES.value:
            return False
        expires = as_utc(entity.expiration_date)
        if expires is None:
            return False
        start, end = day_window(now.date() + timedelta(days=days))
        return start <= expires < end

    @staticmethod
    def _recipients(db: Session, tenant_id: str) -> List[Recipient]:
        users = db.query(User).filter(User.tenant_id == tenant_id, User.is_active.is_(True)).all()
        return [Recipient(email=user.email, name=user.name) for user in users]

    def _submit_emails(self, pool: ThreadPoolExecutor, pending: PendingEmails) -> List[Future]:
        futures = []
        for recipient in pending.recipients:
            subject, body = compose_expiration_email(
                recipient.name,
                pending.asset_name,
                pending.days_until_expiry,
                pending.client_name,
                pending.showroom_name,
            )
            futures.append(pool.submit(self._deliver, recipient.email, subject, body))
        return futures

    def _deliver(self, to: str, subject: str, body: str) -> bool:
        try:
            sent = bool(self.mail_sender.send(to, subject, body))
        except Exception as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False
        if not sent:
            logger.error(f"Failed to send email to {to}")
        return sent
