"""
Celery application configuration for scheduled vault jobs
"""

from celery import Celery
from celery.schedules import crontab
from assetvault.core.config import settings

# Create Celery app instance
celery_app = Celery(
    'asset_vault',
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=['assetvault.tasks.expiration_tasks'],
)

# Load configuration
celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=60 * 60,  # 1 hour hard limit
    task_soft_time_limit=55 * 60,
    worker_max_tasks_per_child=50,
)

# Beat schedule for periodic tasks
celery_app.conf.beat_schedule = {
    'check-expiring-assets-daily': {
        'task': 'assetvault.tasks.expiration_tasks.check_expiring_assets',
        'schedule': crontab(hour=settings.EXPIRATION_CHECK_HOUR, minute=settings.EXPIRATION_CHECK_MINUTE),
    },
    'purge-read-notifications-daily': {
        'task': 'assetvault.tasks.expiration_tasks.purge_read_notifications',
        'schedule': crontab(hour=3, minute=0),  # 03:00 UTC, away from the expiration check
    },
}
