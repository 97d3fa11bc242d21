from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging as celery_setup_logging

from bulk_import.core.config import settings
from bulk_import.core.logging import setup_logging

celery_app = Celery(
    "bulk_import_worker",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "bulk_import.workers.import_tasks",
        "bulk_import.workers.maintenance_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    broker_connection_retry_on_startup=True,
)

celery_app.conf.beat_schedule = {
    "purge-error-reports-hourly": {
        "task": "tasks.purge_error_reports",
        "schedule": crontab(minute=0),
    },
}


@celery_setup_logging.connect
def _configure_worker_logging(**kwargs):
    setup_logging()
