"""Periodic housekeeping for generated error reports."""
import logging

from bulk_import.core.config import settings
from bulk_import.services.storage import LocalFileStorage
from bulk_import.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.purge_error_reports")
def purge_error_reports() -> dict:
    """Delete error reports older than REPORT_RETENTION_HOURS."""
    storage = LocalFileStorage(settings.UPLOAD_DIR, settings.REPORT_DIR)
    removed = storage.purge_reports(settings.REPORT_RETENTION_HOURS * 3600)
    return {"removed": removed}
