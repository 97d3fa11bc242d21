"""Celery task that runs the import pipeline for one uploaded file."""
import logging

from celery.signals import worker_process_init

from bulk_import.core.config import settings
from bulk_import.db.session import build_sync_session_factory
from bulk_import.imports.persistence import SqlAlchemyPersistence
from bulk_import.imports.pipeline import ImportPipeline
from bulk_import.imports.types import ImportJob
from bulk_import.services.storage import LocalFileStorage
from bulk_import.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


# ─── Per-process pipeline (DB engine is not fork-safe, so build after fork) ───

_pipeline: ImportPipeline | None = None


def build_pipeline() -> ImportPipeline:
    storage = LocalFileStorage(settings.UPLOAD_DIR, settings.REPORT_DIR)
    persistence = SqlAlchemyPersistence(build_sync_session_factory())
    return ImportPipeline(
        persistence,
        storage,
        report_dir=settings.REPORT_DIR,
        csv_delimiter=settings.CSV_DELIMITER,
    )


def get_pipeline() -> ImportPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline()
    return _pipeline


@worker_process_init.connect
def _init_worker_pipeline(**kwargs):
    global _pipeline
    _pipeline = build_pipeline()
    logger.info("Import pipeline ready in worker process")


# ─── Task ───

@celery_app.task(name="tasks.process_import")
def process_import(file_path: str) -> dict:
    """Run one import job and return the serialised outcome."""
    logger.info("process_import started: %s", file_path)
    outcome = get_pipeline().run(ImportJob(file_path=file_path))
    logger.info("process_import complete: %s → %s", file_path, outcome.message)
    return outcome.to_dict()
