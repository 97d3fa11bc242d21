"""Work queue facade used by the API: submit import jobs and read their results."""
import logging
from typing import Any

from celery.result import AsyncResult

from bulk_import.imports.types import ImportJob
from bulk_import.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


def enqueue_import(job: ImportJob) -> str:
    """Queue an import job. Returns the job id."""
    from bulk_import.workers.import_tasks import process_import

    result = process_import.delay(job.file_path)
    logger.info("Queued import job %s for %s", result.id, job.file_path)
    return result.id


def wait_for_result(job_id: str, timeout: float) -> dict[str, Any]:
    """Block until the job finishes. Raises celery.exceptions.TimeoutError on timeout."""
    return AsyncResult(job_id, app=celery_app).get(timeout=timeout)


def get_job_status(job_id: str) -> dict[str, Any]:
    result = AsyncResult(job_id, app=celery_app)
    status: dict[str, Any] = {"job_id": job_id, "state": result.state, "result": None}
    if result.successful():
        status["result"] = result.result
    elif result.failed():
        status["error"] = str(result.result)
    return status
