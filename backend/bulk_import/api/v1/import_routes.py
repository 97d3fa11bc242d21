"""Bulk import endpoints: upload a CSV/XLSX of makes, poll jobs, fetch reports."""
import asyncio
import logging
from pathlib import Path

from celery.exceptions import TimeoutError as CeleryTimeoutError
from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from fastapi.responses import FileResponse, JSONResponse

from bulk_import.core.config import settings
from bulk_import.core.limiter import limiter
from bulk_import.imports.parsers import PARSERS
from bulk_import.imports.types import ImportJob
from bulk_import.schemas.imports import ImportJobStatusOut, ImportQueuedOut, ImportResultOut
from bulk_import.services.storage import LocalFileStorage
from bulk_import.workers.queue import enqueue_import, get_job_status, wait_for_result

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
REPORT_DOWNLOAD_NAME = "errorReport.xlsx"


def _storage() -> LocalFileStorage:
    return LocalFileStorage(settings.UPLOAD_DIR, settings.REPORT_DIR)


# ─── POST /import/upload ───

@router.post(
    "/upload",
    response_model=ImportResultOut,
    responses={202: {"model": ImportQueuedOut}},
    summary="Upload a CSV or XLSX file of makes for bulk import",
)
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
async def upload_import(request: Request, file: UploadFile | None = File(None)):
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    extension = Path(file.filename).suffix.lower()
    if extension not in PARSERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file format '{extension}'. Allowed: {', '.join(sorted(PARSERS))}",
        )

    content = await file.read()
    file_path = _storage().save_upload(file.filename, content)
    job_id = enqueue_import(ImportJob(file_path=str(file_path)))

    try:
        result = await asyncio.to_thread(
            wait_for_result, job_id, settings.IMPORT_RESULT_TIMEOUT_SECONDS
        )
    except CeleryTimeoutError:
        logger.warning("Import job %s still running after %ss", job_id, settings.IMPORT_RESULT_TIMEOUT_SECONDS)
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content=ImportQueuedOut(job_id=job_id, message="Import is still processing").model_dump(),
        )

    report_path = result.get("error_report_path")
    if report_path:
        return FileResponse(
            report_path,
            media_type=XLSX_MEDIA_TYPE,
            filename=REPORT_DOWNLOAD_NAME,
            headers={"X-Import-Error-Count": str(result.get("error_count", 0))},
        )

    return ImportResultOut(**result)


# ─── GET /import/jobs/{job_id} ───

@router.get("/jobs/{job_id}", response_model=ImportJobStatusOut, summary="Import job status")
async def import_job_status(job_id: str):
    return ImportJobStatusOut(**get_job_status(job_id))


# ─── GET /import/reports/{report_name} ───

@router.get("/reports/{report_name}", summary="Download a generated error report")
async def download_report(report_name: str):
    path = _storage().resolve_report(report_name)
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return FileResponse(path, media_type=XLSX_MEDIA_TYPE, filename=REPORT_DOWNLOAD_NAME)
