"""Tests for the bulk import endpoints. The queue is patched out."""
from pathlib import Path
from unittest.mock import patch

import pytest
from celery.exceptions import TimeoutError as CeleryTimeoutError
from httpx import AsyncClient, ASGITransport
from openpyxl import Workbook

from bulk_import.core.config import settings
from bulk_import.core.limiter import limiter
from bulk_import.main import app


# ─── Helpers ──────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def isolated_dirs(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "REPORT_DIR", str(tmp_path / "reports"))
    monkeypatch.setattr(limiter, "enabled", False)
    return tmp_path


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def _write_report(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook = Workbook()
    workbook.active.append(["Row", "Column", "Error"])
    workbook.save(path)
    return path


# ─── POST /api/v1/import/upload ───────────────────────────────────────────────

@pytest.mark.asyncio
@patch("bulk_import.api.v1.import_routes.wait_for_result")
@patch("bulk_import.api.v1.import_routes.enqueue_import", return_value="job-1")
async def test_upload_success_returns_json(mock_enqueue, mock_wait, isolated_dirs):
    mock_wait.return_value = {
        "status": True,
        "records_inserted": 2,
        "message": "File processed successfully. 2 records inserted into the database.",
    }

    async with _client() as client:
        response = await client.post(
            "/api/v1/import/upload",
            files={"file": ("makes.csv", b"name,description\nHonda,a\nFord,b\n", "text/csv")},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] is True
    assert data["records_inserted"] == 2

    job = mock_enqueue.call_args.args[0]
    stored = Path(job.file_path)
    assert stored.parent == (isolated_dirs / "uploads").resolve()
    assert stored.name.endswith("-makes.csv")
    mock_wait.assert_called_once_with("job-1", settings.IMPORT_RESULT_TIMEOUT_SECONDS)


@pytest.mark.asyncio
@patch("bulk_import.api.v1.import_routes.wait_for_result")
@patch("bulk_import.api.v1.import_routes.enqueue_import", return_value="job-2")
async def test_upload_with_errors_returns_report_attachment(mock_enqueue, mock_wait, isolated_dirs):
    report = _write_report(isolated_dirs / "reports" / "error_report_abc.xlsx")
    mock_wait.return_value = {
        "status": False,
        "reason": "validation_failed",
        "message": "File processing completed with errors. Error report generated. Total errors: 1",
        "error_count": 1,
        "error_report_path": str(report),
    }

    async with _client() as client:
        response = await client.post(
            "/api/v1/import/upload",
            files={"file": ("makes.csv", b"name,description\n,a\n", "text/csv")},
        )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "errorReport.xlsx" in response.headers["content-disposition"]
    assert response.headers["x-import-error-count"] == "1"
    assert response.content == report.read_bytes()


@pytest.mark.asyncio
@patch("bulk_import.api.v1.import_routes.wait_for_result")
@patch("bulk_import.api.v1.import_routes.enqueue_import", return_value="job-3")
async def test_upload_file_level_failure_returns_json(mock_enqueue, mock_wait):
    mock_wait.return_value = {
        "status": False,
        "reason": "parse_failed",
        "message": "Failed to process file: Failed to process XLSX file.",
        "error_count": 0,
        "error_report_path": None,
    }

    async with _client() as client:
        response = await client.post(
            "/api/v1/import/upload",
            files={"file": ("makes.xlsx", b"garbage", "application/octet-stream")},
        )

    assert response.status_code == 200
    assert response.json()["reason"] == "parse_failed"


@pytest.mark.asyncio
@patch("bulk_import.api.v1.import_routes.wait_for_result", side_effect=CeleryTimeoutError())
@patch("bulk_import.api.v1.import_routes.enqueue_import", return_value="job-slow")
async def test_upload_timeout_returns_202(mock_enqueue, mock_wait):
    async with _client() as client:
        response = await client.post(
            "/api/v1/import/upload",
            files={"file": ("makes.csv", b"name,description\n", "text/csv")},
        )

    assert response.status_code == 202
    assert response.json()["job_id"] == "job-slow"


@pytest.mark.asyncio
@patch("bulk_import.api.v1.import_routes.enqueue_import")
async def test_upload_rejects_unsupported_extension(mock_enqueue):
    async with _client() as client:
        response = await client.post(
            "/api/v1/import/upload",
            files={"file": ("makes.txt", b"name,description\n", "text/plain")},
        )

    assert response.status_code == 400
    mock_enqueue.assert_not_called()


@pytest.mark.asyncio
@patch("bulk_import.api.v1.import_routes.enqueue_import")
async def test_upload_without_file_returns_400(mock_enqueue):
    async with _client() as client:
        response = await client.post("/api/v1/import/upload", data={"note": "no file"})

    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"
    mock_enqueue.assert_not_called()


# ─── GET /api/v1/import/jobs/{job_id} ─────────────────────────────────────────

@pytest.mark.asyncio
@patch("bulk_import.api.v1.import_routes.get_job_status")
async def test_job_status(mock_status):
    mock_status.return_value = {"job_id": "job-1", "state": "PENDING", "result": None}

    async with _client() as client:
        response = await client.get("/api/v1/import/jobs/job-1")

    assert response.status_code == 200
    assert response.json()["state"] == "PENDING"


# ─── GET /api/v1/import/reports/{report_name} ─────────────────────────────────

@pytest.mark.asyncio
async def test_download_report(isolated_dirs):
    _write_report(isolated_dirs / "reports" / "error_report_dl.xlsx")

    async with _client() as client:
        found = await client.get("/api/v1/import/reports/error_report_dl.xlsx")
        missing = await client.get("/api/v1/import/reports/error_report_nope.xlsx")

    assert found.status_code == 200
    assert missing.status_code == 404
