"""Pydantic schemas for bulk import responses."""
from typing import Any

from pydantic import BaseModel


class ImportResultOut(BaseModel):
    status: bool
    message: str
    reason: str | None = None
    records_inserted: int | None = None
    error_count: int | None = None


class ImportQueuedOut(BaseModel):
    job_id: str
    message: str


class ImportJobStatusOut(BaseModel):
    job_id: str
    state: str
    result: dict[str, Any] | None = None
    error: str | None = None
