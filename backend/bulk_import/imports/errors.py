"""File-level and infrastructure errors raised while running an import.

Row-level problems are not exceptions; they are collected as ImportRowError values.
"""
from bulk_import.imports.types import FailureReason


class ImportPipelineError(Exception):
    """Base class for errors that abort an import run."""

    reason: FailureReason


class UnsupportedFormat(ImportPipelineError):
    reason = FailureReason.unsupported_format

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file format: '{extension or '<none>'}'")


class ParseFailure(ImportPipelineError):
    reason = FailureReason.parse_failed

    def __init__(self, file_format: str, detail: str = ""):
        self.file_format = file_format
        message = f"Failed to process {file_format.upper()} file."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class WorksheetNotFound(ImportPipelineError):
    reason = FailureReason.worksheet_not_found

    def __init__(self):
        super().__init__("Worksheet not found")


class ReportGenerationFailed(ImportPipelineError):
    reason = FailureReason.report_generation_failed

    def __init__(self, detail: str = ""):
        super().__init__(f"Failed to generate error report. {detail}".strip())


class PersistenceFailed(ImportPipelineError):
    reason = FailureReason.persistence_failed

    def __init__(self, detail: str = ""):
        super().__init__(f"Failed to insert data into the database. {detail}".strip())


class CleanupFailed(Exception):
    """Raised by storage when the uploaded file cannot be removed. Never fatal."""

    def __init__(self, path: str, detail: str = ""):
        self.path = path
        message = f"Failed to clean up {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
