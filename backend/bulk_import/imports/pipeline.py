"""Import pipeline: detect format → parse + validate → persist or report → cleanup.

Policy is all-or-nothing: a single invalid row routes the whole file to the
error report and nothing is inserted. The uploaded file is removed on every
exit path. The pipeline knows nothing about the queue that dispatches it.
"""
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from bulk_import.imports.errors import CleanupFailed, ImportPipelineError
from bulk_import.imports.parsers import get_parser, parse_and_validate
from bulk_import.imports.report import ErrorReportGenerator
from bulk_import.imports.types import (
    FailureReason,
    ImportFailure,
    ImportJob,
    ImportOutcome,
    ImportRecord,
    ImportRowError,
    ImportSuccess,
)

logger = logging.getLogger(__name__)


class Persistence(Protocol):
    def run_in_transaction(self, fn): ...

    def bulk_insert(self, session, records: Sequence[ImportRecord]) -> int: ...


class FileStorage(Protocol):
    def delete(self, path: str | Path) -> None: ...


class ReportGenerator(Protocol):
    def generate(self, errors: Sequence[ImportRowError]) -> Path: ...


class ImportPipeline:
    def __init__(
        self,
        persistence: Persistence,
        storage: FileStorage,
        report_generator: ReportGenerator | None = None,
        *,
        report_dir: str | Path = "reports",
        csv_delimiter: str = ",",
    ):
        self.persistence = persistence
        self.storage = storage
        self.report_generator = report_generator or ErrorReportGenerator(report_dir)
        self.csv_delimiter = csv_delimiter

    def run(self, job: ImportJob) -> ImportOutcome:
        """Process one uploaded file and return its outcome. Never leaves the upload behind."""
        file_path = job.file_path
        logger.info("Processing file: %s", file_path)

        try:
            return self._process(file_path)
        except ImportPipelineError as exc:
            logger.error("Error processing file %s: %s", file_path, exc)
            return ImportFailure(
                reason=exc.reason,
                message=f"Failed to process file: {exc}",
            )
        finally:
            self._cleanup(file_path)

    # ─── Steps ───

    def _process(self, file_path: str) -> ImportOutcome:
        parser = get_parser(file_path, csv_delimiter=self.csv_delimiter)
        records, errors = parse_and_validate(parser, file_path)

        if errors:
            report_path = self.report_generator.generate(errors)
            return ImportFailure(
                reason=FailureReason.validation_failed,
                message=(
                    "File processing completed with errors. Error report generated. "
                    f"Total errors: {len(errors)}"
                ),
                error_count=len(errors),
                error_report_path=str(report_path),
            )

        self._persist(records)
        return ImportSuccess(
            records_inserted=len(records),
            message=f"File processed successfully. {len(records)} records inserted into the database.",
        )

    def _persist(self, records: list[ImportRecord]) -> None:
        logger.info("Inserting %d records", len(records))
        self.persistence.run_in_transaction(
            lambda session: self.persistence.bulk_insert(session, records)
        )

    def _cleanup(self, file_path: str) -> None:
        try:
            self.storage.delete(file_path)
        except CleanupFailed as exc:
            logger.warning("Error cleaning up file: %s", exc)
