"""XLSX error report for imports that failed validation."""
import logging
import uuid
from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook

from bulk_import.imports.errors import ReportGenerationFailed
from bulk_import.imports.types import ImportRowError

logger = logging.getLogger(__name__)

REPORT_SHEET_TITLE = "Errors"

# (header, width)
REPORT_COLUMNS: tuple[tuple[str, int], ...] = (
    ("Row", 10),
    ("Column", 20),
    ("Error", 30),
)


class ErrorReportGenerator:
    def __init__(self, report_dir: str | Path):
        self.report_dir = Path(report_dir)

    def generate(self, errors: Sequence[ImportRowError]) -> Path:
        """Write one report row per error, in the order given. Returns the file path."""
        report_path = self.report_dir / f"error_report_{uuid.uuid4().hex}.xlsx"

        try:
            self.report_dir.mkdir(parents=True, exist_ok=True)

            workbook = Workbook()
            worksheet = workbook.active
            worksheet.title = REPORT_SHEET_TITLE

            worksheet.append([header for header, _ in REPORT_COLUMNS])
            for letter, (_, width) in zip("ABC", REPORT_COLUMNS):
                worksheet.column_dimensions[letter].width = width

            for err in errors:
                worksheet.append([err.row, err.column, err.error])

            workbook.save(report_path)
        except Exception as exc:
            logger.exception("Error report generation failed: %s", exc)
            raise ReportGenerationFailed(str(exc)) from exc

        logger.info("Error report generated: %s (%d errors)", report_path, len(errors))
        return report_path
