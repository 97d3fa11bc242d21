"""Format parsers: decode an uploaded file into RawRow values.

Each parser yields RawRow objects lazily. File-level problems (unreadable
file, bad encoding, corrupt workbook) raise; row-level problems are left to
the validator.
"""
import logging
from collections.abc import Iterator
from pathlib import Path

from openpyxl import load_workbook

from bulk_import.imports.errors import ParseFailure, UnsupportedFormat, WorksheetNotFound
from bulk_import.imports.types import ImportRecord, ImportRowError, RawRow
from bulk_import.imports.validator import validate_row

logger = logging.getLogger(__name__)


class BaseParser:
    file_format: str = ""

    def parse(self, path: str | Path) -> Iterator[RawRow]:
        raise NotImplementedError


# ─── Delimited text ───

class DelimitedTextParser(BaseParser):
    """Naive line/delimiter splitter.

    Quoted fields containing the delimiter and embedded newlines are not
    supported. Positions count data lines from 1; blank lines still use a
    position.
    """

    file_format = "csv"

    def __init__(self, delimiter: str = ","):
        self.delimiter = delimiter

    def parse(self, path: str | Path) -> Iterator[RawRow]:
        try:
            text = Path(path).read_bytes().decode("utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error processing CSV %s: %s", path, exc)
            raise ParseFailure(self.file_format, str(exc)) from exc

        lines = text.replace("\r\n", "\n").split("\n")
        if lines and lines[-1] == "":
            lines.pop()  # single trailing terminator
        lines = lines[1:]  # drop header
        for position, line in enumerate(lines, start=1):
            yield RawRow(position=position, fields=tuple(line.split(self.delimiter)))


# ─── Spreadsheet ───

class SpreadsheetParser(BaseParser):
    """Reads name/description from the first two cells of the first worksheet.

    Positions are native sheet row numbers, so the first data row is 2.
    Entirely empty rows are skipped.
    """

    file_format = "xlsx"

    def parse(self, path: str | Path) -> Iterator[RawRow]:
        try:
            workbook = load_workbook(path, read_only=True, data_only=True)
        except Exception as exc:
            logger.error("Error processing Excel %s: %s", path, exc)
            raise ParseFailure(self.file_format, str(exc)) from exc

        try:
            if not workbook.worksheets:
                raise WorksheetNotFound()
            worksheet = workbook.worksheets[0]

            try:
                for row_number, values in enumerate(worksheet.iter_rows(values_only=True), start=1):
                    if row_number == 1:
                        continue  # header
                    if all(v is None or v == "" for v in values):
                        continue
                    yield RawRow(position=row_number, fields=tuple(values[:2]))
            except Exception as exc:
                logger.error("Error reading worksheet in %s: %s", path, exc)
                raise ParseFailure(self.file_format, str(exc)) from exc
        finally:
            workbook.close()


# ─── Registry ───

PARSERS: dict[str, type[BaseParser]] = {
    ".csv": DelimitedTextParser,
    ".xlsx": SpreadsheetParser,
}


def get_parser(path: str | Path, *, csv_delimiter: str = ",") -> BaseParser:
    """Pick a parser by file extension. Raises UnsupportedFormat otherwise."""
    extension = Path(path).suffix.lower()
    parser_cls = PARSERS.get(extension)
    if parser_cls is None:
        raise UnsupportedFormat(extension)
    if parser_cls is DelimitedTextParser:
        return DelimitedTextParser(delimiter=csv_delimiter)
    return parser_cls()


def parse_and_validate(
    parser: BaseParser,
    path: str | Path,
) -> tuple[list[ImportRecord], list[ImportRowError]]:
    """Run every parsed row through the validator, keeping file order."""
    records: list[ImportRecord] = []
    errors: list[ImportRowError] = []

    for raw in parser.parse(path):
        result = validate_row(raw.field(0), raw.field(1), raw.position)
        if isinstance(result, ImportRowError):
            errors.append(result)
        else:
            records.append(result)

    logger.info(
        "Parsed %s: %d valid rows, %d errors", path, len(records), len(errors)
    )
    return records, errors
