"""Value types shared by the import parsers, validator, report and pipeline."""
import enum
from dataclasses import asdict, dataclass
from typing import Any, Union


class FailureReason(str, enum.Enum):
    validation_failed = "validation_failed"
    unsupported_format = "unsupported_format"
    parse_failed = "parse_failed"
    worksheet_not_found = "worksheet_not_found"
    report_generation_failed = "report_generation_failed"
    persistence_failed = "persistence_failed"


# ─── Rows ───

@dataclass(frozen=True)
class RawRow:
    position: int
    fields: tuple[Any, ...]

    def field(self, index: int) -> Any:
        """Return the field at `index`, or None when the row is shorter."""
        return self.fields[index] if index < len(self.fields) else None


@dataclass(frozen=True)
class ImportRecord:
    name: str
    description: str

    def to_insert_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True)
class ImportRowError:
    row: int
    column: str
    error: str


# ─── Jobs and outcomes ───

@dataclass(frozen=True)
class ImportJob:
    file_path: str


@dataclass(frozen=True)
class ImportSuccess:
    records_inserted: int
    message: str

    status = True

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, **asdict(self)}


@dataclass(frozen=True)
class ImportFailure:
    reason: FailureReason
    message: str
    error_count: int = 0
    error_report_path: str | None = None

    status = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["reason"] = self.reason.value
        return {"status": self.status, **data}


ImportOutcome = Union[ImportSuccess, ImportFailure]
