"""Row validation shared by every format parser."""
from typing import Any

from bulk_import.imports.types import ImportRecord, ImportRowError


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_row(name: Any, description: Any, position: int) -> ImportRecord | ImportRowError:
    """Validate one row's name/description pair.

    Fields are checked in order and the first missing one is reported, so a
    row missing both only yields the name error.
    """
    name = _clean(name)
    description = _clean(description)

    if not name:
        return ImportRowError(row=position, column="name", error="Name is required")
    if not description:
        return ImportRowError(row=position, column="description", error="Description is required")
    return ImportRecord(name=name, description=description)
