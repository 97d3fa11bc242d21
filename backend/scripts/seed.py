"""Seed script: inserts a handful of sample makes and writes sample upload files for dev.

Idempotent: skips makes whose name already exists.
Run: python scripts/seed.py
"""
import asyncio
import sys
import os
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from openpyxl import Workbook
from sqlalchemy import select

from bulk_import.db.session import AsyncSessionLocal, engine
from bulk_import.models.make import Make

SAMPLE_MAKES = [
    ("Toyota", "Japanese manufacturer"),
    ("Honda", "Japanese manufacturer"),
    ("Ford", "American manufacturer"),
    ("Volkswagen", "German manufacturer"),
]


async def seed():
    async with AsyncSessionLocal() as db:
        existing = set((await db.execute(select(Make.name))).scalars().all())
        for name, description in SAMPLE_MAKES:
            if name in existing:
                print(f"  skip {name} (exists)")
                continue
            db.add(Make(name=name, description=description))
            print(f"  add  {name}")
        await db.commit()

    await engine.dispose()


def write_sample_uploads(target: Path) -> None:
    """One valid CSV and one XLSX with a bad row, for trying the upload endpoint."""
    target.mkdir(parents=True, exist_ok=True)

    (target / "sample_makes.csv").write_text(
        "name,description\nKia,Korean manufacturer\nSeat,Spanish manufacturer\n",
        encoding="utf-8",
    )

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.append(["name", "description"])
    worksheet.append(["Renault", "French manufacturer"])
    worksheet.append([None, "missing name"])
    workbook.save(target / "sample_makes_with_errors.xlsx")
    print(f"Sample uploads written to {target}")


if __name__ == "__main__":
    asyncio.run(seed())
    write_sample_uploads(Path(os.path.dirname(__file__)) / "samples")
