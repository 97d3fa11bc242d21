"""Shared fixtures for building upload files on disk."""
from pathlib import Path

import pytest
from openpyxl import Workbook


@pytest.fixture
def make_csv(tmp_path):
    """Write a CSV upload. Returns a factory taking the raw text and an optional filename."""
    def _make(text: str, filename: str = "makes.csv") -> Path:
        path = tmp_path / filename
        path.write_text(text, encoding="utf-8")
        return path
    return _make


@pytest.fixture
def make_xlsx(tmp_path):
    """Write an XLSX upload from a list of rows (first row is the header)."""
    def _make(rows: list[list], filename: str = "makes.xlsx") -> Path:
        workbook = Workbook()
        worksheet = workbook.active
        for row in rows:
            worksheet.append(row)
        path = tmp_path / filename
        workbook.save(path)
        return path
    return _make
