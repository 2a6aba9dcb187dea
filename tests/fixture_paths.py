"""Paths to files under tests/fixtures."""

from __future__ import annotations

from pathlib import Path

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def fixture_path(relative_path: str) -> Path:
    """Resolve a path under the fixtures root."""
    return FIXTURES_ROOT / relative_path


def sales_upload_source() -> str:
    """Source string for the sample sales CSV, as the upload reader expects it."""
    return str(fixture_path("uploads/sales.csv"))
