"""Shared pytest fixtures for salesboard tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from core.config import SalesboardConfig
from store.dashboard_sdk import SalesboardClient


@pytest.fixture(autouse=True)
def isolated_salesboard_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop host SALESBOARD_* variables so config defaults are predictable."""
    for name in list(os.environ):
        if name.startswith("SALESBOARD_"):
            monkeypatch.delenv(name)


@pytest.fixture
def local_client(tmp_path: Path) -> SalesboardClient:
    """Client backed by a local JSON store under the test's tmp_path."""
    return SalesboardClient(SalesboardConfig(data_root=tmp_path))
