"""Public SDK surface for Salesboard.

This module provides a stable import path for SDK users.
It re-exports the primary client, session, and typed models.
"""

from __future__ import annotations

from analytics.filter_engine import FilterState, build_filter_state, filter_options
from core.cancellation import CancellationToken
from core.config import SalesboardConfig
from core.types import (
    CanonicalRecord,
    DashboardLoad,
    DashboardView,
    FilterDimension,
    Kpis,
    PipelineEvent,
    UploadProgress,
    UploadResult,
)
from ingest.normalizer import normalize_rows
from store.dashboard_sdk import DashboardSession, SalesboardClient
from store.document_store import LocalDocumentStore

__all__ = [
    "CancellationToken",
    "CanonicalRecord",
    "DashboardLoad",
    "DashboardSession",
    "DashboardView",
    "FilterDimension",
    "FilterState",
    "Kpis",
    "LocalDocumentStore",
    "PipelineEvent",
    "SalesboardClient",
    "SalesboardConfig",
    "UploadProgress",
    "UploadResult",
    "build_filter_state",
    "filter_options",
    "normalize_rows",
]
