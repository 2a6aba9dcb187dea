"""Unit tests for the dashboard SDK client and session."""

from __future__ import annotations

from core.types import FilterDimension
from store.dashboard_sdk import SalesboardClient
from tests.fixture_paths import sales_upload_source


def test_upload_file_then_load_round_trips_records(local_client: SalesboardClient) -> None:
    """Uploaded rows should reload as normalized, deduplicated records."""
    client = local_client

    result = client.upload_file(sales_upload_source())
    records = client.load_and_normalize()

    assert (result.uploaded, result.rejected, result.duplicates_collapsed) == (2, 3, 1)
    assert [record.address for record in records] == ["40 Elm Ave", "12 Oak St"]


def test_reupload_is_idempotent(local_client: SalesboardClient) -> None:
    """Uploading the same file twice should not create duplicates."""
    client = local_client
    client.upload_file(sales_upload_source())
    client.upload_file(sales_upload_source())

    assert len(client.load_and_normalize()) == 2


def test_session_reload_resets_filters(local_client: SalesboardClient) -> None:
    """Replacing the record set should restore the all-selected filter."""
    client = local_client
    client.upload_file(sales_upload_source())
    session = client.open_session()
    session.filter_state.select_only(FilterDimension.CITY, ["Austin"])
    narrowed_count = len(session.visible_records())

    session.replace_records(client.load())

    assert (narrowed_count, len(session.visible_records())) == (1, 2)


def test_with_config_points_at_other_collection(local_client: SalesboardClient) -> None:
    """A cloned client should read its own collection."""
    client = local_client
    client.upload_file(sales_upload_source())

    other = client.with_config(collection="archive")

    assert other.load().is_empty and not client.load().is_empty


def test_compute_kpis_on_filtered_subset(local_client: SalesboardClient) -> None:
    """KPIs should reflect only the filtered records."""
    client = local_client
    client.upload_file(sales_upload_source())
    session = client.open_session()
    session.filter_state.select_only(FilterDimension.NEW_CONSTRUCTION, ["Yes"])

    kpis = client.compute_kpis(session.visible_records())

    assert (kpis.count, kpis.median_price) == (1, 450000.0)
