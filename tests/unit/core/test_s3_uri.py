"""Unit tests for S3 URI parsing."""

from __future__ import annotations

import pytest

from core.errors import SalesboardIngestError
from core.s3_uri import is_s3_uri, parse_s3_uri


def test_parse_s3_uri_splits_bucket_and_key() -> None:
    """Bucket and nested key should be separated at the first slash."""
    location = parse_s3_uri("s3://exports/2023/sales.xlsx")

    assert (location.bucket, location.key) == ("exports", "2023/sales.xlsx")


def test_parse_s3_uri_rejects_prefix_without_object() -> None:
    """A bare prefix is not a spreadsheet object."""
    with pytest.raises(SalesboardIngestError):
        parse_s3_uri("s3://exports/2023/")


def test_is_s3_uri_ignores_local_paths() -> None:
    """Local paths should not be treated as S3 sources."""
    assert not is_s3_uri("tests/fixtures/uploads/sales.csv")
