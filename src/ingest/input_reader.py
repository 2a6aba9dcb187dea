"""Upload source readers.

This module loads spreadsheet bytes from local paths or S3 objects and
parses them into raw key/value rows for the normalizer.
"""

from __future__ import annotations

import csv
import io
import zipfile
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from core.config import SalesboardConfig
from core.constants import SUPPORTED_UPLOAD_EXTENSIONS
from core.errors import SalesboardDependencyError, SalesboardIngestError
from core.s3_uri import is_s3_uri, parse_s3_uri


def read_upload_rows(source_uri: str, config: SalesboardConfig) -> list[dict[str, Any]]:
    """Load raw rows from a local spreadsheet or an S3 object.

    Args:
        source_uri: Local file path or ``s3://bucket/key`` URI.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Raw rows keyed by header name, in sheet order.

    Raises:
        SalesboardIngestError: If the source cannot be read or parsed.
    """
    if is_s3_uri(source_uri):
        location = parse_s3_uri(source_uri)
        payload = _download_s3_object(config, location.bucket, location.key)
        return parse_spreadsheet(payload, location.key)
    source_path = Path(source_uri).expanduser()
    if not source_path.is_file():
        raise SalesboardIngestError(
            f"Failed to read upload source at {source_path}: file does not exist. "
            "Provide an existing .xlsx or .csv file."
        )
    return parse_spreadsheet(source_path.read_bytes(), source_path.name)


def parse_spreadsheet(payload: bytes, file_name: str) -> list[dict[str, Any]]:
    """Parse spreadsheet bytes into header-keyed rows.

    The first worksheet's first row is the header. Blank rows and blank
    cells are dropped, so absent values reach the normalizer as missing keys.

    Args:
        payload: Raw file bytes.
        file_name: Original file name, used to pick the format.

    Returns:
        Parsed rows.

    Raises:
        SalesboardIngestError: If the format is unsupported or unreadable.
    """
    suffix = Path(file_name).suffix.lower()
    if suffix not in SUPPORTED_UPLOAD_EXTENSIONS:
        raise SalesboardIngestError(
            f"Unsupported upload file '{file_name}'. "
            f"Supported extensions: {SUPPORTED_UPLOAD_EXTENSIONS}."
        )
    if suffix == ".csv":
        return _parse_csv(payload, file_name)
    return _parse_workbook(payload, file_name)


def _parse_workbook(payload: bytes, file_name: str) -> list[dict[str, Any]]:
    try:
        workbook = load_workbook(io.BytesIO(payload), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as error:
        raise SalesboardIngestError(
            f"Failed to open workbook '{file_name}': {error}. "
            "Save the file as .xlsx and retry the upload."
        ) from error
    try:
        if not workbook.worksheets:
            return []
        row_values = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(row_values, None)
        if header is None:
            return []
        column_names = [_header_name(cell) for cell in header]
        return [
            row
            for row in (_row_from_cells(column_names, cells) for cells in row_values)
            if row
        ]
    finally:
        workbook.close()


def _parse_csv(payload: bytes, file_name: str) -> list[dict[str, Any]]:
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as error:
        raise SalesboardIngestError(
            f"Failed to decode CSV '{file_name}': {error}. Save the file as UTF-8."
        ) from error
    rows: list[dict[str, Any]] = []
    for raw_row in csv.DictReader(io.StringIO(text)):
        row = {
            key.strip(): value
            for key, value in raw_row.items()
            if key and isinstance(value, str) and value.strip()
        }
        if row:
            rows.append(row)
    return rows


def _header_name(cell: Any) -> str | None:
    if cell is None:
        return None
    name = str(cell).strip()
    return name or None


def _row_from_cells(column_names: list[str | None], cells: tuple[Any, ...]) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for column_name, value in zip(column_names, cells):
        if column_name is None or value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        row[column_name] = value
    return row


def _download_s3_object(config: SalesboardConfig, bucket: str, key: str) -> bytes:
    """Download one S3 object body.

    Args:
        config: Runtime config containing optional profile/region.
        bucket: S3 bucket name.
        key: Object key.

    Returns:
        Object bytes.

    Raises:
        SalesboardDependencyError: If boto3 is missing.
        SalesboardIngestError: If the download fails.
    """
    try:
        import boto3
    except ImportError as error:
        raise SalesboardDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install salesboard[s3] to upload from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    s3_client = boto3.session.Session(**session_kwargs).client("s3")
    try:
        return s3_client.get_object(Bucket=bucket, Key=key)["Body"].read()
    except Exception as error:
        raise SalesboardIngestError(
            f"Failed to download s3://{bucket}/{key}: {error}. "
            "Check AWS credentials and the object path."
        ) from error
