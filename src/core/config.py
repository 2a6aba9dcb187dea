"""Runtime configuration model for Salesboard.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_COLLECTION,
    DEFAULT_DATA_ROOT,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_HISTOGRAM_BIN_WIDTH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STORE_BACKEND,
    DEFAULT_UPLOAD_BATCH_SIZE,
    DEFAULT_UPLOAD_MAX_ATTEMPTS,
    MAX_STORE_BATCH_SIZE,
    SUPPORTED_LOG_LEVELS,
    SUPPORTED_STORE_BACKENDS,
)
from core.errors import SalesboardConfigError


@dataclass(frozen=True)
class SalesboardConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the file-backed document store.
        collection: Document store collection holding sale records.
        store_backend: Document store adapter name.
        fetch_timeout_seconds: Wall-clock limit for the full dataset fetch.
        upload_batch_size: Records per atomic batch upsert.
        upload_max_attempts: Attempts per chunk before the upload fails.
        histogram_bin_width: Price distribution bucket width.
        s3_region: Optional default AWS region for S3 reads.
        s3_profile: Optional AWS profile for boto3 session initialization.
        firebase_credentials: Optional service account JSON path.
        log_level: Minimum structured log level.
    """

    data_root: Path
    collection: str = DEFAULT_COLLECTION
    store_backend: str = DEFAULT_STORE_BACKEND
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    upload_batch_size: int = DEFAULT_UPLOAD_BATCH_SIZE
    upload_max_attempts: int = DEFAULT_UPLOAD_MAX_ATTEMPTS
    histogram_bin_width: float = DEFAULT_HISTOGRAM_BIN_WIDTH
    s3_region: str | None = None
    s3_profile: str | None = None
    firebase_credentials: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "SalesboardConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SalesboardConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("SALESBOARD_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            collection=parse_collection_name(
                os.getenv("SALESBOARD_COLLECTION", DEFAULT_COLLECTION)
            ),
            store_backend=_parse_store_backend(
                os.getenv("SALESBOARD_STORE_BACKEND", DEFAULT_STORE_BACKEND)
            ),
            fetch_timeout_seconds=_parse_positive_float(
                "SALESBOARD_FETCH_TIMEOUT_SECONDS",
                os.getenv("SALESBOARD_FETCH_TIMEOUT_SECONDS", str(DEFAULT_FETCH_TIMEOUT_SECONDS)),
            ),
            upload_batch_size=_parse_batch_size(
                os.getenv("SALESBOARD_UPLOAD_BATCH_SIZE", str(DEFAULT_UPLOAD_BATCH_SIZE))
            ),
            upload_max_attempts=_parse_positive_int(
                "SALESBOARD_UPLOAD_MAX_ATTEMPTS",
                os.getenv("SALESBOARD_UPLOAD_MAX_ATTEMPTS", str(DEFAULT_UPLOAD_MAX_ATTEMPTS)),
            ),
            histogram_bin_width=_parse_positive_float(
                "SALESBOARD_HISTOGRAM_BIN_WIDTH",
                os.getenv("SALESBOARD_HISTOGRAM_BIN_WIDTH", str(DEFAULT_HISTOGRAM_BIN_WIDTH)),
            ),
            s3_region=os.getenv("SALESBOARD_S3_REGION"),
            s3_profile=os.getenv("SALESBOARD_S3_PROFILE"),
            firebase_credentials=os.getenv("SALESBOARD_FIREBASE_CREDENTIALS"),
            log_level=_parse_log_level(os.getenv("SALESBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )


def parse_collection_name(raw_value: str) -> str:
    """Validate a collection name; it must be non-empty and contain no slash."""
    collection = raw_value.strip()
    if not collection or "/" in collection:
        raise SalesboardConfigError(
            f"Invalid SALESBOARD_COLLECTION value: got '{raw_value}'. "
            "Use a non-empty collection name without '/'."
        )
    return collection


def _parse_store_backend(raw_value: str) -> str:
    backend = raw_value.strip().lower()
    if backend not in SUPPORTED_STORE_BACKENDS:
        raise SalesboardConfigError(
            f"Invalid SALESBOARD_STORE_BACKEND value: got '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_STORE_BACKENDS)}."
        )
    return backend


def _parse_log_level(raw_value: str) -> str:
    level = raw_value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise SalesboardConfigError(
            f"Invalid SALESBOARD_LOG_LEVEL value: got '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level


def _parse_batch_size(raw_value: str) -> int:
    """Parse the upload batch size and bound it by the store maximum.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed batch size.

    Raises:
        SalesboardConfigError: If value is not an int in ``1..MAX_STORE_BATCH_SIZE``.
    """
    batch_size = _parse_positive_int("SALESBOARD_UPLOAD_BATCH_SIZE", raw_value)
    if batch_size > MAX_STORE_BATCH_SIZE:
        raise SalesboardConfigError(
            f"Invalid SALESBOARD_UPLOAD_BATCH_SIZE value: {batch_size} exceeds the "
            f"store batch limit of {MAX_STORE_BATCH_SIZE}. Lower the batch size."
        )
    return batch_size


def _parse_positive_int(variable_name: str, raw_value: str) -> int:
    """Parse a strictly positive integer environment value.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        SalesboardConfigError: If value cannot be parsed or is not positive.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise SalesboardConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if value < 1:
        raise SalesboardConfigError(
            f"Invalid {variable_name} value: expected a positive integer, got {value}."
        )
    return value


def _parse_positive_float(variable_name: str, raw_value: str) -> float:
    try:
        value = float(raw_value)
    except ValueError as error:
        raise SalesboardConfigError(
            f"Invalid {variable_name} value: "
            f"expected number, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if not value > 0:
        raise SalesboardConfigError(
            f"Invalid {variable_name} value: expected a positive number, got {raw_value}."
        )
    return value
