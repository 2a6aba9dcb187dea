"""Core constants used across Salesboard modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".salesboard")
COLLECTIONS_DIR_NAME = "collections"
DEFAULT_COLLECTION = "sales_data"
DEFAULT_ORDER_BY_FIELD = "date"
DEFAULT_STORE_BACKEND = "local"
SUPPORTED_STORE_BACKENDS = ("local", "firestore")
DEFAULT_FETCH_TIMEOUT_SECONDS = 20.0
MAX_STORE_BATCH_SIZE = 500
DEFAULT_UPLOAD_BATCH_SIZE = 400
DEFAULT_UPLOAD_MAX_ATTEMPTS = 3
UPLOAD_INITIAL_BACKOFF_SECONDS = 1.0
UPLOAD_BACKOFF_MULTIPLIER = 2.0
DEFAULT_HISTOGRAM_BIN_WIDTH = 50000.0
MIN_RECORD_YEAR_EXCLUSIVE = 2000
DEFAULT_CITY = "Unknown"
DEFAULT_CITY_LIMITS = "Unknown"
YES = "Yes"
NO = "No"
FINGERPRINT_SEPARATOR = "|"
STORAGE_ID_UNSAFE_CHARACTER = "/"
STORAGE_ID_REPLACEMENT = "_"
DEFAULT_TABLE_ROW_LIMIT = 2000
SUPPORTED_UPLOAD_EXTENSIONS = (".xlsx", ".xlsm", ".csv")
CHART_IMAGE_EXTENSION = ".png"
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
