"""Sale fingerprinting and deduplication.

A fingerprint combines the closing instant, the folded address, and the
price. It is the identity used for in-session dedup and, with unsafe
characters replaced, the document id used for idempotent uploads.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable

from core.constants import (
    FINGERPRINT_SEPARATOR,
    STORAGE_ID_REPLACEMENT,
    STORAGE_ID_UNSAFE_CHARACTER,
)
from core.types import CanonicalRecord

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLISECOND = timedelta(milliseconds=1)


def build_fingerprint(closed_at: datetime, address: str, price: float) -> str:
    """Build a stable identity key for one sale.

    Args:
        closed_at: Timezone-aware closing datetime.
        address: Street address as stored on the record.
        price: Coerced sale price.

    Returns:
        Key of the form ``{epoch_ms}|{address}|{price}``.
    """
    epoch_millis = (closed_at - _EPOCH) // _ONE_MILLISECOND
    folded_address = address.strip().lower()
    return FINGERPRINT_SEPARATOR.join(
        (str(epoch_millis), folded_address, format_price_key(price))
    )


def format_price_key(price: float) -> str:
    """Render a price for fingerprints, dropping ``.0`` from whole numbers."""
    if float(price).is_integer():
        return str(int(price))
    return repr(float(price))


def build_storage_id(fingerprint: str) -> str:
    """Convert a fingerprint into a document id safe for the store."""
    return fingerprint.replace(STORAGE_ID_UNSAFE_CHARACTER, STORAGE_ID_REPLACEMENT)


def remove_duplicate_records(records: Iterable[CanonicalRecord]) -> list[CanonicalRecord]:
    """Remove duplicate records, keeping the first occurrence.

    Input order is preserved, so for a most-recent-first query result the
    most recent copy survives. Running this on its own output is a no-op.

    Args:
        records: Records to evaluate.

    Returns:
        Ordered records with duplicates removed.
    """
    unique_records: list[CanonicalRecord] = []
    seen_fingerprints: set[str] = set()
    for record in records:
        if record.fingerprint in seen_fingerprints:
            continue
        seen_fingerprints.add(record.fingerprint)
        unique_records.append(record)
    return unique_records


def collapse_duplicates_keep_last(records: Iterable[CanonicalRecord]) -> list[CanonicalRecord]:
    """Collapse records sharing a fingerprint, letting later rows win.

    The surviving record keeps the position of the first occurrence and
    the field values of the last one, matching overwrite-on-write storage.

    Args:
        records: Records in upload order.

    Returns:
        One record per fingerprint.
    """
    latest_by_fingerprint: dict[str, CanonicalRecord] = {}
    for record in records:
        latest_by_fingerprint[record.fingerprint] = record
    return list(latest_by_fingerprint.values())
