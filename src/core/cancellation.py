"""Cooperative cancellation for long-running pipeline runs.

Load and upload runs check a token between stages and chunks.
A cancelled run stops at the next check without rolling back commits.
"""

from __future__ import annotations

import threading

from core.errors import SalesboardCancelledError


class CancellationToken:
    """Thread-safe flag a caller sets to stop an in-flight run."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        """Return whether cancellation was requested."""
        return self._event.is_set()

    def raise_if_cancelled(self, stage: str) -> None:
        """Raise when cancellation was requested.

        Args:
            stage: Pipeline stage name for error context.

        Raises:
            SalesboardCancelledError: If the token was cancelled.
        """
        if self._event.is_set():
            raise SalesboardCancelledError(
                f"Pipeline cancelled before stage '{stage}'. "
                "Work committed before this point is kept."
            )
