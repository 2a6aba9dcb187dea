"""Salesboard exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class SalesboardError(Exception):
    """Base exception for all Salesboard failures."""


class SalesboardConfigError(SalesboardError):
    """Raised for invalid runtime configuration."""


class SalesboardIngestError(SalesboardError):
    """Raised for upload source reading and parsing failures."""


class SalesboardConnectionError(SalesboardError):
    """Raised when the document store cannot be reached in time."""


class SalesboardStoreError(SalesboardError):
    """Raised for document store read and write failures."""


class SalesboardUploadError(SalesboardError):
    """Raised when a batch upsert chunk fails after all attempts.

    Attributes:
        uploaded: Records committed before the failing chunk.
        remaining: Records not written because of the failure.
    """

    def __init__(self, message: str, uploaded: int, remaining: int) -> None:
        super().__init__(message)
        self.uploaded = uploaded
        self.remaining = remaining


class SalesboardFilterError(SalesboardError):
    """Raised for filter values that do not match a dimension type."""


class SalesboardDependencyError(SalesboardError):
    """Raised when an optional runtime dependency is missing."""


class SalesboardRunSpecError(SalesboardError):
    """Raised for invalid or unsupported run-spec configuration."""


class SalesboardCancelledError(SalesboardError):
    """Raised when a pipeline run observes a cancellation request."""
