"""
Exception types for the track map pipeline.

Only conditions the pipeline cannot recover from are raised. Missing fields,
alignment gaps, empty input and override misses are handled in place.
"""

from typing import Any, Dict, Optional


class TrackMapError(Exception):
    """Base class for track map errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TrackMapDataError(TrackMapError):
    """Input cannot be read as data frames at all."""


class VariableStoreError(TrackMapError):
    """Writing to or reading from the host variable store failed."""
