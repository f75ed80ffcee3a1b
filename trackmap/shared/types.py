"""
Module for shared type aliases and enumerations used across the application.
"""
from enum import Enum
from typing import NewType

TrackKey = NewType("TrackKey", str)   # Stable entity identifier (track field value or label)
RefId = NewType("RefId", str)         # Query identifier of the frame a track came from

SYNTHETIC_TRACK_KEY = TrackKey("__no_data__")

# Host query variable names published on viewport changes
VAR_MIN_LAT = "var-minLat"
VAR_MIN_LON = "var-minLon"
VAR_MAX_LAT = "var-maxLat"
VAR_MAX_LON = "var-maxLon"


class ViewType(str, Enum):
    """Visualization modes the projector can produce."""
    MARKER = "marker"
    ANT = "ant"
    HEAT = "heat"
    HEX = "hex"


class KeyingScheme(str, Enum):
    """How a track's key was derived."""
    VALUE = "value"          # per-sample `track` field value
    LABEL = "label"          # frame-level `track` label
    FRAME = "frame"          # no track information; keyed by the frame itself
    SYNTHETIC = "synthetic"  # no-data fallback track


class CenterMode(str, Enum):
    """Where the map center comes from."""
    FIXED = "fixed"
    FIRST = "first"
    LAST = "last"
