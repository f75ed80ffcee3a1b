"""
Track entities for entity position sequences.

Contains the per-sample row model, positions, tracks and the ordered track set
used by the aggregation pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
import math

from trackmap.shared.types import KeyingScheme, RefId, TrackKey


def is_valid_coordinate(value: Any) -> bool:
    """A coordinate is usable when it parses as a finite number."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


@dataclass(frozen=True)
class SampleRow:
    """One zipped row of a frame, all known columns side by side."""

    index: int
    track: Optional[Any] = None
    latitude: Optional[Any] = None
    longitude: Optional[Any] = None
    timestamp: Optional[Any] = None
    intensity: Optional[Any] = None
    popup: Optional[str] = None
    tooltip: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Position:
    """Single sample on a track. Null coordinates mark an alignment gap."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timestamp: Optional[Any] = None
    intensity: Optional[Any] = None
    popup: Optional[str] = None
    tooltip: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)

    @property
    def has_coordinates(self) -> bool:
        return is_valid_coordinate(self.latitude) and is_valid_coordinate(self.longitude)

    @classmethod
    def from_row(cls, row: SampleRow) -> 'Position':
        return cls(
            latitude=_as_float(row.latitude),
            longitude=_as_float(row.longitude),
            timestamp=row.timestamp,
            intensity=row.intensity,
            popup=row.popup,
            tooltip=row.tooltip,
            labels=dict(row.labels),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timestamp": self.timestamp,
            "intensity": self.intensity,
            "popup": self.popup,
            "tooltip": self.tooltip,
            "labels": dict(self.labels),
        }


@dataclass
class Track:
    """Logical moving entity: a stable key and its ordered positions."""

    key: TrackKey
    index: int
    keyed_by: KeyingScheme
    ref_id: Optional[RefId] = None
    labels: Dict[str, str] = field(default_factory=dict)
    positions: List[Position] = field(default_factory=list)
    is_live: bool = False

    @property
    def valid_positions(self) -> List[Position]:
        return [p for p in self.positions if p.has_coordinates]

    @property
    def is_synthetic(self) -> bool:
        return self.keyed_by == KeyingScheme.SYNTHETIC

    def append(self, position: Position) -> None:
        self.positions.append(position)

    def to_summary(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "index": self.index,
            "ref_id": self.ref_id,
            "keyed_by": self.keyed_by.value,
            "labels": dict(self.labels),
            "position_count": len(self.positions),
            "valid_position_count": len(self.valid_positions),
            "live": self.is_live,
        }


class TrackSet:
    """Insertion-ordered mapping of track key to track."""

    def __init__(self):
        self._tracks: Dict[TrackKey, Track] = {}

    def get_or_insert(
        self,
        key: TrackKey,
        keyed_by: KeyingScheme,
        labels: Optional[Dict[str, str]] = None
    ) -> Track:
        """Return the track for key, creating it at the end of the order if new."""
        track = self._tracks.get(key)
        if track is None:
            track = Track(
                key=key,
                index=len(self._tracks),
                keyed_by=keyed_by,
                labels=dict(labels or {}),
            )
            self._tracks[key] = track
        return track

    def get(self, key: TrackKey) -> Optional[Track]:
        return self._tracks.get(key)

    @property
    def keys(self) -> List[TrackKey]:
        return list(self._tracks.keys())

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks.values())

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, key: object) -> bool:
        return key in self._tracks

    def __getitem__(self, index: int) -> Track:
        return list(self._tracks.values())[index]


def _as_float(value: Any) -> Optional[float]:
    if not is_valid_coordinate(value):
        return None
    return float(value)
