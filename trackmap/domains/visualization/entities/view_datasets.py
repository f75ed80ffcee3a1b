"""
View dataset entities for the map rendering layer.

Each dataset is derived, read-only and rebuilt from scratch on every pipeline
run. ``to_dict`` produces the JSON shape the map widget consumes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from trackmap.shared.types import TrackKey


@dataclass(frozen=True)
class MarkerRecord:
    """Single marker at one position of a track."""

    track: TrackKey
    track_index: int
    latitude: float
    longitude: float
    color: str
    size: float
    popup: str
    tooltip: str
    icon_html: Optional[str] = None
    tooltip_permanent: bool = False
    timestamp: Optional[Any] = None
    live: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "track": self.track,
            "track_index": self.track_index,
            "center": [self.latitude, self.longitude],
            "color": self.color,
            "size": self.size,
            "icon_html": self.icon_html,
            "popup": self.popup,
            "tooltip": self.tooltip,
            "tooltip_permanent": self.tooltip_permanent,
            "timestamp": self.timestamp,
            "live": self.live,
        }


@dataclass(frozen=True)
class MarkerSet:
    markers: Tuple[MarkerRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.markers)

    def for_track(self, key: TrackKey) -> List[MarkerRecord]:
        return [m for m in self.markers if m.track == key]

    def to_dict(self) -> Dict[str, Any]:
        return {"markers": [m.to_dict() for m in self.markers]}


@dataclass(frozen=True)
class AntPathStyle:
    """Animation and stroke options for one ant path."""

    delay: int
    weight: float
    color: str
    pulse_color: str
    opacity: float
    paused: bool
    reverse: bool
    dash_array: Tuple[int, int] = (20, 5)
    line_cap: str = "butt"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "delay": self.delay,
            "dashArray": list(self.dash_array),
            "weight": self.weight,
            "color": self.color,
            "pulseColor": self.pulse_color,
            "opacity": self.opacity,
            "paused": self.paused,
            "reverse": self.reverse,
            "lineCap": self.line_cap,
        }


@dataclass(frozen=True)
class AntPathRecord:
    track: TrackKey
    track_index: int
    positions: Tuple[Tuple[float, float], ...]
    style: AntPathStyle
    popup: Optional[str] = None
    live: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "track": self.track,
            "track_index": self.track_index,
            "positions": [[lat, lon] for lat, lon in self.positions],
            "options": self.style.to_dict(),
            "popup": self.popup,
            "live": self.live,
        }


@dataclass(frozen=True)
class AntPathSet:
    paths: Tuple[AntPathRecord, ...] = ()
    omitted_tracks: Tuple[TrackKey, ...] = ()  # assigned tracks with fewer than two valid points

    def __len__(self) -> int:
        return len(self.paths)

    def for_track(self, key: TrackKey) -> List[AntPathRecord]:
        return [p for p in self.paths if p.track == key]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "paths": [p.to_dict() for p in self.paths],
            "omitted_tracks": list(self.omitted_tracks),
        }


@dataclass(frozen=True)
class HeatPoint:
    latitude: float
    longitude: float
    intensity: Optional[Any] = None
    track_index: int = 0

    def as_triple(self) -> List[Any]:
        return [self.latitude, self.longitude, self.intensity]


@dataclass(frozen=True)
class HeatPoints:
    points: Tuple[HeatPoint, ...] = ()
    fit_bounds_on_load: bool = False
    fit_bounds_on_update: bool = False

    def __len__(self) -> int:
        return len(self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "points": [p.as_triple() for p in self.points],
            "fit_bounds_on_load": self.fit_bounds_on_load,
            "fit_bounds_on_update": self.fit_bounds_on_update,
        }


@dataclass(frozen=True)
class HexFeature:
    """GeoJSON point feature tagged with its originating track index."""

    track_index: int
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "id": self.track_index,
            "geometry": {
                "type": "Point",
                "coordinates": [self.longitude, self.latitude],
            },
        }


@dataclass(frozen=True)
class HexbinStyle:
    opacity: float
    color_range: Tuple[str, str]
    radius_range: Tuple[float, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "opacity": self.opacity,
            "colorRange": list(self.color_range),
            "radiusRange": list(self.radius_range),
            "colorScaleExtent": [1, None],
            "radiusScaleExtent": [1, None],
        }


@dataclass(frozen=True)
class HexFeatureCollection:
    features: Tuple[HexFeature, ...] = ()
    style: Optional[HexbinStyle] = None

    def __len__(self) -> int:
        return len(self.features)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "FeatureCollection",
            "features": [f.to_dict() for f in self.features],
            "options": self.style.to_dict() if self.style else None,
        }


@dataclass(frozen=True)
class ViewDatasets:
    """The four projections produced by one pipeline run."""

    markers: MarkerSet = field(default_factory=MarkerSet)
    ant_paths: AntPathSet = field(default_factory=AntPathSet)
    heat_points: HeatPoints = field(default_factory=HeatPoints)
    hex_features: HexFeatureCollection = field(default_factory=HexFeatureCollection)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "markers": self.markers.to_dict(),
            "ant_paths": self.ant_paths.to_dict(),
            "heat_points": self.heat_points.to_dict(),
            "hex_features": self.hex_features.to_dict(),
        }
