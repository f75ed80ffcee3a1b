"""
Bounds value object for planar latitude/longitude boxes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned coordinate box."""

    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    def __post_init__(self):
        """Validate bounds parameters."""
        if self.min_lat > self.max_lat:
            raise ValueError("min_lat must not exceed max_lat")
        if self.min_lon > self.max_lon:
            raise ValueError("min_lon must not exceed max_lon")

    @property
    def south_west(self) -> Tuple[float, float]:
        return (self.min_lat, self.min_lon)

    @property
    def north_east(self) -> Tuple[float, float]:
        return (self.max_lat, self.max_lon)

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_lat + self.max_lat) / 2.0, (self.min_lon + self.max_lon) / 2.0)

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_span(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def is_full_extent(self) -> bool:
        return self == FULL_EXTENT

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.min_lat <= latitude <= self.max_lat and self.min_lon <= longitude <= self.max_lon

    def clamp(self, outer: 'Bounds') -> 'Bounds':
        """Intersect with an outer box; the result never leaves it.

        A box lying entirely outside the outer one clamps to the outer box.
        """
        min_lat = max(self.min_lat, outer.min_lat)
        min_lon = max(self.min_lon, outer.min_lon)
        max_lat = min(self.max_lat, outer.max_lat)
        max_lon = min(self.max_lon, outer.max_lon)
        if min_lat > max_lat or min_lon > max_lon:
            return outer
        return Bounds(min_lat=min_lat, min_lon=min_lon, max_lat=max_lat, max_lon=max_lon)

    def as_corners(self) -> List[List[float]]:
        """Leaflet-style [[south, west], [north, east]]."""
        return [[self.min_lat, self.min_lon], [self.max_lat, self.max_lon]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_lat": self.min_lat,
            "min_lon": self.min_lon,
            "max_lat": self.max_lat,
            "max_lon": self.max_lon,
        }

    @classmethod
    def from_corners(cls, south_west: Tuple[float, float], north_east: Tuple[float, float]) -> 'Bounds':
        return cls(
            min_lat=float(south_west[0]),
            min_lon=float(south_west[1]),
            max_lat=float(north_east[0]),
            max_lon=float(north_east[1]),
        )


FULL_EXTENT = Bounds(min_lat=-90.0, min_lon=-180.0, max_lat=90.0, max_lon=180.0)
