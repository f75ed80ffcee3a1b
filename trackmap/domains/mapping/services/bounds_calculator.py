"""
Bounds calculation service for fit-to-data viewports.

Provides business logic for:
- Bounding box over the valid positions of a track subset
- Selecting the tracks whose modes request zoom to data bounds
- Resolving the map center from configuration or data
"""

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from trackmap.domains.mapping.entities.bounds import Bounds, FULL_EXTENT
from trackmap.domains.tracking.entities.track import Track
from trackmap.domains.visualization.services.view_projector import ViewProjector
from trackmap.shared.options import TrackMapOptions
from trackmap.shared.types import CenterMode, ViewType

logger = logging.getLogger(__name__)


class BoundsCalculator:
    """Service computing planar bounding boxes over tracks."""

    def calculate(self, tracks: Iterable[Track]) -> Bounds:
        """
        Minimal box enclosing every valid position of the given tracks.

        Returns:
            The bounding box, or FULL_EXTENT when no position has coordinates
        """
        coords = [
            (p.latitude, p.longitude)
            for track in tracks
            for p in track.valid_positions
        ]
        if not coords:
            return FULL_EXTENT

        points = np.asarray(coords, dtype=float)
        mins = points.min(axis=0)
        maxs = points.max(axis=0)
        return Bounds(
            min_lat=float(mins[0]),
            min_lon=float(mins[1]),
            max_lat=float(maxs[0]),
            max_lon=float(maxs[1]),
        )

    def qualifying_tracks(
        self,
        tracks: Iterable[Track],
        options: TrackMapOptions,
        projector: ViewProjector
    ) -> List[Track]:
        """Tracks assigned to at least one enabled mode that zooms to data bounds."""
        zoom_modes = [v for v in ViewType if options.is_enabled(v) and options.zooms_to_data(v)]
        return [
            track for track in tracks
            if any(projector.is_assigned(track, view_type, options) for view_type in zoom_modes)
        ]

    def fit_requested(self, options: TrackMapOptions) -> bool:
        return any(options.is_enabled(v) and options.zooms_to_data(v) for v in ViewType)

    def resolve_center(self, tracks: List[Track], options: TrackMapOptions) -> Tuple[float, float]:
        """Configured center, or the first/last valid position when requested and available."""
        default = (options.map.center_latitude, options.map.center_longitude)
        mode = options.map.center_mode

        position = None
        if mode == CenterMode.FIRST:
            position = _first_valid(tracks)
        elif mode == CenterMode.LAST:
            position = _last_valid(tracks)

        if position is None:
            return default
        return position


def _first_valid(tracks: List[Track]) -> Optional[Tuple[float, float]]:
    for track in tracks:
        for p in track.positions:
            if p.has_coordinates:
                return (p.latitude, p.longitude)
    return None


def _last_valid(tracks: List[Track]) -> Optional[Tuple[float, float]]:
    for track in reversed(tracks):
        for p in reversed(track.positions):
            if p.has_coordinates:
                return (p.latitude, p.longitude)
    return None
