"""
Map widget port and a headless implementation.

The interactive widget lives in the client; the pipeline only needs four of
its operations. HeadlessMapWidget implements them server-side with planar
aspect-ratio snapping so fit-to-data can be resolved without a browser.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from trackmap.domains.mapping.entities.bounds import Bounds, FULL_EXTENT

logger = logging.getLogger(__name__)

MoveEndHandler = Callable[['MapWidget'], None]


class MapWidget(ABC):
    """Operations the viewport synchronizer consumes from a map widget."""

    @abstractmethod
    def fit_bounds(self, bounds: Bounds, animate: bool = False) -> None:
        """Fit the view to the given box."""

    @abstractmethod
    def get_bounds(self) -> Bounds:
        """Currently visible box."""

    @abstractmethod
    def invalidate_size(self) -> None:
        """Re-measure the container."""

    @abstractmethod
    def subscribe_move_end(self, handler: MoveEndHandler) -> None:
        """Register a handler for move-completion events."""


class HeadlessMapWidget(MapWidget):
    """
    In-process map widget with a fixed pixel viewport.

    ``fit_bounds`` widens the requested box around its center until its
    lon/lat span ratio matches the viewport's width/height, so the visible
    box read back afterwards may be larger than the one requested.
    """

    def __init__(
        self,
        width_px: int,
        height_px: int,
        bounds: Optional[Bounds] = None,
        min_span_deg: float = 0.001
    ):
        if width_px <= 0 or height_px <= 0:
            raise ValueError("Viewport dimensions must be positive")
        self.width_px = width_px
        self.height_px = height_px
        self.min_span_deg = min_span_deg
        self._bounds = bounds or FULL_EXTENT
        self._handlers: List[MoveEndHandler] = []
        self.size_invalidations = 0
        self.fit_calls = 0

    @property
    def aspect_ratio(self) -> float:
        return self.width_px / self.height_px

    def fit_bounds(self, bounds: Bounds, animate: bool = False) -> None:
        self.fit_calls += 1
        self._bounds = self._snap_to_aspect(bounds)
        logger.debug(f"Headless widget fitted to {self._bounds.to_dict()} (animate={animate})")

    def get_bounds(self) -> Bounds:
        return self._bounds

    def invalidate_size(self) -> None:
        self.size_invalidations += 1

    def subscribe_move_end(self, handler: MoveEndHandler) -> None:
        self._handlers.append(handler)

    def move_to(self, bounds: Bounds) -> None:
        """Emulate a completed user pan/zoom and notify subscribers."""
        self._bounds = bounds.clamp(FULL_EXTENT)
        for handler in list(self._handlers):
            handler(self)

    def _snap_to_aspect(self, bounds: Bounds) -> Bounds:
        lat_span = max(bounds.lat_span, self.min_span_deg)
        lon_span = max(bounds.lon_span, self.min_span_deg)

        if lon_span / lat_span < self.aspect_ratio:
            lon_span = lat_span * self.aspect_ratio
        else:
            lat_span = lon_span / self.aspect_ratio

        center_lat, center_lon = bounds.center
        snapped = Bounds(
            min_lat=center_lat - lat_span / 2.0,
            min_lon=center_lon - lon_span / 2.0,
            max_lat=center_lat + lat_span / 2.0,
            max_lon=center_lon + lon_span / 2.0,
        )
        return snapped.clamp(FULL_EXTENT)
