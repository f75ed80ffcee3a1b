"""
Viewport synchronization service.

Provides business logic for:
- Fitting the map widget to the data bounds without animation
- Reading back the visible box after aspect-ratio snapping
- Publishing the visible box to the host's query variables on every move

Publishing is fire-and-forget: a failed host write is logged and dropped,
never retried, and each publish carries the complete box so overlapping
moves simply resolve to the last write.
"""

import logging
from typing import Dict

from trackmap.core.exceptions import VariableStoreError
from trackmap.domains.mapping.entities.bounds import Bounds
from trackmap.domains.mapping.models.map_widget import MapWidget
from trackmap.infrastructure.cache.variable_store import HostVariableStore
from trackmap.shared.types import VAR_MAX_LAT, VAR_MAX_LON, VAR_MIN_LAT, VAR_MIN_LON

logger = logging.getLogger(__name__)


def bounds_to_variables(bounds: Bounds) -> Dict[str, float]:
    """South-west / north-east corners as host query variables."""
    return {
        VAR_MIN_LAT: bounds.min_lat,
        VAR_MIN_LON: bounds.min_lon,
        VAR_MAX_LAT: bounds.max_lat,
        VAR_MAX_LON: bounds.max_lon,
    }


class ViewportSynchronizer:
    """Keeps the map viewport and the host's bound variables in step."""

    def __init__(self, variable_store: HostVariableStore, publish_bounds: bool = True):
        self.variable_store = variable_store
        self.publish_bounds = publish_bounds
        self.sync_stats = {
            "fits": 0,
            "move_events": 0,
            "publishes": 0,
            "publish_failures": 0
        }

    def attach(self, widget: MapWidget) -> None:
        """Subscribe to the widget's move-completion events."""
        widget.subscribe_move_end(self.on_move_end)

    def fit_to_data(self, widget: MapWidget, bounds: Bounds) -> Bounds:
        """
        Fit the widget to the given box and publish what it actually shows.

        Returns:
            The widget's visible bounds after the fit
        """
        widget.fit_bounds(bounds, animate=False)
        visible = widget.get_bounds()
        self.sync_stats["fits"] += 1
        self.publish(visible)
        return visible

    def on_move_end(self, widget: MapWidget) -> None:
        """Move-completion handler; side effects only."""
        self.sync_stats["move_events"] += 1
        widget.invalidate_size()
        self.publish(widget.get_bounds())

    def publish(self, bounds: Bounds) -> bool:
        """Write the box to the host as a partial update. Returns whether it was written."""
        if not self.publish_bounds:
            return False
        try:
            self.variable_store.update(bounds_to_variables(bounds), partial=True)
        except VariableStoreError as e:
            self.sync_stats["publish_failures"] += 1
            logger.error(f"Failed to publish viewport bounds to host variables: {e}")
            return False
        self.sync_stats["publishes"] += 1
        return True
