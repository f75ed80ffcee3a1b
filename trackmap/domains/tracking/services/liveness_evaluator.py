"""Liveness classification for tracks."""

import logging
from typing import Dict, Iterable

from trackmap.domains.tracking.entities.track import Track
from trackmap.shared.types import TrackKey

logger = logging.getLogger(__name__)


class LivenessEvaluator:
    """A track is live when its most recent position has both coordinates."""

    def evaluate(self, track: Track) -> bool:
        if not track.positions:
            return False
        return track.positions[-1].has_coordinates

    def evaluate_all(self, tracks: Iterable[Track]) -> Dict[TrackKey, bool]:
        """Set `is_live` on every track and return the flags in track order."""
        liveness: Dict[TrackKey, bool] = {}
        for track in tracks:
            track.is_live = self.evaluate(track)
            liveness[track.key] = track.is_live

        stale = [key for key, live in liveness.items() if not live]
        if stale:
            logger.debug(f"{len(stale)} of {len(liveness)} tracks are stale")
        return liveness
