"""
Orchestration layer.

Runs the track map pipeline end to end for one frame set and option set.
"""

from .track_map_pipeline import TrackMapPipeline, TrackMapResult

__all__ = [
    'TrackMapPipeline',
    'TrackMapResult'
]
