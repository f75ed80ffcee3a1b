"""
Track map pipeline orchestration.

Runs one complete, synchronous pass over the current frames and options:
extraction -> track building -> liveness -> override tables -> projection
-> bounds and center. Nothing is carried between runs; identical input and
options give identical results.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from trackmap.core.exceptions import TrackMapDataError
from trackmap.domains.mapping.entities.bounds import Bounds
from trackmap.domains.mapping.services.bounds_calculator import BoundsCalculator
from trackmap.domains.tracking.entities.frame import Frame, frames_from_payload
from trackmap.domains.tracking.entities.track import Track
from trackmap.domains.tracking.services.field_extractor import FieldExtractor
from trackmap.domains.tracking.services.liveness_evaluator import LivenessEvaluator
from trackmap.domains.tracking.services.track_builder import TrackBuilder
from trackmap.domains.visualization.entities.view_datasets import ViewDatasets
from trackmap.domains.visualization.services.style_overrides import StyleOverrides
from trackmap.domains.visualization.services.view_projector import ViewProjector
from trackmap.shared.options import TrackMapOptions
from trackmap.shared.types import TrackKey

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_NO_DATA = "no_data"


@dataclass(frozen=True)
class TrackMapResult:
    """Everything the rendering layer needs from one pipeline run."""

    status: str
    datasets: ViewDatasets
    center: Tuple[float, float]
    zoom: float
    tracks: Tuple[Track, ...] = ()
    liveness: Dict[TrackKey, bool] = field(default_factory=dict)
    bounds: Optional[Bounds] = None
    fit_to_bounds: bool = False
    message: Optional[str] = None
    tile_layer: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.status == STATUS_OK and any(not t.is_synthetic for t in self.tracks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "tracks": [t.to_summary() for t in self.tracks],
            "liveness": dict(self.liveness),
            **self.datasets.to_dict(),
            "center": list(self.center),
            "zoom": self.zoom,
            "bounds": self.bounds.to_dict() if self.bounds else None,
            "fit_to_bounds": self.fit_to_bounds,
            "tile_layer": dict(self.tile_layer),
        }


class TrackMapPipeline:
    """
    Orchestrates the track aggregation and view projection pipeline.

    Features:
    - Per-run override tables built once and passed to the projector
    - Bounds over the tracks of every mode requesting zoom to data
    - "no data" result instead of an exception for unreadable input
    """

    def __init__(
        self,
        field_extractor: Optional[FieldExtractor] = None,
        track_builder: Optional[TrackBuilder] = None,
        liveness_evaluator: Optional[LivenessEvaluator] = None,
        view_projector: Optional[ViewProjector] = None,
        bounds_calculator: Optional[BoundsCalculator] = None
    ):
        self.field_extractor = field_extractor or FieldExtractor()
        self.track_builder = track_builder or TrackBuilder(self.field_extractor)
        self.liveness_evaluator = liveness_evaluator or LivenessEvaluator()
        self.view_projector = view_projector or ViewProjector()
        self.bounds_calculator = bounds_calculator or BoundsCalculator()
        self.pipeline_stats = {
            "runs": 0,
            "no_data_runs": 0,
            "last_run_ms": 0.0
        }
        logger.info("TrackMapPipeline initialized")

    def run(self, frames: Iterable[Frame], options: Optional[TrackMapOptions] = None) -> TrackMapResult:
        """
        Run the whole pipeline on parsed frames.

        Args:
            frames: Input frames in host order
            options: Panel options; defaults when omitted

        Returns:
            TrackMapResult with all four datasets, center, and bounds when a
            mode requests zoom to data
        """
        started = time.perf_counter()
        options = options or TrackMapOptions()

        track_set = self.track_builder.build(frames)
        tracks: List[Track] = list(track_set)
        liveness = self.liveness_evaluator.evaluate_all(tracks)

        overrides = StyleOverrides.from_options(options)
        datasets = self.view_projector.project(tracks, options, overrides)

        bounds = None
        fit_to_bounds = False
        if self.bounds_calculator.fit_requested(options):
            qualifying = self.bounds_calculator.qualifying_tracks(tracks, options, self.view_projector)
            bounds = self.bounds_calculator.calculate(qualifying)
            fit_to_bounds = len(qualifying) > 0

        center = self.bounds_calculator.resolve_center(tracks, options)

        self.pipeline_stats["runs"] += 1
        self.pipeline_stats["last_run_ms"] = (time.perf_counter() - started) * 1000
        logger.debug(
            f"Pipeline run: {len(tracks)} tracks, {len(datasets.markers)} markers, "
            f"{len(datasets.ant_paths)} ant paths, {len(datasets.heat_points)} heat points, "
            f"{len(datasets.hex_features)} hex features"
        )

        return TrackMapResult(
            status=STATUS_OK,
            datasets=datasets,
            center=center,
            zoom=options.map.zoom,
            tracks=tuple(tracks),
            liveness=liveness,
            bounds=bounds,
            fit_to_bounds=fit_to_bounds,
            tile_layer=options.map.tile_layer(),
        )

    def run_raw(self, payload: Any, options: Optional[TrackMapOptions] = None) -> TrackMapResult:
        """Parse frame JSON and run; unreadable input yields a "no data" result."""
        options = options or TrackMapOptions()
        try:
            frames = frames_from_payload(payload)
        except TrackMapDataError as e:
            logger.warning(f"Input frames could not be parsed: {e.message}")
            return self.no_data_result(options, e.message)
        return self.run(frames, options)

    def no_data_result(self, options: TrackMapOptions, message: str) -> TrackMapResult:
        self.pipeline_stats["no_data_runs"] += 1
        return TrackMapResult(
            status=STATUS_NO_DATA,
            datasets=ViewDatasets(),
            center=(options.map.center_latitude, options.map.center_longitude),
            zoom=options.map.zoom,
            message=message,
            tile_layer=options.map.tile_layer(),
        )
