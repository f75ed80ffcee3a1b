"""
View projection service for map visualization modes.

Provides business logic for:
- Deciding which tracks feed which visualization mode
- Marker projection with popup synthesis and last-only/live-only filtering
- Ant path projection with per-track color and pause resolution
- Heatmap point and hexbin feature projection

Positions without coordinates are skipped by every projection; tracks are
visited in their stable first-appearance order.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from trackmap.domains.tracking.entities.track import Position, Track
from trackmap.domains.visualization.entities.view_datasets import (
    AntPathRecord,
    AntPathSet,
    AntPathStyle,
    HeatPoint,
    HeatPoints,
    HexbinStyle,
    HexFeature,
    HexFeatureCollection,
    MarkerRecord,
    MarkerSet,
    ViewDatasets,
)
from trackmap.domains.visualization.services.style_overrides import StyleOverrides
from trackmap.shared.options import TrackMapOptions
from trackmap.shared.types import KeyingScheme, ViewType

logger = logging.getLogger(__name__)


class ViewProjector:
    """
    Service transforming the shared track set into per-mode datasets.

    Every projection is a pure function of (tracks, options, overrides); the
    override tables are passed in rather than built here so that one pipeline
    run builds them exactly once.
    """

    def __init__(self):
        self.projector_stats = {
            "projections": 0,
            "markers_emitted": 0,
            "ant_paths_emitted": 0,
            "ant_paths_omitted": 0,
            "heat_points_emitted": 0,
            "hex_features_emitted": 0
        }
        logger.info("ViewProjector initialized")

    # --- Mode assignment ---

    def is_assigned(self, track: Track, view_type: ViewType, options: TrackMapOptions) -> bool:
        """Whether a track feeds the given mode."""
        if track.is_synthetic or not options.is_enabled(view_type):
            return False
        if track.keyed_by == KeyingScheme.LABEL:
            return True
        return track.ref_id is not None and track.ref_id in options.queries_for(view_type)

    def assigned_tracks(self, tracks: Iterable[Track], view_type: ViewType, options: TrackMapOptions) -> List[Track]:
        return [t for t in tracks if self.is_assigned(t, view_type, options)]

    # --- Projections ---

    def project(self, tracks: Iterable[Track], options: TrackMapOptions, overrides: StyleOverrides) -> ViewDatasets:
        """Project every enabled mode; disabled modes yield empty datasets."""
        tracks = list(tracks)
        self.projector_stats["projections"] += 1
        return ViewDatasets(
            markers=self.project_markers(tracks, options, overrides),
            ant_paths=self.project_ant_paths(tracks, options, overrides),
            heat_points=self.project_heatmap(tracks, options),
            hex_features=self.project_hexbin(tracks, options),
        )

    def project_markers(self, tracks: Iterable[Track], options: TrackMapOptions, overrides: StyleOverrides) -> MarkerSet:
        marker_opts = options.marker
        markers: List[MarkerRecord] = []

        for track in self.assigned_tracks(tracks, ViewType.MARKER, options):
            positions = track.valid_positions
            if marker_opts.last_only:
                if marker_opts.live_only and not track.is_live:
                    continue
                positions = positions[-1:]

            color_selectors = (track.ref_id, track.key)
            color = overrides.marker_color.resolve(color_selectors, marker_opts.color)
            size = overrides.marker_size.resolve(color_selectors, marker_opts.size)
            icon_html = overrides.marker_html.resolve(
                (track.key, *track.labels.values()), marker_opts.default_icon_html
            )

            for position in positions:
                popup = position.popup if position.popup else synthesize_popup(track, position)
                markers.append(MarkerRecord(
                    track=track.key,
                    track_index=track.index,
                    latitude=position.latitude,
                    longitude=position.longitude,
                    color=color,
                    size=size,
                    popup=popup,
                    tooltip=position.tooltip if position.tooltip else popup,
                    icon_html=icon_html,
                    tooltip_permanent=marker_opts.tooltip_permanent,
                    timestamp=position.timestamp,
                    live=track.is_live,
                ))

        self.projector_stats["markers_emitted"] += len(markers)
        return MarkerSet(markers=tuple(markers))

    def project_ant_paths(self, tracks: Iterable[Track], options: TrackMapOptions, overrides: StyleOverrides) -> AntPathSet:
        ant_opts = options.ant
        paths: List[AntPathRecord] = []
        omitted = []

        for track in self.assigned_tracks(tracks, ViewType.ANT, options):
            positions = track.valid_positions
            if len(positions) < 2:
                omitted.append(track.key)
                continue

            style = AntPathStyle(
                delay=ant_opts.delay,
                weight=ant_opts.weight,
                color=overrides.ant_color.resolve((track.ref_id, track.key), ant_opts.color),
                pulse_color=ant_opts.pulse_color,
                opacity=ant_opts.opacity,
                paused=ant_opts.paused or (ant_opts.pause_non_live and not track.is_live),
                reverse=ant_opts.reverse,
            )
            first_popup = next((p.popup for p in positions if p.popup), None)
            paths.append(AntPathRecord(
                track=track.key,
                track_index=track.index,
                positions=tuple((p.latitude, p.longitude) for p in positions),
                style=style,
                popup=first_popup,
                live=track.is_live,
            ))

        if omitted:
            logger.debug(f"Ant path omitted for {len(omitted)} tracks with fewer than two valid points")
        self.projector_stats["ant_paths_emitted"] += len(paths)
        self.projector_stats["ant_paths_omitted"] += len(omitted)
        return AntPathSet(paths=tuple(paths), omitted_tracks=tuple(omitted))

    def project_heatmap(self, tracks: Iterable[Track], options: TrackMapOptions) -> HeatPoints:
        points = [
            HeatPoint(
                latitude=p.latitude,
                longitude=p.longitude,
                intensity=_as_intensity(p.intensity),
                track_index=track.index,
            )
            for track in self.assigned_tracks(tracks, ViewType.HEAT, options)
            for p in track.valid_positions
        ]
        self.projector_stats["heat_points_emitted"] += len(points)
        return HeatPoints(
            points=tuple(points),
            fit_bounds_on_load=options.heat.fit_bounds_on_load,
            fit_bounds_on_update=options.heat.fit_bounds_on_update,
        )

    def project_hexbin(self, tracks: Iterable[Track], options: TrackMapOptions) -> HexFeatureCollection:
        hex_opts = options.hex
        features = [
            HexFeature(track_index=track.index, latitude=p.latitude, longitude=p.longitude)
            for track in self.assigned_tracks(tracks, ViewType.HEX, options)
            for p in track.valid_positions
        ]
        self.projector_stats["hex_features_emitted"] += len(features)
        return HexFeatureCollection(
            features=tuple(features),
            style=HexbinStyle(
                opacity=hex_opts.opacity,
                color_range=(hex_opts.color_range_from, hex_opts.color_range_to),
                radius_range=(hex_opts.radius_range_from, hex_opts.radius_range_to),
            ),
        )


def synthesize_popup(track: Track, position: Position) -> str:
    """Multi-line popup text for a position without an explicit popup value."""
    lines = [
        f"Track: {track.key}",
        f"Latitude: {position.latitude}",
        f"Longitude: {position.longitude}",
        f"Timestamp: {format_timestamp(position.timestamp)}",
    ]
    if position.labels:
        lines.append(f"Labels: {json.dumps(position.labels, sort_keys=True)}")
    return "\n".join(lines)


def format_timestamp(timestamp: Any) -> str:
    """Render epoch milliseconds as ISO-8601 UTC; other values as text."""
    if timestamp is None:
        return "-"
    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        try:
            return datetime.fromtimestamp(timestamp / 1000.0, tz=timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            return str(timestamp)
    return str(timestamp)


def _as_intensity(value: Any) -> Optional[Any]:
    if value is None or value == "":
        return None
    return value
