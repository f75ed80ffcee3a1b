"""
Unit tests for ViewProjector in trackmap.domains.visualization.services.view_projector.
"""
import pytest

from trackmap.domains.tracking.entities.frame import Field, Frame
from trackmap.domains.tracking.services.liveness_evaluator import LivenessEvaluator
from trackmap.domains.tracking.services.track_builder import TrackBuilder
from trackmap.domains.visualization.services.style_overrides import StyleOverrides
from trackmap.domains.visualization.services.view_projector import ViewProjector, format_timestamp, synthesize_popup
from trackmap.shared.options import TrackMapOptions
from trackmap.shared.types import ViewType


@pytest.fixture
def projector():
    return ViewProjector()


def build_tracks(frames):
    tracks = list(TrackBuilder().build(frames))
    LivenessEvaluator().evaluate_all(tracks)
    return tracks


def options_with(**overrides) -> TrackMapOptions:
    data = {
        "viewTypes": ["marker", "ant", "heat", "hex"],
        "marker": {"queries": ["A"]},
        "ant": {"queries": ["A"]},
        "heat": {"queries": ["A"]},
        "hex": {"queries": ["A"]},
    }
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value
    return TrackMapOptions.model_validate(data)


def project(projector, tracks, options):
    return projector.project(tracks, options, StyleOverrides.from_options(options))


class TestModeAssignment:

    def test_assigned_when_query_listed(self, projector, two_track_frames):
        tracks = build_tracks(two_track_frames)

        assert projector.is_assigned(tracks[0], ViewType.MARKER, options_with())

    def test_not_assigned_when_query_missing(self, projector, two_track_frames):
        tracks = build_tracks(two_track_frames)

        assert not projector.is_assigned(tracks[0], ViewType.MARKER, options_with(marker={"queries": ["B"]}))

    def test_not_assigned_when_mode_disabled(self, projector, two_track_frames):
        tracks = build_tracks(two_track_frames)

        assert not projector.is_assigned(tracks[0], ViewType.ANT, options_with(viewTypes=["marker"]))

    def test_label_keyed_tracks_feed_every_enabled_mode(self, projector):
        frames = [Frame(
            fields=[Field(name="latitude", values=[1]), Field(name="longitude", values=[1])],
            ref_id="Z",
            labels={"track": "vehicle-7"},
        )]
        tracks = build_tracks(frames)
        options = options_with(marker={"queries": []})

        assert projector.is_assigned(tracks[0], ViewType.MARKER, options)

    def test_synthetic_track_is_never_assigned(self, projector):
        tracks = build_tracks([])

        assert not any(projector.is_assigned(tracks[0], v, options_with()) for v in ViewType)


class TestMarkers:

    def test_two_track_scenario(self, projector, two_track_frames):
        tracks = build_tracks(two_track_frames)

        markers = project(projector, tracks, options_with()).markers

        assert len(markers.for_track("T1")) == 2
        assert len(markers.for_track("T2")) == 0
        assert [t.is_live for t in tracks] == [True, False]

    def test_color_and_size_overrides(self, projector, two_track_frames):
        tracks = build_tracks(two_track_frames)
        options = options_with(marker={
            "colorOverridesByQuery": [{"label": "A", "color": "red"}],
            "sizeOverridesByQuery": [{"label": "T1", "size": 4}],
        })

        marker = project(projector, tracks, options).markers.markers[0]

        assert marker.color == "red"
        assert marker.size == 4

    def test_default_style_when_no_override_matches(self, projector, two_track_frames):
        tracks = build_tracks(two_track_frames)
        options = options_with(marker={"colorOverridesByQuery": [{"label": "B", "color": "red"}]})

        marker = project(projector, tracks, options).markers.markers[0]

        assert marker.color == options.marker.color
        assert marker.size == options.marker.size

    def test_icon_html_override_by_label_value(self, projector, frame_factory):
        frames = [frame_factory("A", labels={"kind": "boat"}, track=["T1"], latitude=[1], longitude=[1])]
        tracks = build_tracks(frames)
        options = options_with(marker={
            "defaultIconHtml": "<i>default</i>",
            "htmlOverridesByLabel": [{"label": "boat", "html": "<i>boat</i>"}],
        })

        assert project(projector, tracks, options).markers.markers[0].icon_html == "<i>boat</i>"

    def test_default_icon_when_no_label_matches(self, projector, two_track_frames):
        tracks = build_tracks(two_track_frames)
        options = options_with(marker={"defaultIconHtml": "<i>default</i>"})

        assert project(projector, tracks, options).markers.markers[0].icon_html == "<i>default</i>"

    def test_explicit_popup_and_tooltip_are_used(self, projector, frame_factory):
        frames = [frame_factory("A", track=["T1"], latitude=[1], longitude=[2], popup=["hello"], tooltip=["tip"])]
        marker = project(projector, build_tracks(frames), options_with()).markers.markers[0]

        assert marker.popup == "hello"
        assert marker.tooltip == "tip"

    def test_popup_is_synthesized_when_missing(self, projector, two_track_frames):
        marker = project(projector, build_tracks(two_track_frames), options_with()).markers.markers[0]

        assert "Latitude: 1.0" in marker.popup
        assert "Longitude: 1.0" in marker.popup
        assert "Timestamp: 1970-01-01T00:00:00+00:00" in marker.popup
        assert marker.tooltip == marker.popup

    def test_last_only_emits_final_valid_position(self, projector, frame_factory):
        frames = [frame_factory("A", track=["T1"] * 3, latitude=[1, 2, None], longitude=[1, 2, None])]
        options = options_with(marker={"lastOnly": True})

        markers = project(projector, build_tracks(frames), options).markers

        assert len(markers) == 1
        assert markers.markers[0].latitude == 2.0

    def test_live_only_drops_stale_tracks(self, projector, frame_factory):
        frames = [frame_factory(
            "A",
            track=["live", "stale", "live", "stale"],
            latitude=[1, 5, 2, None],
            longitude=[1, 5, 2, None],
        )]
        options = options_with(marker={"lastOnly": True, "liveOnly": True})

        markers = project(projector, build_tracks(frames), options).markers

        assert [m.track for m in markers.markers] == ["live"]

    def test_tooltip_permanent_flag(self, projector, two_track_frames):
        options = options_with(marker={"tooltipPermanent": True})

        markers = project(projector, build_tracks(two_track_frames), options).markers

        assert all(m.tooltip_permanent for m in markers.markers)


class TestAntPaths:

    def test_requires_two_valid_points(self, projector, two_track_frames):
        ant_paths = project(projector, build_tracks(two_track_frames), options_with()).ant_paths

        assert len(ant_paths.for_track("T1")) == 1
        assert len(ant_paths.for_track("T2")) == 0
        assert ant_paths.omitted_tracks == ("T2",)

    def test_positions_skip_gaps_in_order(self, projector, frame_factory):
        frames = [frame_factory("A", track=["T1"] * 4, latitude=[1, None, 3, 4], longitude=[1, None, 3, 4])]

        path = project(projector, build_tracks(frames), options_with()).ant_paths.paths[0]

        assert path.positions == ((1.0, 1.0), (3.0, 3.0), (4.0, 4.0))

    def test_color_override_by_query(self, projector, two_track_frames):
        options = options_with(ant={"colorOverridesByQuery": [{"label": "A", "color": "red"}]})

        path = project(projector, build_tracks(two_track_frames), options).ant_paths.paths[0]

        assert path.style.color == "red"
        assert path.style.pulse_color == options.ant.pulse_color

    def test_pause_non_live(self, projector, frame_factory):
        frames = [frame_factory("A", track=["T1"] * 3, latitude=[1, 2, None], longitude=[1, 2, None])]

        paused = project(projector, build_tracks(frames), options_with(ant={"pauseNonLive": True})).ant_paths
        running = project(projector, build_tracks(frames), options_with()).ant_paths

        assert paused.paths[0].style.paused
        assert not running.paths[0].style.paused

    def test_style_serialization(self, projector, two_track_frames):
        style = project(projector, build_tracks(two_track_frames), options_with()).ant_paths.paths[0].style.to_dict()

        assert style["dashArray"] == [20, 5]
        assert style["lineCap"] == "butt"
        assert style["delay"] == 400


class TestHeatmapAndHexbin:

    def test_heat_points_carry_intensity(self, projector, frame_factory):
        frames = [frame_factory("A", track=["T1"] * 2, latitude=[1, 2], longitude=[3, 4], intensity=[0.5, 0.9])]

        heat = project(projector, build_tracks(frames), options_with()).heat_points

        assert heat.to_dict()["points"] == [[1.0, 3.0, 0.5], [2.0, 4.0, 0.9]]

    def test_heat_intensity_missing_does_not_fail(self, projector, two_track_frames):
        heat = project(projector, build_tracks(two_track_frames), options_with()).heat_points

        assert len(heat) == 2
        assert all(p.intensity is None for p in heat.points)

    def test_hex_features_are_geojson_points_tagged_by_track(self, projector, frame_factory):
        frames = [frame_factory("A", track=["a", "b", "b"], latitude=[1, 2, None], longitude=[10, 20, None])]

        collection = project(projector, build_tracks(frames), options_with()).hex_features.to_dict()

        assert collection["type"] == "FeatureCollection"
        assert [f["id"] for f in collection["features"]] == [0, 1]
        assert collection["features"][1]["geometry"] == {"type": "Point", "coordinates": [20.0, 2.0]}
        assert collection["options"]["colorRange"] == ["#f7fbff", "#ff0000"]

    def test_disabled_modes_yield_empty_datasets(self, projector, two_track_frames):
        datasets = project(projector, build_tracks(two_track_frames), options_with(viewTypes=["marker"]))

        assert len(datasets.markers) == 2
        assert len(datasets.ant_paths) == 0
        assert len(datasets.heat_points) == 0
        assert len(datasets.hex_features) == 0


def test_format_timestamp():
    assert format_timestamp(None) == "-"
    assert format_timestamp(0) == "1970-01-01T00:00:00+00:00"
    assert format_timestamp("2024-05-01T10:00:00Z") == "2024-05-01T10:00:00Z"
    assert format_timestamp(float("nan")) == "nan"


def test_synthesized_popup_lists_labels(frame_factory):
    tracks = build_tracks([frame_factory("A", labels={"fleet": "north"}, track=["T1"], latitude=[1], longitude=[2])])

    popup = synthesize_popup(tracks[0], tracks[0].positions[0])

    assert popup.splitlines()[0] == "Track: T1"
    assert 'Labels: {"fleet": "north"}' in popup
