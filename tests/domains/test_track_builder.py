"""
Unit tests for TrackBuilder in trackmap.domains.tracking.services.track_builder.
"""
import pytest

from trackmap.domains.tracking.entities.frame import Field, Frame
from trackmap.domains.tracking.services.track_builder import TrackBuilder
from trackmap.shared.types import KeyingScheme, SYNTHETIC_TRACK_KEY


@pytest.fixture
def builder():
    return TrackBuilder()


def test_value_keyed_groups_by_track_field(builder, frame_factory):
    frames = [
        frame_factory("A", track=["a", "b", "a"], latitude=[1, 2, 3], longitude=[1, 2, 3]),
    ]

    tracks = builder.build(frames)

    assert tracks.keys == ["a", "b"]
    assert [p.latitude for p in tracks.get("a").positions] == [1.0, 3.0]
    assert tracks.get("a").keyed_by == KeyingScheme.VALUE


def test_value_keyed_concatenates_across_frames_in_visit_order(builder, frame_factory):
    frames = [
        frame_factory("A", track=["a", "b"], latitude=[1, 10], longitude=[1, 10]),
        frame_factory("B", track=["b", "a"], latitude=[11, 2], longitude=[11, 2]),
    ]

    tracks = builder.build(frames)

    assert tracks.keys == ["a", "b"]
    assert [p.latitude for p in tracks.get("a").positions] == [1.0, 2.0]
    assert [p.latitude for p in tracks.get("b").positions] == [10.0, 11.0]
    # ref_id follows the last contributing frame
    assert tracks.get("a").ref_id == "B"


def test_out_of_order_timestamps_are_not_resorted(builder, frame_factory):
    frames = [frame_factory("A", track=["a", "a"], latitude=[5, 6], longitude=[5, 6], timestamp=[2000, 1000])]

    positions = builder.build(frames).get("a").positions

    assert [p.timestamp for p in positions] == [2000, 1000]


def test_label_keyed_frames(builder):
    frames = [
        Frame(
            fields=[Field(name="latitude", values=[1, 2]), Field(name="longitude", values=[3, 4])],
            ref_id="A",
            labels={"track": "vehicle-7"},
        ),
        Frame(
            fields=[Field(name="latitude", values=[5]), Field(name="longitude", values=[6])],
            ref_id="A",
            labels={"track": "vehicle-8"},
        ),
    ]

    tracks = builder.build(frames)

    assert tracks.keys == ["vehicle-7", "vehicle-8"]
    assert tracks.get("vehicle-7").keyed_by == KeyingScheme.LABEL
    assert [(p.latitude, p.longitude) for p in tracks.get("vehicle-7").positions] == [(1.0, 3.0), (2.0, 4.0)]
    assert tracks.get("vehicle-7").labels == {"track": "vehicle-7"}


def test_label_from_latitude_field_labels(builder):
    frames = [Frame(fields=[
        Field(name="latitude", values=[1], labels={"track": "boat"}),
        Field(name="longitude", values=[2], labels={"track": "boat"}),
    ])]

    assert builder.build(frames).keys == ["boat"]


def test_frame_without_track_information_is_keyed_by_frame(builder, frame_factory):
    frames = [frame_factory("Q", latitude=[1], longitude=[1])]

    tracks = builder.build(frames)

    assert tracks.keys == ["frame:Q"]
    assert tracks.get("frame:Q").keyed_by == KeyingScheme.FRAME
    assert builder.builder_stats["frame_keyed_frames"] == 1


def test_null_track_value_falls_back_to_frame_key(builder, frame_factory):
    frames = [frame_factory("Q", track=["a", None], latitude=[1, 2], longitude=[1, 2])]

    tracks = builder.build(frames)

    assert tracks.keys == ["a", "frame:Q"]


def test_alignment_gaps_are_kept_in_sequence(builder, frame_factory):
    frames = [frame_factory("A", track=["a"] * 3, latitude=[1, None, 3], longitude=[1, None, 3])]

    positions = builder.build(frames).get("a").positions

    assert len(positions) == 3
    assert [p.has_coordinates for p in positions] == [True, False, True]


@pytest.mark.parametrize("frames", [[], None])
def test_empty_input_yields_single_synthetic_track(builder, frames):
    tracks = builder.build(frames)

    assert len(tracks) == 1
    synthetic = tracks[0]
    assert synthetic.key == SYNTHETIC_TRACK_KEY
    assert synthetic.is_synthetic
    assert len(synthetic.positions) == 1
    assert not synthetic.positions[0].has_coordinates


def test_frame_with_no_rows_yields_synthetic_track(builder, frame_factory):
    tracks = builder.build([frame_factory("A", latitude=[], longitude=[])])

    assert tracks.keys == [SYNTHETIC_TRACK_KEY]


def test_track_count_matches_distinct_keys(builder, frame_factory):
    keys = ["k3", "k1", "k3", "k2", "k1"]
    frames = [frame_factory("A", track=keys, latitude=[1] * 5, longitude=[1] * 5)]

    tracks = builder.build(frames)

    assert len(tracks) == len(set(keys))
    assert tracks.keys == ["k3", "k1", "k2"]
    assert [t.index for t in tracks] == [0, 1, 2]


def test_frame_keys_do_not_merge_with_track_values(builder, frame_factory):
    frames = [
        frame_factory("B", track=["A"], latitude=[1], longitude=[1]),
        frame_factory("A", latitude=[2], longitude=[2]),
    ]

    tracks = builder.build(frames)

    assert tracks.keys == ["A", "frame:A"]
    assert [len(t.positions) for t in tracks] == [1, 1]


def test_frame_key_falls_back_to_name_then_index(builder):
    frames = [
        Frame(fields=[Field(name="lat", values=[1]), Field(name="lon", values=[1])], name="vehicles"),
        Frame(fields=[Field(name="lat", values=[2]), Field(name="lon", values=[2])]),
    ]

    assert builder.build(frames).keys == ["frame:vehicles", "frame:1"]


def test_numeric_ref_id_becomes_text(builder):
    frames = [Frame(fields=[Field(name="lat", values=[1]), Field(name="lon", values=[1])], ref_id=7)]

    track = builder.build(frames)[0]

    assert track.key == "frame:7"
    assert track.ref_id == "7"
