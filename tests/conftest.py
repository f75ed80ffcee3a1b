"""
Global fixtures for the track map backend test suite.
"""
import pytest
from unittest.mock import MagicMock, PropertyMock
from typing import Any, Dict, List

from trackmap.core.config import Settings
from trackmap.domains.tracking.entities.frame import Field, Frame
from trackmap.infrastructure.cache.variable_store import InMemoryVariableStore
from trackmap.shared.options import TrackMapOptions


@pytest.fixture(scope="session")
def mock_settings_base_values() -> Dict[str, Any]:
    """
    Provides a dictionary of base values for a mocked Settings object.
    """
    return {
        "APP_NAME": "Track Map Test Backend",
        "API_V1_PREFIX": "/api/v1",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "VARIABLE_STORE_BACKEND": "memory",
        "HOST_VARIABLES_KEY": "trackmap:test:host_variables",
        "REDIS_HOST": "localhost",
        "REDIS_PORT": 6379,
        "REDIS_DB": 1,
        "REDIS_PASSWORD": None,
        "VIEWPORT_WIDTH_PX": 800,
        "VIEWPORT_HEIGHT_PX": 400,
        "uses_redis_variable_store": False,
    }


@pytest.fixture
def mock_settings(mock_settings_base_values: Dict[str, Any]) -> MagicMock:
    """
    Provides a MagicMock instance of the application Settings.
    """
    mocked_settings = MagicMock(spec=Settings)

    for key, value in mock_settings_base_values.items():
        if key == "uses_redis_variable_store":
            prop_mock = PropertyMock(return_value=value)
            setattr(type(mocked_settings), key, prop_mock)
        else:
            setattr(mocked_settings, key, value)

    return mocked_settings


def make_frame(ref_id: str = "A", labels: Dict[str, str] = None, **columns: List[Any]) -> Frame:
    """Frame from keyword columns, e.g. make_frame('A', latitude=[1, 2], longitude=[1, 2])."""
    return Frame(
        fields=[Field(name=name, values=values) for name, values in columns.items()],
        ref_id=ref_id,
        labels=labels or {},
    )


@pytest.fixture
def frame_factory():
    return make_frame


@pytest.fixture
def two_track_frames() -> List[Frame]:
    """T1 moves through two valid points; T2 has only an alignment gap."""
    return [
        make_frame(
            "A",
            track=["T1", "T1", "T2"],
            latitude=[1.0, 2.0, None],
            longitude=[1.0, 2.0, None],
            timestamp=[0, 1000, 0],
        )
    ]


@pytest.fixture
def all_modes_options() -> TrackMapOptions:
    """Every mode enabled and fed by query A."""
    return TrackMapOptions.model_validate({
        "viewTypes": ["marker", "ant", "heat", "hex"],
        "marker": {"queries": ["A"]},
        "ant": {"queries": ["A"]},
        "heat": {"queries": ["A"]},
        "hex": {"queries": ["A"]},
    })


@pytest.fixture
def variable_store() -> InMemoryVariableStore:
    return InMemoryVariableStore()
