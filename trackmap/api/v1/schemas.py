from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from trackmap.shared.options import TrackMapOptions

# --- Request Schemas ---

class ViewportSize(BaseModel):
    """Pixel size of the client's map container."""
    width_px: int = Field(..., gt=0)
    height_px: int = Field(..., gt=0)


class TrackMapRenderRequest(BaseModel):
    """Request body to run the pipeline on a frame set."""
    frames: List[Any] = Field(default_factory=list, description="Data frames in host order (fields/values or schema/data form).")
    options: TrackMapOptions = Field(default_factory=TrackMapOptions)
    viewport: Optional[ViewportSize] = Field(None, description="Client viewport; server defaults are used when omitted.")


class LatLon(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class ViewportMoveRequest(BaseModel):
    """A completed pan/zoom on the client map."""
    south_west: LatLon
    north_east: LatLon
    publish_bounds: bool = True

# --- Response Schemas ---

class BoundsResponse(BaseModel):
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float


class TrackSummary(BaseModel):
    key: str
    index: int
    ref_id: Optional[str] = None
    keyed_by: str
    labels: Dict[str, str] = Field(default_factory=dict)
    position_count: int
    valid_position_count: int
    live: bool


class TrackMapRenderResponse(BaseModel):
    """Pipeline output for the rendering layer."""
    status: str = Field(..., description="'ok' or 'no_data'.")
    message: Optional[str] = None
    tracks: List[TrackSummary] = Field(default_factory=list)
    liveness: Dict[str, bool] = Field(default_factory=dict)
    markers: Dict[str, Any]
    ant_paths: Dict[str, Any]
    heat_points: Dict[str, Any]
    hex_features: Dict[str, Any]
    center: List[float]
    zoom: float
    bounds: Optional[BoundsResponse] = None
    fit_to_bounds: bool = False
    visible_bounds: Optional[BoundsResponse] = Field(None, description="Box the map shows after fitting to the data bounds.")
    published_variables: bool = False
    tile_layer: Dict[str, Any] = Field(default_factory=dict, description="Base tile layer url, attribution, access token and sub-domains.")


class ViewportVariablesResponse(BaseModel):
    variables: Dict[str, Any] = Field(default_factory=dict)
    published: bool = False
