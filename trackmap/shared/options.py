"""
Panel option models for the track map.

These mirror the options a dashboard panel stores for the map: which view
modes are enabled, which queries feed each mode, the per-mode styling and the
per-entity override tables. Keys are accepted in snake_case or in the
camelCase used by the dashboard (e.g. ``colorOverridesByQuery``).
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from trackmap.shared.types import CenterMode, ViewType


class PanelOptionModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LabelColor(PanelOptionModel):
    """Color override for a query name or label value."""
    label: Optional[str] = None
    color: Optional[str] = None


class LabelSize(PanelOptionModel):
    """Marker size override for a query name or label value."""
    label: Optional[str] = None
    size: Optional[float] = None


class LabelHtml(PanelOptionModel):
    """Marker icon HTML override for a label value."""
    label: Optional[str] = None
    html: Optional[str] = None


class MapOptions(PanelOptionModel):
    tile_url: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    tile_attribution: str = '&copy <a href="http://osm.org/copyright">OpenStreetMap</a> contributors'
    tile_access_token: str = ""
    tile_sub_domains: List[str] = Field(default_factory=lambda: ["a", "b", "c"])
    center_latitude: float = Field(default=56.17203, ge=-90, le=90)
    center_longitude: float = Field(default=10.1865203, ge=-180, le=180)
    zoom: float = 10
    center_mode: CenterMode = Field(default=CenterMode.FIXED, description="Derive the map center from the first or last position instead of the fixed center.")
    publish_bounds: bool = Field(default=True, description="Write the visible bounds to the host's query variables on every map move.")

    def tile_layer(self) -> Dict[str, Any]:
        """Base tile layer settings handed to the renderer."""
        return {
            "url": self.tile_url,
            "attribution": self.tile_attribution,
            "access_token": self.tile_access_token,
            "sub_domains": list(self.tile_sub_domains),
        }


class AntOptions(PanelOptionModel):
    queries: List[str] = Field(default_factory=list)
    delay: int = 400
    weight: float = 5
    color: str = "rgba(0, 100, 255, 1)"
    pulse_color: str = "rgba(0, 100, 255, 0.2)"
    opacity: float = Field(default=0.8, ge=0, le=1)
    paused: bool = False
    reverse: bool = False
    pause_non_live: bool = Field(default=False, description="Stop the animation of tracks whose latest sample has no coordinates.")
    color_overrides_by_query: List[LabelColor] = Field(default_factory=list)
    zoom_to_data_bounds: bool = True


class HeatOptions(PanelOptionModel):
    queries: List[str] = Field(default_factory=list)
    fit_bounds_on_load: bool = False
    fit_bounds_on_update: bool = False
    zoom_to_data_bounds: bool = False


class MarkerOptions(PanelOptionModel):
    queries: List[str] = Field(default_factory=list)
    color: str = "rgba(0, 100, 255, 0.2)"
    size: float = 25
    default_icon_html: Optional[str] = Field(default=None, description="Icon HTML used when no per-label override applies; None renders a circle marker.")
    last_only: bool = Field(default=False, description="Only show the most recent position of each track.")
    live_only: bool = Field(default=False, description="With last_only, hide tracks whose latest sample has no coordinates.")
    tooltip_permanent: bool = False
    color_overrides_by_query: List[LabelColor] = Field(default_factory=list)
    size_overrides_by_query: List[LabelSize] = Field(default_factory=list)
    html_overrides_by_label: List[LabelHtml] = Field(default_factory=list)
    zoom_to_data_bounds: bool = True


class HexOptions(PanelOptionModel):
    queries: List[str] = Field(default_factory=list)
    opacity: float = Field(default=0.6, ge=0, le=1)
    color_range_from: str = "#f7fbff"
    color_range_to: str = "#ff0000"
    radius_range_from: float = 5
    radius_range_to: float = 12
    zoom_to_data_bounds: bool = False


class TrackMapOptions(PanelOptionModel):
    """Complete option set for one track map panel."""
    map: MapOptions = Field(default_factory=MapOptions)
    view_types: List[ViewType] = Field(default_factory=lambda: [ViewType.MARKER])
    ant: AntOptions = Field(default_factory=AntOptions)
    heat: HeatOptions = Field(default_factory=HeatOptions)
    marker: MarkerOptions = Field(default_factory=MarkerOptions)
    hex: HexOptions = Field(default_factory=HexOptions)

    def is_enabled(self, view_type: ViewType) -> bool:
        return view_type in self.view_types

    def queries_for(self, view_type: ViewType) -> List[str]:
        return {
            ViewType.MARKER: self.marker.queries,
            ViewType.ANT: self.ant.queries,
            ViewType.HEAT: self.heat.queries,
            ViewType.HEX: self.hex.queries,
        }[view_type]

    def zooms_to_data(self, view_type: ViewType) -> bool:
        return {
            ViewType.MARKER: self.marker.zoom_to_data_bounds,
            ViewType.ANT: self.ant.zoom_to_data_bounds,
            ViewType.HEAT: self.heat.zoom_to_data_bounds,
            ViewType.HEX: self.hex.zoom_to_data_bounds,
        }[view_type]
