"""
Track Map API Endpoints

Endpoints for the map panel:
- Running the aggregation and projection pipeline on a frame set
- Fitting the viewport to the data bounds and publishing it to the host
- Republishing the visible bounds after a client pan/zoom
- Reading the host's current viewport variables
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from trackmap.api.v1 import schemas
from trackmap.core.config import settings
from trackmap.core.dependencies import get_track_map_pipeline, get_variable_store
from trackmap.core.exceptions import VariableStoreError
from trackmap.domains.mapping.entities.bounds import Bounds
from trackmap.domains.mapping.models.map_widget import HeadlessMapWidget
from trackmap.domains.mapping.services.viewport_synchronizer import ViewportSynchronizer
from trackmap.infrastructure.cache.variable_store import HostVariableStore
from trackmap.orchestration.track_map_pipeline import TrackMapPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/track-map", tags=["track-map"])


def _headless_widget(viewport=None) -> HeadlessMapWidget:
    if viewport is not None:
        return HeadlessMapWidget(viewport.width_px, viewport.height_px)
    return HeadlessMapWidget(settings.VIEWPORT_WIDTH_PX, settings.VIEWPORT_HEIGHT_PX)


@router.post(
    "/render",
    response_model=schemas.TrackMapRenderResponse,
    summary="Build the map view datasets for a frame set"
)
def render_track_map_endpoint(
    params: schemas.TrackMapRenderRequest,
    pipeline: TrackMapPipeline = Depends(get_track_map_pipeline),
    variable_store: HostVariableStore = Depends(get_variable_store)
):
    """
    Runs the pipeline and, when a mode asks to zoom to its data, fits a
    headless viewport to the data bounds and publishes the visible box.
    """
    try:
        result = pipeline.run_raw(params.frames, params.options)
        payload = result.to_dict()

        if result.fit_to_bounds and result.bounds is not None:
            synchronizer = ViewportSynchronizer(variable_store, publish_bounds=params.options.map.publish_bounds)
            visible = synchronizer.fit_to_data(_headless_widget(params.viewport), result.bounds)
            payload["visible_bounds"] = visible.to_dict()
            payload["published_variables"] = synchronizer.sync_stats["publishes"] > 0

        return schemas.TrackMapRenderResponse(**payload)

    except Exception as e:
        logger.error(f"Error rendering track map: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error rendering track map"
        )


@router.post(
    "/viewport/move",
    response_model=schemas.ViewportVariablesResponse,
    summary="Publish the visible bounds after a client pan/zoom"
)
def viewport_move_endpoint(
    params: schemas.ViewportMoveRequest,
    variable_store: HostVariableStore = Depends(get_variable_store)
):
    try:
        moved_to = Bounds.from_corners(
            (params.south_west.lat, params.south_west.lon),
            (params.north_east.lat, params.north_east.lon),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    synchronizer = ViewportSynchronizer(variable_store, publish_bounds=params.publish_bounds)
    widget = _headless_widget()
    synchronizer.attach(widget)
    widget.move_to(moved_to)

    try:
        variables = variable_store.snapshot()
    except VariableStoreError as e:
        logger.error(f"Could not read host variables after move: {e}")
        variables = {}

    return schemas.ViewportVariablesResponse(
        variables=variables,
        published=synchronizer.sync_stats["publishes"] > 0,
    )


@router.get(
    "/viewport/variables",
    response_model=schemas.ViewportVariablesResponse,
    summary="Current host viewport variables"
)
def get_viewport_variables_endpoint(
    variable_store: HostVariableStore = Depends(get_variable_store)
):
    try:
        return schemas.ViewportVariablesResponse(variables=variable_store.snapshot())
    except VariableStoreError as e:
        logger.error(f"Error reading host variables: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Host variable store unavailable"
        )
