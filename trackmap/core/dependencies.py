"""
Module for managing and providing application dependencies.
Leverages FastAPI's dependency injection system and app.state for components created at startup.
"""
import logging

from fastapi import HTTPException, Request, status

from trackmap.infrastructure.cache.variable_store import HostVariableStore
from trackmap.orchestration.track_map_pipeline import TrackMapPipeline

logger = logging.getLogger(__name__)


def get_track_map_pipeline(request: Request) -> TrackMapPipeline:
    """Retrieves the TrackMapPipeline instance from app.state."""
    pipeline = getattr(request.app.state, "track_map_pipeline", None)
    if pipeline is None:
        logger.error("TrackMapPipeline not found in app.state. Startup might have failed.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Track map pipeline not initialized.")
    return pipeline


def get_variable_store(request: Request) -> HostVariableStore:
    """Retrieves the host variable store from app.state."""
    store = getattr(request.app.state, "variable_store", None)
    if store is None:
        logger.error("Host variable store not found in app.state. Startup might have failed.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Host variable store not initialized.")
    return store
