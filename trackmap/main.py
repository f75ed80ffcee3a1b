from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from trackmap.core.config import settings
from trackmap.api import health as health_router
from trackmap.api.v1.endpoints import track_map
from trackmap.infrastructure.cache.variable_store import create_variable_store
from trackmap.orchestration.track_map_pipeline import TrackMapPipeline

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    logger.info("Application startup sequence initiated...")
    app_instance.state.track_map_pipeline = TrackMapPipeline()
    app_instance.state.variable_store = create_variable_store(settings)
    logger.info(f"Host variable store backend: {app_instance.state.variable_store.backend_name}")
    logger.info("Application startup sequence completed.")
    yield
    logger.info("Application shutdown sequence initiated...")
    app_instance.state.track_map_pipeline = None
    app_instance.state.variable_store = None
    logger.info("Application shutdown sequence completed.")


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    version="0.1.0",
    lifespan=lifespan,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"/docs",
    redoc_url=f"/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

api_v1_router_prefix = settings.API_V1_PREFIX
app.include_router(
    track_map.router,
    prefix=f"{api_v1_router_prefix}",
    tags=["V1 - Track Map"]
)

# Health Check System
app.include_router(health_router.router, tags=["Health Checks"])

@app.get("/", tags=["Root"])
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME} - Version {app.version}"}
