"""
Health check API.

Reports service status and whether the host variable store answers.
"""

import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends

from trackmap.core.config import settings
from trackmap.core.dependencies import get_variable_store
from trackmap.core.exceptions import VariableStoreError
from trackmap.infrastructure.cache.variable_store import HostVariableStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_check(variable_store: HostVariableStore = Depends(get_variable_store)) -> Dict[str, Any]:
    check_start = time.time()
    store_status = "healthy"
    error = None
    try:
        variable_store.snapshot()
    except VariableStoreError as e:
        logger.warning(f"Variable store health check failed: {e}")
        store_status = "unhealthy"
        error = str(e)

    return {
        "status": "healthy" if store_status == "healthy" else "degraded",
        "service": settings.APP_NAME,
        "timestamp": time.time(),
        "response_time_ms": (time.time() - check_start) * 1000,
        "variable_store": {
            "backend": variable_store.backend_name,
            "status": store_status,
            "error": error,
        },
    }
