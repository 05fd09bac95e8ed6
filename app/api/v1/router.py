# 📄 File: app/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# The traffic director for version 1 of the API: sends identification requests to the
# identification endpoints and health questions to the health endpoints.
# 🧪 Purpose (Technical Summary):
# API v1 router aggregation combining module routers under their prefixes plus a small
# API info endpoint.
# 🔗 Dependencies:
# FastAPI, app.api.v1.health, app.modules.plant_identification.presentation.api.v1
# 🔄 Connected Modules / Calls From:
# app.main.py

import logging

from fastapi import APIRouter

from app.modules.plant_identification.presentation.api.v1 import identification_router
from app.shared.config.settings import get_settings

from . import API_TAGS, ROUTE_PREFIXES
from .health import health_router

logger = logging.getLogger(__name__)

# Create main API v1 router
api_v1_router = APIRouter()

# Health endpoints (no prefix)
api_v1_router.include_router(
    health_router,
    tags=["Health Check"]
)

# Plant identification endpoints
api_v1_router.include_router(
    identification_router,
    prefix=ROUTE_PREFIXES["plant_identification"],
    tags=[API_TAGS["plant_identification"]]
)


@api_v1_router.get("/",
                   summary="API v1 Information",
                   description="Get API v1 version information and available endpoints",
                   tags=["API Info"])
async def api_v1_info() -> dict:
    settings = get_settings()
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_version": "v1",
        "endpoints": {
            "identify": f"{ROUTE_PREFIXES['plant_identification']}/identify",
            "history": f"{ROUTE_PREFIXES['plant_identification']}/history",
            "health": "/health",
            "liveness_probe": "/health/live",
            "readiness_probe": "/health/ready",
        },
    }
