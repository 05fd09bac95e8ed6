# 📄 File: app/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# Health check endpoints that tell us whether the identification service is up, whether it can
# reach its database, and whether it has credentials for at least one identification service.
# 🧪 Purpose (Technical Summary):
# Liveness/readiness endpoints reporting database connectivity and provider configuration
# status (never credentials) for load balancers and monitoring.
# 🔗 Dependencies:
# FastAPI, app.shared.infrastructure.database.connection, plant_identification dependencies
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, monitoring systems, load balancers

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from app.modules.plant_identification.presentation.dependencies import get_identification_config
from app.shared.config.settings import get_settings
from app.shared.infrastructure.database.connection import database_health_check as db_health_check
from app.shared.utils.logging import log_health_check

logger = logging.getLogger(__name__)

# Create router for health endpoints
health_router = APIRouter()

# Application start time for uptime calculation
_app_start_time = datetime.now(timezone.utc)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@health_router.get("/health",
                   summary="Health Check",
                   description="Service health including database and provider configuration",
                   tags=["Health Check"])
async def health_check() -> JSONResponse:
    """
    Health check endpoint.

    Always 200 while the process is serving; component states are reported
    in the body.
    """
    settings = get_settings()
    database = await db_health_check()
    providers = _check_identification_providers()

    overall = "healthy"
    if database["status"] != "healthy" or providers["status"] != "configured":
        overall = "degraded"

    log_health_check("service", overall)

    return JSONResponse(
        status_code=200,
        content={
            "status": overall,
            "timestamp": _now(),
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "uptime_seconds": int((datetime.now(timezone.utc) - _app_start_time).total_seconds()),
            "components": {
                "database": database,
                "identification_providers": providers,
            },
        }
    )


@health_router.get("/health/live",
                   summary="Liveness Probe",
                   description="Liveness probe endpoint",
                   tags=["Health Check"])
async def liveness_probe() -> Response:
    """Returns 200 if the application is alive and running."""
    return Response(status_code=200, content="OK")


@health_router.get("/health/ready",
                   summary="Readiness Probe",
                   description="Readiness probe endpoint",
                   tags=["Health Check"])
async def readiness_probe() -> JSONResponse:
    """
    Readiness probe.

    Ready when the database answers and at least one identification
    provider has credentials.
    """
    database = await db_health_check()
    providers = _check_identification_providers()

    reasons = []
    if database["status"] != "healthy":
        reasons.append("database_unhealthy")
    if providers["status"] != "configured":
        reasons.append("no_identification_provider_configured")

    if reasons:
        log_health_check("readiness", "not_ready", {"reasons": reasons})
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reasons": reasons, "timestamp": _now()}
        )

    return JSONResponse(status_code=200, content={"status": "ready", "timestamp": _now()})


def _check_identification_providers() -> Dict[str, Any]:
    """Report which providers have credentials, in fallback order."""
    configs = get_identification_config()
    providers = [
        {
            "name": config.name,
            "display_name": config.display_name,
            "priority": config.priority,
            "configured": config.is_configured,
        }
        for config in configs
    ]
    configured = any(p["configured"] for p in providers)
    return {
        "status": "configured" if configured else "unconfigured",
        "providers": providers,
    }
