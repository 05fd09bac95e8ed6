# 📄 File: app/main.py
#
# 🧭 Purpose (Layman Explanation):
# The control center that starts the nursery identification service, connects its parts together
# and makes sure it is ready to answer the mobile app.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: logging setup, database initialization with
# graceful degradation, middleware, slowapi limiter, exception handlers and router registration.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn, slowapi
# - app.shared.config.settings
# - app.shared.infrastructure.database (connection, session)
# - app.api (middleware, v1 router)
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - Docker container entry point
# - tests (create_application)

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.middleware import RequestLoggingMiddleware, register_exception_handlers
from app.api.v1.router import api_v1_router
from app.shared.config.settings import get_settings
from app.shared.core.rate_limiter import limiter
from app.shared.infrastructure.database.connection import close_database, init_database
from app.shared.infrastructure.database.session import initialize_sessions
from app.shared.utils.logging import (
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

# Get application settings
settings = get_settings()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    The database is optional at runtime: if it cannot be reached the service
    still identifies plants, it just cannot record history.
    """
    setup_logging()
    logger.info("🌱 Nursery Identification API starting up...")

    try:
        await init_database()
        initialize_sessions()
        logger.info("✅ Database connection and session manager initialized")
    except Exception as e:
        logger.error(f"❌ Database unavailable, identification history disabled: {e}")

    log_startup_event(settings.APP_NAME, settings.APP_VERSION, {"environment": settings.ENVIRONMENT})

    try:
        yield  # Application is running
    finally:
        logger.info("🔄 Nursery Identification API shutting down...")
        await close_database()
        log_shutdown_event(settings.APP_NAME)


def create_application() -> FastAPI:
    """
    Application factory function.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    # Request logging middleware (request id + context)
    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Rate limiting (slowapi reads the limiter from app state)
    app.state.limiter = limiter

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    register_exception_handlers(app)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    return app


# Create application instance
app = create_application()


def main() -> None:
    """Run the application with uvicorn."""
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        workers=settings.WORKERS if not settings.RELOAD else 1,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
