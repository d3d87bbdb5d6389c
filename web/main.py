"""FastAPI application for the RecordHub dashboard API"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recordhub import __version__
from recordhub.app import RecordHubApp
from recordhub.utils.logger import get_logger
from .admin_routes import router as admin_router
from .auth_routes import router as auth_router
from .data_routes import router as data_router

logger = get_logger(__name__)


def create_app(hub: Optional[RecordHubApp] = None, configure_logging: bool = True) -> FastAPI:
    """Build the FastAPI app around a RecordHubApp (initialized here)"""
    hub = (hub or RecordHubApp()).initialize(configure_logging=configure_logging)

    app = FastAPI(
        title="RecordHub API",
        description="User accounts and business data records",
        version=__version__,
    )
    app.state.hub = hub

    settings = hub.settings.app
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins if settings.environment == "production" else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(data_router)
    app.include_router(admin_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint for deployment platforms"""
        return {
            "status": "healthy",
            "service": "recordhub",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    logger.info("API ready", environment=settings.environment)
    return app
