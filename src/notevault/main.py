# Main application entry point
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import auth_router, health_router, notes_router, search_router
from .api.deps import get_health_service
from .api.health import health_response
from .config import Settings, get_settings
from .context import ServiceContext, build_context
from .core.exceptions import register_exception_handlers
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.schemas.common import HealthCheckResponse
from .core.services import HealthService

logger = get_logger("main")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its service context from ``settings``."""
    settings = settings or get_settings()
    setup_logging(settings)
    context: ServiceContext = build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(
            "Starting NoteVault application",
            extra={
                "version": settings.app_version,
                "environment": settings.environment,
                "search_backend": settings.search_backend,
            },
        )
        try:
            await context.startup()
        except Exception as e:
            logger.error("Startup failed", exc_info=e)
            await context.shutdown()
            raise

        yield

        logger.info("Shutting down NoteVault application")
        await context.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-user notes with read-only sharing and search",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.context = context

    # Add logging middleware
    app.add_middleware(LoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(notes_router, prefix="/api")
    app.include_router(search_router, prefix="/api")
    app.include_router(health_router, prefix="/api")

    # Unprefixed health endpoint for load balancers
    @app.get("/health", response_model=HealthCheckResponse, tags=["health"])
    async def basic_health(health_service: HealthService = Depends(get_health_service)):
        return await health_response(health_service)

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "notevault.main:create_app",
        factory=True,
        host=_settings.host,
        port=_settings.port,
        reload=_settings.reload,
    )
