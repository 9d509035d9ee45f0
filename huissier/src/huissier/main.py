"""
Main FastAPI application entry point.

Uses Application Factory Pattern.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from huissier import __version__
from huissier.config.settings import Settings, get_settings, override_settings
from huissier.di import DIContainer, initialize_container, shutdown_container
from huissier.domain.exceptions import HuissierException
from huissier.infrastructure.monitoring import get_logger, setup_logging
from huissier.presentation.api.middleware import (
    huissier_exception_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from huissier.presentation.api.middleware.metrics_middleware import (
    MetricsMiddleware,
)
from huissier.presentation.api.middleware.rate_limit_middleware import (
    RateLimitMiddleware,
)
from huissier.presentation.api.middleware.request_id_middleware import (
    RequestIDMiddleware,
)
from huissier.presentation.api.routes import admin, health, telegram, verification


async def run_startup_checks(container: DIContainer, settings: Settings) -> bool:
    """
    Check the bot credentials and the database once at startup.

    A failed check does not stop the process; readiness stays false.
    """
    logger = get_logger(__name__)
    if not settings.READINESS_CHECK_ENABLED:
        return True

    bot_ok = await container.invite_issuer.check_ready()
    if not bot_ok:
        logger.error("Telegram bot self-test (getMe) failed")

    db_ok = True
    if container._database is not None:
        db_ok = await container.database.health_check()
        if not db_ok:
            logger.error("Database health check failed")

    return bot_ok and db_ok


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory - creates and configures FastAPI app.

    Args:
        settings: Optional Settings instance (for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()
    else:
        override_settings(settings)

    setup_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    logger = get_logger(__name__)

    logger.info(f"Creating Huissier application (ENV={settings.ENV})")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Huissier application...")
        container = await initialize_container()

        app.state.ready = await run_startup_checks(container, settings)

        if settings.JOIN_FEED_MODE == "polling":
            container.membership_listener.start()
        if settings.NONCE_BACKEND != "redis":
            # Redis expires used nonces on its own
            container.nonce_sweeper.start()

        logger.info(
            "Huissier application started",
            extra={
                "context": {
                    "ready": app.state.ready,
                    "ledger": settings.LEDGER_BACKEND,
                    "nonce_store": settings.NONCE_BACKEND,
                    "join_feed": settings.JOIN_FEED_MODE,
                }
            },
        )

        yield

        logger.info("Shutting down Huissier application...")
        await shutdown_container()
        logger.info("Huissier application shutdown complete")

    app = FastAPI(
        title="Huissier API",
        description="Token-gated channel invites for Solana token holders",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.ready = False

    # Middleware chain (last added runs first)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(MetricsMiddleware)

    if settings.REDIS_ENABLED and settings.RATE_LIMIT_ENABLED:
        app.add_middleware(RateLimitMiddleware)
        logger.info("Rate limiting enabled")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(HuissierException, huissier_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routes
    app.include_router(health.router, prefix="/api")
    app.include_router(verification.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")
    if settings.JOIN_FEED_MODE == "webhook":
        app.include_router(telegram.router, prefix="/api")

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint."""
        return {
            "service": "Huissier",
            "status": "running",
            "version": __version__,
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request, response: Response):
        """Readiness summary (alias of /api/health/ready)."""
        return await health.readiness_probe(request, response)

    @app.get("/metrics", tags=["Monitoring"])
    async def metrics():
        """
        Prometheus metrics endpoint.

        Returns metrics in Prometheus text format for scraping.
        """
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    logger.info("Huissier application created successfully")
    return app


def get_app() -> FastAPI:
    """
    Get or create application instance (lazy initialization).

    For uvicorn: uvicorn huissier.main:get_app --factory
    """
    return create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "huissier.main:get_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD,
    )


if __name__ == "__main__":
    main()
