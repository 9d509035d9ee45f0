"""
Health check API routes.

Liveness and readiness probes.
"""

from fastapi import APIRouter, Request, Response, status

from huissier.config.settings import get_settings
from huissier.di.container import get_container

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_probe():
    """Process is up."""
    return {"status": "healthy"}


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_probe(request: Request, response: Response):
    """
    Readiness probe endpoint.

    Returns 503 until startup checks passed, or while a storage backend
    is unreachable.
    """
    settings = get_settings()
    container = get_container()
    components = {}

    if container._database is not None:
        components["database"] = await container.database.health_check()
    if settings.REDIS_ENABLED:
        components["redis"] = await container.redis_client.health_check()

    started = getattr(request.app.state, "ready", False)
    ready = started and all(components.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "ready" if ready else "not_ready",
        "startup_checks": started,
        "components": {
            name: "healthy" if ok else "unhealthy" for name, ok in components.items()
        },
    }
