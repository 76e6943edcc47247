"""Health check router.

The service has no backing stores, so liveness is also readiness.
"""

from fastapi import APIRouter, Depends

from apps.api.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_liveness(settings: Settings = Depends(get_settings)):
    """Liveness probe. Returns 200 while the API process is running."""
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.APP_VERSION,
    }
