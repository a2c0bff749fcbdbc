"""Health check endpoint for liveness probes."""
from datetime import datetime, timezone

from fastapi import APIRouter, status

from textgate import __version__

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> dict[str, str]:
    """
    Liveness probe.

    Returns basic health status if the service is alive. Does not check the
    usage store.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }
