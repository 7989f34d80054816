"""Health check route."""

from fastapi import APIRouter, Depends

from parcelhub.core.authorization import route_guard
from parcelhub.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(_: None = Depends(route_guard("health.check"))):
    """Report that the service is up."""
    return {"status": "healthy", "service": "parcelhub", "version": settings.VERSION}
