"""Health check API endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from .deps import get_health_service

router = APIRouter(prefix="/health", tags=["health"])


async def health_response(health_service: HealthService) -> JSONResponse:
    """Overall status, 503 when any dependency is down."""
    health = await health_service.get_health_status()
    status_code = (
        status.HTTP_200_OK if health.status == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=health.model_dump(mode="json"))


@router.get("", response_model=HealthCheckResponse)
async def health_check(health_service: HealthService = Depends(get_health_service)):
    """Get overall system health status."""
    return await health_response(health_service)


@router.get("/database", response_model=Dict[str, Any])
async def database_health(health_service: HealthService = Depends(get_health_service)):
    """Check database connectivity."""
    return await health_service.check_database_health()


@router.get("/search", response_model=Dict[str, Any])
async def search_index_health(health_service: HealthService = Depends(get_health_service)):
    """Check the search index backend."""
    return await health_service.check_search_index_health()
