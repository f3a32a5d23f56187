"""Health service implementation."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.common import HealthCheckResponse
from ..search import SearchIndex
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, search_index: SearchIndex, version: str):
        self.session = session
        self.search_index = search_index
        self.version = version

    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        db_health = await self.check_database_health()
        search_health = await self.check_search_index_health()

        overall_status = "healthy"
        if not db_health["connected"] or not search_health["connected"]:
            overall_status = "unhealthy"

        return HealthCheckResponse(
            status=overall_status,
            timestamp=datetime.now(timezone.utc),
            version=self.version,
            checks={"database": db_health, "search_index": search_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        try:
            start_time = asyncio.get_running_loop().time()
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
            response_time = (asyncio.get_running_loop().time() - start_time) * 1000

            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
            }
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": None,
            }

    async def check_search_index_health(self) -> Dict[str, Any]:
        """Check the search index backend."""
        start_time = asyncio.get_running_loop().time()
        connected = await self.search_index.ping()
        response_time = (asyncio.get_running_loop().time() - start_time) * 1000

        return {
            "connected": connected,
            "status": "healthy" if connected else "unhealthy",
            "backend": self.search_index.backend,
            "response_time_ms": round(response_time, 2) if connected else None,
        }
