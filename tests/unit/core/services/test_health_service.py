"""HealthService against the real database and search index."""

from notevault.core.services.health_service import HealthService


class DownIndex:
    backend = "redis"

    async def ping(self):
        return False


async def test_healthy_when_everything_answers(context, session):
    health = await context.health_service(session).get_health_status()

    assert health.status == "healthy"
    assert health.version == context.settings.app_version
    assert health.checks["database"]["connected"] is True
    assert health.checks["search_index"]["backend"] == "database"


async def test_unhealthy_when_search_index_is_down(session):
    health = await HealthService(session, DownIndex(), "1.0.0").get_health_status()

    assert health.status == "unhealthy"
    assert health.checks["search_index"]["connected"] is False
    assert health.checks["database"]["connected"] is True
