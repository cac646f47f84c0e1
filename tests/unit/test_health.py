"""
Tests for health check endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)


class StubPool:
    def __init__(self, healthy: bool):
        self.healthy = healthy

    async def health_check(self):
        if self.healthy:
            return {
                "healthy": True,
                "service": "database_pool",
                "pool_stats": {"pool_size": 2, "pool_available": 2},
            }
        return {"healthy": False, "service": "database_pool", "error": "connection refused"}


class StubCache:
    def __init__(self, healthy: bool):
        self.healthy = healthy

    async def health_check(self):
        return {"healthy": self.healthy, "service": "redis_cache"}


@pytest.fixture
def app_state():
    yield app.state
    for name in ("db_pool", "cache"):
        if hasattr(app.state, name):
            delattr(app.state, name)


def test_healthz_endpoint():
    """Test the basic health check endpoint."""
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_readyz_all_services_healthy(app_state):
    app_state.db_pool = StubPool(healthy=True)
    app_state.cache = StubCache(healthy=True)

    response = client.get("/readyz")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_ok"] is True
    assert data["checks"]["database"]["ok"] is True
    assert data["checks"]["database"]["pool_stats"]["pool_size"] == 2
    assert data["checks"]["redis"]["ok"] is True


def test_readyz_without_cache_configured(app_state):
    app_state.db_pool = StubPool(healthy=True)
    app_state.cache = None

    data = client.get("/readyz").json()

    assert data["overall_ok"] is True
    assert data["checks"]["redis"] == {"ok": True, "enabled": False}


def test_readyz_database_unhealthy(app_state):
    app_state.db_pool = StubPool(healthy=False)
    app_state.cache = StubCache(healthy=True)

    response = client.get("/readyz")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_ok"] is False
    assert data["checks"]["database"]["error"] == "connection refused"


def test_readyz_redis_unhealthy(app_state):
    app_state.db_pool = StubPool(healthy=True)
    app_state.cache = StubCache(healthy=False)

    data = client.get("/readyz").json()

    assert data["overall_ok"] is False
    assert data["checks"]["redis"]["ok"] is False
