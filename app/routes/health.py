"""
Health check endpoints: liveness plus readiness of the database pool and
the optional Redis cache.
"""

import time

from fastapi import APIRouter, Request

from app.config import settings

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "gym-booking-backend"}


@router.get("/readyz")
async def readyz(request: Request):
    """Readiness check across the database pool and Redis."""
    checks = {}
    overall_ok = True

    db_pool = getattr(request.app.state, "db_pool", None)
    t0 = time.time()
    if db_pool is None:
        checks["database"] = {"ok": False, "error": "Database pool not configured"}
        overall_ok = False
    else:
        db_health = await db_pool.health_check()
        is_healthy = db_health.get("healthy", False)
        checks["database"] = {
            "ok": is_healthy,
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
        if "pool_stats" in db_health:
            checks["database"]["pool_stats"] = db_health["pool_stats"]
        if "warnings" in db_health:
            checks["database"]["warnings"] = db_health["warnings"]
        if not is_healthy:
            checks["database"]["error"] = db_health.get("error", "Database unhealthy")
        overall_ok = overall_ok and is_healthy

    # Redis is optional; only an initialized-but-failing cache counts against readiness
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        checks["redis"] = {"ok": True, "enabled": False}
    else:
        t0 = time.time()
        redis_health = await cache.health_check()
        checks["redis"] = {
            "ok": redis_health["healthy"],
            "enabled": True,
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
        if not redis_health["healthy"]:
            checks["redis"]["error"] = redis_health.get("error")
        overall_ok = overall_ok and redis_health["healthy"]

    checks["configuration"] = {
        "email_configured": bool(settings.GMAIL_USER and settings.GMAIL_APP_PASSWORD),
        "environment": settings.environment,
    }

    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
