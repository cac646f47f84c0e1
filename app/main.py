"""
Application entrypoint: builds the process-wide clients in the lifespan and
wires middleware and routers.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.config import settings
from app.db.pool import DatabasePoolManager
from app.features.booking_calendar.api.router import router as booking_calendar_router
from app.features.notifications.api.router import router as functions_router
from app.infrastructure.observability.logging import get_logger, log_request, setup_logging
from app.middleware import CORSMiddleware, RequestContextMiddleware
from app.routes import health
from app.services.email import SmtpMailer
from app.services.redis_client import RedisCache

# Setup logging before creating the app
setup_logging(log_level="DEBUG" if settings.debug else "INFO", json_logs=not settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown with proper resource management."""

    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    db_pool = DatabasePoolManager.from_settings(settings)
    cache = RedisCache(settings.REDIS_URL) if settings.REDIS_URL else None
    startup_tasks = []

    try:
        logger.info("Initializing database pool")
        await db_pool.initialize()
        startup_tasks.append("database_pool")

        if cache:
            logger.info("Initializing Redis connection")
            await cache.initialize()
            startup_tasks.append("redis")
        else:
            logger.info("REDIS_URL not set, booking calendar runs uncached")

        logger.info("All services initialized successfully", services=startup_tasks)

    except Exception as e:
        logger.error("Failed to initialize services", error=str(e), completed_tasks=startup_tasks)

        if "redis" in startup_tasks:
            try:
                await cache.close()
            except Exception as cleanup_error:
                logger.error("Error cleaning up Redis", error=str(cleanup_error))

        if "database_pool" in startup_tasks:
            try:
                await db_pool.close()
            except Exception as cleanup_error:
                logger.error("Error cleaning up database pool", error=str(cleanup_error))

        raise

    app.state.db_pool = db_pool
    app.state.cache = cache
    app.state.mailer = SmtpMailer.from_settings(settings)

    yield

    # Shutdown sequence (reverse order)
    logger.info("Application shutting down")

    shutdown_errors = []

    if cache:
        try:
            logger.info("Closing Redis connection")
            await cache.close()
        except Exception as e:
            logger.error("Error closing Redis", error=str(e))
            shutdown_errors.append(f"Redis: {e}")

    try:
        logger.info("Closing database pool")
        await db_pool.close()
    except Exception as e:
        logger.error("Error closing database pool", error=str(e))
        shutdown_errors.append(f"Database: {e}")

    if shutdown_errors:
        logger.warning("Some services had shutdown errors", errors=shutdown_errors)
    else:
        logger.info("All services closed successfully")


app = FastAPI(
    title="Power Ultra Gym Backend",
    description="Booking calendar and member notification services",
    version="0.1.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


# Added last so it runs first: request_id is bound before CORS and logging
app.add_middleware(CORSMiddleware, allowed_origins=["*"])
app.add_middleware(RequestContextMiddleware)

app.include_router(health.router)
app.include_router(booking_calendar_router)
app.include_router(functions_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
