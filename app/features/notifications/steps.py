"""
Best-effort step runner.

Side effects that must not abort a workflow (in-app notifications, emails)
run through ``run_step`` and come back as a tagged StepOutcome instead of an
exception.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from app.infrastructure.observability.logging import get_logger

from .domain.models import StepOutcome

logger = get_logger(__name__)


async def run_step(name: str, action: Callable[[], Awaitable[Any]], **log_context) -> StepOutcome:
    try:
        await action()
    except Exception as e:
        logger.warning("Best-effort step failed", step=name, error=str(e), **log_context)
        return StepOutcome(name=name, ok=False, error=str(e))

    logger.debug("Best-effort step succeeded", step=name, **log_context)
    return StepOutcome(name=name, ok=True)
