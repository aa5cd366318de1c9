"""Health Probe — inline liveness endpoint, never delegated to a handler group.

Invariants:
    - GET or HEAD /health (trailing slash too) returns 200 with status "ok"
      while the process is up; no redirect
    - timestamp is ISO-8601 UTC with millisecond precision and a Z suffix
    - No side effects, no failure modes

Design Decisions:
    - Clock injected via get_clock so tests can pin the time
"""

from collections.abc import Callable
from datetime import datetime

from fastapi import APIRouter, Depends, status

from l2rr2l_api.core.timestamps import format_timestamp, utcnow

router = APIRouter(tags=["health"])


def get_clock() -> Callable[[], datetime]:
    return utcnow


@router.api_route("/health", methods=["GET", "HEAD"], status_code=status.HTTP_200_OK)
@router.api_route("/health/", methods=["GET", "HEAD"], include_in_schema=False)
async def health_check(clock: Callable[[], datetime] = Depends(get_clock)):
    """Liveness probe. Returns 200 if the process is up."""
    return {"status": "ok", "timestamp": format_timestamp(clock())}
