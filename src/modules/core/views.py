import time
from typing import Any, Dict

import structlog
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.core.cache import DjangoCacheAdapter

logger = structlog.get_logger(__name__)

_HEALTH_KEY = "_health_check"


def health_check(request: HttpRequest) -> JsonResponse:
    """Report database and cache reachability.

    The cache is optional for serving traffic, but an unreachable cache still
    marks the instance unhealthy so operators notice the degraded mode.
    """
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception as exc:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check.database_down", error=str(exc))

    # Raw adapter on purpose: BestEffortCache would hide the failure.
    cache = DjangoCacheAdapter("default")
    try:
        start = time.monotonic()
        cache.set(_HEALTH_KEY, "ok", 10)
        if cache.get(_HEALTH_KEY) != "ok":
            raise ConnectionError("Cache read-back mismatch")
        services["cache"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception as exc:
        services["cache"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check.cache_down", error=str(exc))

    status_label = "healthy" if overall_healthy else "unhealthy"
    logger.info("health_check.completed", status=status_label)

    return JsonResponse(
        {
            "status": status_label,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if overall_healthy else 503,
    )
