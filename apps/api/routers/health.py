"""Health check router: liveness and readiness.

Readiness confirms the extraction engine loaded its pattern table; the
API has no other hard dependency at startup.
"""

import structlog
from fastapi import APIRouter

from apps.api.core import config
from packages.extraction_engine import PATTERN_TIERS, __version__ as engine_version

router = APIRouter(tags=["health"])
logger = structlog.get_logger()


@router.get("/health")
async def health_liveness():
    """Liveness probe. Returns 200 if the API process is running.

    This is the fast probe. Kubernetes/load balancers should use this.
    """
    return {"status": "healthy", "service": "api"}


@router.get("/health/ready")
async def health_readiness():
    """Readiness probe. Reports engine and configuration state."""
    tier_count = len(PATTERN_TIERS)
    status = {
        "status": "healthy",
        "services": {
            "api": "up",
            "engine": "up" if tier_count else "down",
            "config": "loaded" if config.settings else "missing",
        },
        "engine": {"version": engine_version, "tiers": tier_count},
    }

    if not tier_count or not config.settings:
        status["status"] = "degraded"
        logger.warning("readiness_degraded", tiers=tier_count, config_loaded=bool(config.settings))

    return status
