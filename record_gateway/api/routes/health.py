"""Health Probe — liveness endpoint for container orchestration.

Invariants:
    - GET /health always returns 200 if the process is up
    - Never touches the record store (liveness, not readiness)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status

from record_gateway.config import get_settings
from record_gateway.services.tools_registry import get_profile

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    profile = get_profile(get_settings().gateway_profile)
    return {
        "status": "ok",
        "server": profile.server_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
