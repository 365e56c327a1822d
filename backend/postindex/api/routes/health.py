"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 while posts are loading or after a failed load

Design Decisions:
    - Separate liveness/readiness: a failed post load should pull the instance from
      the load balancer, not restart it (reload is the recovery path)
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from postindex.core.domain_types import LoadStatus
from postindex.services.post_library import PostLibrary, get_post_library

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "postindex-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(library: PostLibrary = Depends(get_post_library)):
    """Readiness probe — posts loaded and queryable."""
    if library.status is not LoadStatus.READY:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": f"posts_{library.status.value}",
            },
        )
    return {
        "status": "ready",
        "checks": {"posts": "loaded", "post_count": library.post_count},
    }
