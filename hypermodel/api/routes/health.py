"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/health/ returns 200 whenever the process is up (liveness)
    - GET /api/health/ready returns 503 until the document store answers (readiness)
    - Probes live outside the API prefix and never touch the registry's types
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "hypermodel-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: document store connectivity plus registered type count."""
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None or not await db_manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "document_store_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "registered_types": len(request.app.state.registry.get_all_types()),
        },
    }
