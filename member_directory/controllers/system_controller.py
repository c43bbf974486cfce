# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from member_directory.core.config import settings
from member_directory.core.dependencies import get_member_repo, get_role_repo
from member_directory.repositories.base import PersistenceError

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    role_repo = get_role_repo()
    member_repo = get_member_repo()
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage": "sql" if settings.uses_database else "memory",
        "roles_count": role_repo.count(),
        "members_count": member_repo.count(),
        "active_members_count": member_repo.count_active(),
    }


@router.get("/health/ready")
def readiness_check():
    """Readiness probe — verifies the store can serve traffic."""
    role_repo = get_role_repo()
    member_repo = get_member_repo()
    try:
        role_repo.verify_connection()
        return {
            "status": "ready",
            "service": settings.SERVICE_NAME,
            "roles_count": role_repo.count(),
            "members_count": member_repo.count(),
        }
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
