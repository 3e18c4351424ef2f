"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_record_store
from core.logging import get_logger
from core.storage import BaseRecordStore


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Basic health check.

    Returns 200 if the service is running.
    Used by load balancers and orchestration systems.
    """
    return {
        "status": "healthy",
        "service": "loja-api",
    }


@router.get("/ready")
async def readiness_check(
    store: BaseRecordStore = Depends(get_record_store),
) -> JSONResponse:
    """
    Readiness check.

    Returns 200 when the record store answers a ping, 503 otherwise.
    """
    database_ok = await store.ping()
    if not database_ok:
        logger.warning("Readiness check failed", check="database")

    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": "ready" if database_ok else "unavailable",
            "checks": {
                "database": "ok" if database_ok else "unreachable",
            },
        },
    )
