from datetime import datetime

from fastapi import APIRouter, HTTPException

from roomloop.core.config import settings
from roomloop.database import check_database_health

router = APIRouter(prefix="/api/health", tags=["Health"])


@router.get("")
async def health_check():
    """Process health probe (unauthenticated, no side effects)"""
    return {
        "status": "OK",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "environment": settings.environment,
        "version": settings.version,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe - fails while MongoDB is unreachable"""
    db_health = await check_database_health()

    if not db_health["overall"]:
        raise HTTPException(
            status_code=503,
            detail="Service not ready - database connection failed"
        )

    return {"status": "ready"}


@router.get("/live")
async def liveness_check():
    """Liveness probe"""
    return {"status": "alive", "timestamp": datetime.utcnow().isoformat() + "Z"}
