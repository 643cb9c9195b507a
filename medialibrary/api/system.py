"""System API routes (health, logs)"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from .. import __version__
from ..config import settings as app_settings
from ..database import get_db
from ..services.log_service import log_service
from ..services.tmdb_service import TMDBService
from .deps import get_tmdb_service

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    tmdb: TMDBService = Depends(get_tmdb_service),
):
    """
    Health check:
    - database reachable
    - TMDB API key configured
    """
    health = {
        "status": "ok",
        "version": __version__,
        "database": {"status": "unknown", "message": ""},
        "tmdb": {"status": "unknown", "message": ""},
        "data_dir": str(app_settings.DATA_DIR),
    }

    try:
        await db.execute(text("SELECT 1"))
        health["database"] = {"status": "ok", "message": "Connected"}
    except Exception as e:
        log_service.error(f"Health check database error: {e}")
        health["database"] = {"status": "error", "message": str(e)}
        health["status"] = "degraded"

    if tmdb.configured:
        health["tmdb"] = {"status": "ok", "message": "API key set"}
    else:
        health["tmdb"] = {"status": "not_configured", "message": "API key not set"}
        health["status"] = "degraded"

    return health


@router.get("/logs")
async def get_logs(
    type: str = Query("error", pattern="^(error|info|provider)$"),
    limit: int = Query(100, ge=1, le=1000),
):
    """Get recent log entries"""
    try:
        logs = log_service.get_logs(type, limit)
        return {"log_type": type, "lines": logs, "count": len(logs)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to read logs: {str(e)}")
