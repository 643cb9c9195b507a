"""Backup export / import API routes"""

import json
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.admin import ImportResult
from ..services.backup_service import BackupService
from ..services.library_service import LibraryError
from ..services.log_service import log_service
from .deps import http_error

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/export")
async def export_backup(db: AsyncSession = Depends(get_db)):
    """Download every table as one JSON document"""
    try:
        data = await BackupService(db).export_all()
    except Exception as e:
        log_service.error(f"Export failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to export backup: {str(e)}")

    filename = f"medialibrary-backup-{datetime.now().strftime('%Y%m%d-%H%M%S')}.json"
    return Response(
        content=json.dumps(data, indent=2, ensure_ascii=False),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResult)
async def import_backup(
    document: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Replace the whole database with an exported document"""
    try:
        imported = await BackupService(db).import_all(document)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        log_service.error(f"Import failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to import backup: {str(e)}")
    return ImportResult(success=True, imported=imported)
