"""Next-up shortlist API routes"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.next_up import NextUpEntry
from ..services.library_service import LibraryError
from ..services.next_up import NextUpService
from .deps import http_error

router = APIRouter(prefix="/api/next", tags=["next-up"])


@router.get("", response_model=List[NextUpEntry])
async def get_next_up(
    type: Optional[str] = Query(None, description="game, movie or series"),
    db: AsyncSession = Depends(get_db),
):
    """Shortlist entries, optionally of one media type"""
    return await NextUpService(db).get(type)


@router.put("", response_model=List[NextUpEntry])
async def replace_next_up(
    entries: List[NextUpEntry] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace the shortlist of every media type present in the body.
    More than the per-type limit rejects the whole request.
    """
    try:
        return await NextUpService(db).replace(entries)
    except LibraryError as e:
        raise http_error(e)


@router.delete("/{media_id}", status_code=204)
async def remove_next_up(
    media_id: int,
    type: Optional[str] = Query(None, description="game, movie or series"),
    db: AsyncSession = Depends(get_db),
):
    try:
        await NextUpService(db).remove(media_id, type)
    except LibraryError as e:
        raise http_error(e)
    return Response(status_code=204)
