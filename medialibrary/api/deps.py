"""Shared route dependencies"""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..services.aggregator import Aggregator
from ..services.hltb_service import HLTBService
from ..services.library_service import DuplicateItem, ItemNotFound, LibraryError
from ..services.tmdb_service import TMDBService


def get_hltb_service(request: Request) -> HLTBService:
    """HLTB client opened in the application lifespan"""
    return request.app.state.hltb


def get_tmdb_service(request: Request) -> TMDBService:
    """TMDB client opened in the application lifespan"""
    return request.app.state.tmdb


def get_aggregator(
    db: AsyncSession = Depends(get_db),
    hltb: HLTBService = Depends(get_hltb_service),
    tmdb: TMDBService = Depends(get_tmdb_service),
) -> Aggregator:
    return Aggregator(db, hltb, tmdb)


def http_error(error: LibraryError) -> HTTPException:
    """Map a service error onto its HTTP status"""
    if isinstance(error, ItemNotFound):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, DuplicateItem):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
