"""TMDB passthrough API routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.providers import TMDBLookup, TMDBSearchResult
from ..services.log_service import log_service
from ..services.provider_cache import TMDBCache
from ..services.tmdb_service import TMDBService
from .deps import get_tmdb_service

router = APIRouter(prefix="/api/tmdb", tags=["tmdb"])

MEDIA_TYPE_PATTERN = "^(movie|series)$"


@router.get("/search", response_model=List[TMDBSearchResult])
async def search_media(
    q: Optional[str] = Query(None, description="Title"),
    type: str = Query("movie", pattern=MEDIA_TYPE_PATTERN),
    tmdb: TMDBService = Depends(get_tmdb_service),
):
    """Search movies or series (never cached)"""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")
    if not tmdb.configured:
        raise HTTPException(status_code=400, detail="TMDB API key not configured")

    try:
        return await tmdb.search(q.strip(), type)
    except Exception as e:
        log_service.error(f"TMDB search failed for '{q}': {e}")
        raise HTTPException(status_code=500, detail=f"Failed to search TMDB: {str(e)}")


@router.delete("/cache/{tmdb_id}")
async def invalidate_cache(
    tmdb_id: str,
    type: str = Query("movie", pattern=MEDIA_TYPE_PATTERN),
    db: AsyncSession = Depends(get_db),
):
    cache = TMDBCache(db)
    await cache.invalidate(tmdb_id, type)
    if type == "series":
        await cache.episodes.invalidate(tmdb_id)
    await db.commit()
    return {"success": True, "message": f"Cache for TMDB {type} {tmdb_id} invalidated"}


@router.get("/{tmdb_id}", response_model=TMDBLookup)
async def get_media(
    tmdb_id: str,
    type: str = Query("movie", pattern=MEDIA_TYPE_PATTERN),
    db: AsyncSession = Depends(get_db),
    tmdb: TMDBService = Depends(get_tmdb_service),
):
    """Cached snapshot if fresh, otherwise a live fetch that refills the cache"""
    cache = TMDBCache(db)
    cached = await cache.get(tmdb_id, type)
    if cached is not None:
        log_service.provider(f"TMDB cache hit for {type} {tmdb_id}")
        return TMDBLookup(**cached.model_dump(), source="cache")

    try:
        log_service.provider(f"Fetching TMDB {type} {tmdb_id}")
        if type == "movie":
            title = await tmdb.get_movie(tmdb_id)
        else:
            title = await tmdb.get_series(tmdb_id)
    except Exception as e:
        log_service.error(f"TMDB fetch failed for {type} {tmdb_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch TMDB {type}: {str(e)}")

    await cache.put(title)
    await db.commit()
    return TMDBLookup(**title.model_dump(), source="tmdb")
