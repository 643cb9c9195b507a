"""HowLongToBeat passthrough API routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.providers import HLTBLookup, HLTBSearchResult
from ..services.hltb_service import HLTBService
from ..services.log_service import log_service
from ..services.provider_cache import HLTBCache
from .deps import get_hltb_service

router = APIRouter(prefix="/api/hltb", tags=["hltb"])


@router.get("/search", response_model=List[HLTBSearchResult])
async def search_games(
    q: Optional[str] = Query(None, description="Game name"),
    hltb: HLTBService = Depends(get_hltb_service),
):
    """Search HowLongToBeat (never cached)"""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")

    try:
        return await hltb.search(q)
    except Exception as e:
        log_service.error(f"HLTB search failed for '{q}': {e}")
        raise HTTPException(status_code=500, detail=f"Failed to search HLTB: {str(e)}")


@router.delete("/cache/{game_id}")
async def invalidate_cache(game_id: str, db: AsyncSession = Depends(get_db)):
    await HLTBCache(db).invalidate(game_id)
    await db.commit()
    return {"success": True, "message": f"Cache for HLTB id {game_id} invalidated"}


@router.get("/{game_id}", response_model=HLTBLookup)
async def get_game(
    game_id: str,
    db: AsyncSession = Depends(get_db),
    hltb: HLTBService = Depends(get_hltb_service),
):
    """Cached snapshot if fresh, otherwise a live fetch that refills the cache"""
    cache = HLTBCache(db)
    cached = await cache.get(game_id)
    if cached is not None:
        log_service.provider(f"HLTB cache hit for {game_id}")
        return HLTBLookup(**cached.model_dump(), source="cache")

    try:
        log_service.provider(f"Fetching HLTB game {game_id}")
        game = await hltb.get_game(game_id)
    except Exception as e:
        log_service.error(f"HLTB fetch failed for {game_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch HLTB game: {str(e)}")

    await cache.put(game)
    await db.commit()
    return HLTBLookup(**game.model_dump(), source="hltb")
