"""Game library API routes"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.games import GameCreate, GameTagValue, GameUpdate, GameView, PlatformIn
from ..services.aggregator import Aggregator, apply_custom_order
from ..services.library_service import GameLibrary, LibraryError
from ..services.provider_cache import HLTBCache
from ..services.sort_order import SortOrderService
from .deps import get_aggregator, http_error

router = APIRouter(prefix="/api/games", tags=["games"])


@router.get("", response_model=List[GameView])
async def list_games(
    order: Optional[str] = Query(None, pattern="^(title|custom)$"),
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """
    All games merged with HLTB data, sorted by name.
    order=custom puts games with a stored sort position first.
    """
    games = await GameLibrary(db).list()
    views = await aggregator.games(games)
    if order == "custom":
        views = apply_custom_order(views, await SortOrderService(db).positions())
    return views


@router.get("/{game_id}", response_model=GameView)
async def get_game(
    game_id: int,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        game = await GameLibrary(db).get(game_id)
    except LibraryError as e:
        raise http_error(e)
    return await aggregator.game(game)


@router.post("", response_model=GameView, status_code=201)
async def add_game(
    data: GameCreate,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """Add a game (with optional platforms and tags)"""
    try:
        game = await GameLibrary(db).add(
            external_id=data.external_id,
            status=data.status,
            platforms=data.platforms,
            tags=data.tags,
            user_rating=data.user_rating,
        )
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add game: {str(e)}")
    return await aggregator.game(game)


@router.put("/{game_id}", response_model=GameView)
async def update_game(
    game_id: int,
    data: GameUpdate,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        game = await GameLibrary(db).update(
            game_id,
            status=data.status,
            user_rating=data.user_rating,
            external_id=data.external_id,
        )
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update game: {str(e)}")
    return await aggregator.game(game)


@router.put("/{game_id}/platforms", response_model=GameView)
async def replace_platforms(
    game_id: int,
    platforms: List[PlatformIn] = Body(...),
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """Replace all platforms of a game (an empty list removes them)"""
    try:
        game = await GameLibrary(db).replace_platforms(game_id, platforms)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update platforms: {str(e)}")
    return await aggregator.game(game)


@router.put("/{game_id}/tags", response_model=GameView)
async def replace_tags(
    game_id: int,
    tags: List[GameTagValue] = Body(...),
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        game = await GameLibrary(db).replace_tags(game_id, tags)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update tags: {str(e)}")
    return await aggregator.game(game)


@router.delete("/{game_id}/cache")
async def invalidate_game_cache(game_id: int, db: AsyncSession = Depends(get_db)):
    """Drop the HLTB snapshot so the next read fetches fresh data"""
    try:
        game = await GameLibrary(db).require(game_id)
        await HLTBCache(db).invalidate(game.external_id)
        await db.commit()
    except LibraryError as e:
        raise http_error(e)
    return {"success": True, "message": f"Cache for {game.external_id} invalidated"}


@router.delete("/{game_id}", status_code=204)
async def remove_game(game_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await GameLibrary(db).remove(game_id)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to remove game: {str(e)}")
    return Response(status_code=204)
