"""Series library and watch progress API routes"""

from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.media import (
    EpisodeToggle,
    EpisodeToggleResult,
    EpisodeView,
    ProgressOut,
    SeasonProgressResult,
    SeasonProgressUpdate,
    SeriesCreate,
    SeriesUpdate,
    SeriesView,
)
from ..services.aggregator import Aggregator
from ..services.library_service import LibraryError, SeriesLibrary
from ..services.progress import ProgressService
from ..services.provider_cache import TMDBCache
from .deps import get_aggregator, http_error

router = APIRouter(prefix="/api/series", tags=["series"])


@router.get("", response_model=List[SeriesView])
async def list_series(
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """All series merged with TMDB data, sorted by title"""
    series = await SeriesLibrary(db).list()
    return await aggregator.series_list(series)


@router.get("/{series_id}", response_model=SeriesView)
async def get_series(
    series_id: int,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        series = await SeriesLibrary(db).get(series_id)
    except LibraryError as e:
        raise http_error(e)
    return await aggregator.series(series)


@router.post("", response_model=SeriesView, status_code=201)
async def add_series(
    data: SeriesCreate,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        series = await SeriesLibrary(db).add(
            external_id=data.external_id,
            status=data.status,
            providers=data.providers,
            user_rating=data.user_rating,
        )
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add series: {str(e)}")
    return await aggregator.series(series)


@router.put("/{series_id}", response_model=SeriesView)
async def update_series(
    series_id: int,
    data: SeriesUpdate,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        series = await SeriesLibrary(db).update(
            series_id,
            status=data.status,
            user_rating=data.user_rating,
            external_id=data.external_id,
        )
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update series: {str(e)}")
    return await aggregator.series(series)


@router.put("/{series_id}/providers", response_model=SeriesView)
async def replace_providers(
    series_id: int,
    providers: List[str] = Body(...),
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        series = await SeriesLibrary(db).replace_providers(series_id, providers)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update providers: {str(e)}")
    return await aggregator.series(series)


@router.delete("/{series_id}/cache")
async def invalidate_series_cache(series_id: int, db: AsyncSession = Depends(get_db)):
    """Drop the series snapshot and its episode list"""
    try:
        series = await SeriesLibrary(db).require(series_id)
        cache = TMDBCache(db)
        await cache.invalidate(series.external_id, "series")
        await cache.episodes.invalidate(series.external_id)
        await db.commit()
    except LibraryError as e:
        raise http_error(e)
    return {"success": True, "message": f"Cache for {series.external_id} invalidated"}


@router.delete("/{series_id}", status_code=204)
async def remove_series(series_id: int, db: AsyncSession = Depends(get_db)):
    """Remove a series; its watch progress goes with it"""
    try:
        await SeriesLibrary(db).remove(series_id)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to remove series: {str(e)}")
    return Response(status_code=204)


@router.get("/{series_id}/episodes", response_model=List[EpisodeView])
async def list_episodes(
    series_id: int,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """Episode list (from the episode cache) with watched flags"""
    try:
        series = await SeriesLibrary(db).require(series_id)
        progress = await ProgressService(db).list(series_id)
    except LibraryError as e:
        raise http_error(e)

    watched = {(row.season, row.episode) for row in progress}
    episodes = await aggregator.episodes(series)
    return [
        EpisodeView(
            **episode.model_dump(),
            watched=(episode.season, episode.episode) in watched,
        )
        for episode in episodes
    ]


@router.get("/{series_id}/progress", response_model=List[ProgressOut])
async def get_progress(series_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await ProgressService(db).list(series_id)
    except LibraryError as e:
        raise http_error(e)


@router.post("/{series_id}/progress/toggle", response_model=EpisodeToggleResult)
async def toggle_episode(
    series_id: int,
    data: EpisodeToggle,
    db: AsyncSession = Depends(get_db),
):
    try:
        watched = await ProgressService(db).toggle(series_id, data.season, data.episode)
    except LibraryError as e:
        raise http_error(e)
    return EpisodeToggleResult(season=data.season, episode=data.episode, watched=watched)


@router.put("/{series_id}/progress/season/{season}", response_model=SeasonProgressResult)
async def set_season_progress(
    series_id: int,
    data: SeasonProgressUpdate,
    season: int = Path(..., ge=0),
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """
    Mark a whole season watched or unwatched; repeating it changes nothing.
    Without a list, marking uses the season's episodes (fetched if the
    episode cache is missing or stale) and unmarking clears the season.
    """
    try:
        episodes = data.episodes
        if episodes is None and data.watched:
            series = await SeriesLibrary(db).require(series_id)
            known = await aggregator.episodes(series)
            episodes = [ep.episode for ep in known if ep.season == season] or None
        episodes = await ProgressService(db).set_season(
            series_id, season, episodes=episodes, watched=data.watched
        )
    except LibraryError as e:
        raise http_error(e)
    return SeasonProgressResult(season=season, watched=data.watched, episodes=episodes)
