"""Movie library API routes"""

from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.media import MovieCreate, MovieUpdate, MovieView
from ..services.aggregator import Aggregator
from ..services.library_service import LibraryError, MovieLibrary
from ..services.provider_cache import TMDBCache
from .deps import get_aggregator, http_error

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("", response_model=List[MovieView])
async def list_movies(
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """All movies merged with TMDB data, sorted by title"""
    movies = await MovieLibrary(db).list()
    return await aggregator.movies(movies)


@router.get("/{movie_id}", response_model=MovieView)
async def get_movie(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        movie = await MovieLibrary(db).get(movie_id)
    except LibraryError as e:
        raise http_error(e)
    return await aggregator.movie(movie)


@router.post("", response_model=MovieView, status_code=201)
async def add_movie(
    data: MovieCreate,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        movie = await MovieLibrary(db).add(
            external_id=data.external_id,
            status=data.status,
            providers=data.providers,
            user_rating=data.user_rating,
        )
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add movie: {str(e)}")
    return await aggregator.movie(movie)


@router.put("/{movie_id}", response_model=MovieView)
async def update_movie(
    movie_id: int,
    data: MovieUpdate,
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        movie = await MovieLibrary(db).update(
            movie_id,
            status=data.status,
            user_rating=data.user_rating,
            external_id=data.external_id,
        )
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update movie: {str(e)}")
    return await aggregator.movie(movie)


@router.put("/{movie_id}/providers", response_model=MovieView)
async def replace_providers(
    movie_id: int,
    providers: List[str] = Body(...),
    db: AsyncSession = Depends(get_db),
    aggregator: Aggregator = Depends(get_aggregator),
):
    """Replace where the movie is owned / watchable (free-form names)"""
    try:
        movie = await MovieLibrary(db).replace_providers(movie_id, providers)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update providers: {str(e)}")
    return await aggregator.movie(movie)


@router.delete("/{movie_id}/cache")
async def invalidate_movie_cache(movie_id: int, db: AsyncSession = Depends(get_db)):
    try:
        movie = await MovieLibrary(db).require(movie_id)
        await TMDBCache(db).invalidate(movie.external_id, "movie")
        await db.commit()
    except LibraryError as e:
        raise http_error(e)
    return {"success": True, "message": f"Cache for {movie.external_id} invalidated"}


@router.delete("/{movie_id}", status_code=204)
async def remove_movie(movie_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await MovieLibrary(db).remove(movie_id)
    except LibraryError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to remove movie: {str(e)}")
    return Response(status_code=204)
