"""Movie and series schemas"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from ..models.constants import MOVIE_STATUSES, SERIES_STATUSES
from .base import CamelModel
from .providers import StreamingProvider

MovieStatus = Literal[MOVIE_STATUSES]
SeriesStatus = Literal[SERIES_STATUSES]


class ProviderOut(CamelModel):
    id: int
    provider: str


class MovieCreate(CamelModel):
    """Schema for adding a movie to the library"""

    external_id: str = Field(..., min_length=1)
    status: MovieStatus
    user_rating: Optional[int] = Field(None, ge=1, le=10)
    providers: List[str] = []


class MovieUpdate(CamelModel):
    status: Optional[MovieStatus] = None
    user_rating: Optional[int] = Field(None, ge=1, le=10)
    external_id: Optional[str] = Field(None, min_length=1)


class SeriesCreate(CamelModel):
    """Schema for adding a series to the library"""

    external_id: str = Field(..., min_length=1)
    status: SeriesStatus
    user_rating: Optional[int] = Field(None, ge=1, le=10)
    providers: List[str] = []


class SeriesUpdate(CamelModel):
    status: Optional[SeriesStatus] = None
    user_rating: Optional[int] = Field(None, ge=1, le=10)
    external_id: Optional[str] = Field(None, min_length=1)


class MovieView(CamelModel):
    """Movie merged with its TMDB snapshot"""

    id: str
    external_id: str
    status: str
    user_rating: Optional[int] = None
    providers: List[ProviderOut] = []
    title: str
    title_de: Optional[str] = None
    image_url: Optional[str] = None
    year: Optional[str] = None
    certification: Optional[str] = None
    rating: Optional[float] = None
    runtime: Optional[int] = None
    genres: List[str] = []
    streaming_providers: List[StreamingProvider] = []
    link_url: Optional[str] = None


class SeriesView(MovieView):
    """Series merged with its TMDB snapshot"""

    seasons: Optional[int] = None
    episodes: Optional[int] = None


class EpisodeView(CamelModel):
    season: int
    episode: int
    title: Optional[str] = None
    air_date: Optional[str] = None
    runtime: Optional[int] = None
    watched: bool = False


class ProgressOut(CamelModel):
    season: int
    episode: int
    watched_at: Optional[datetime] = None


class EpisodeToggle(CamelModel):
    season: int = Field(..., ge=0)
    episode: int = Field(..., ge=1)


class EpisodeToggleResult(CamelModel):
    season: int
    episode: int
    watched: bool


class SeasonProgressUpdate(CamelModel):
    """Mark a whole season; episodes default to the cached episode list"""

    episodes: Optional[List[int]] = None
    watched: bool


class SeasonProgressResult(CamelModel):
    season: int
    watched: bool
    episodes: List[int]
