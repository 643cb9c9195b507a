"""Pydantic schemas for validation"""

from .admin import ImportResult
from .games import (
    GameCreate,
    GameUpdate,
    GameView,
    PlatformIn,
    PlatformOut,
    SortOrderUpdate,
    SortPositionOut,
)
from .media import (
    EpisodeToggle,
    EpisodeToggleResult,
    EpisodeView,
    MovieCreate,
    MovieUpdate,
    MovieView,
    ProgressOut,
    ProviderOut,
    SeasonProgressResult,
    SeasonProgressUpdate,
    SeriesCreate,
    SeriesUpdate,
    SeriesView,
)
from .next_up import NextUpEntry
from .providers import (
    HLTBDlc,
    HLTBGame,
    HLTBLookup,
    HLTBSearchResult,
    StreamingProvider,
    TMDBEpisode,
    TMDBLookup,
    TMDBSearchResult,
    TMDBTitle,
)

__all__ = [
    "ImportResult",
    "GameCreate",
    "GameUpdate",
    "GameView",
    "PlatformIn",
    "PlatformOut",
    "SortOrderUpdate",
    "SortPositionOut",
    "EpisodeToggle",
    "EpisodeToggleResult",
    "EpisodeView",
    "MovieCreate",
    "MovieUpdate",
    "MovieView",
    "ProgressOut",
    "ProviderOut",
    "SeasonProgressResult",
    "SeasonProgressUpdate",
    "SeriesCreate",
    "SeriesUpdate",
    "SeriesView",
    "NextUpEntry",
    "HLTBDlc",
    "HLTBGame",
    "HLTBLookup",
    "HLTBSearchResult",
    "StreamingProvider",
    "TMDBEpisode",
    "TMDBLookup",
    "TMDBSearchResult",
    "TMDBTitle",
]
