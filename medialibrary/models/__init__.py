"""Database models"""

from .cache import HLTBCacheEntry, TMDBCacheEntry, TMDBEpisodeCacheEntry
from .game import Game, GamePlatform, GameTag, SortPosition
from .media import EpisodeProgress, Movie, MovieProvider, Series, SeriesProvider
from .next_up import NextUp

__all__ = [
    "Game",
    "GamePlatform",
    "GameTag",
    "SortPosition",
    "Movie",
    "MovieProvider",
    "Series",
    "SeriesProvider",
    "EpisodeProgress",
    "NextUp",
    "HLTBCacheEntry",
    "TMDBCacheEntry",
    "TMDBEpisodeCacheEntry",
]
