"""Services layer"""

from .aggregator import Aggregator
from .backup_service import BackupService
from .hltb_service import HLTBService
from .library_service import GameLibrary, LibraryService, MovieLibrary, SeriesLibrary
from .log_service import LogService
from .next_up import NextUpService
from .progress import ProgressService
from .provider_cache import EpisodeCache, HLTBCache, TMDBCache
from .sort_order import SortOrderService
from .tmdb_service import TMDBService

__all__ = [
    "Aggregator",
    "BackupService",
    "HLTBService",
    "LibraryService",
    "GameLibrary",
    "MovieLibrary",
    "SeriesLibrary",
    "LogService",
    "NextUpService",
    "ProgressService",
    "EpisodeCache",
    "HLTBCache",
    "TMDBCache",
    "SortOrderService",
    "TMDBService",
]
