"""Merge library rows with provider metadata"""

import asyncio
import unicodedata
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.game import Game
from ..models.media import Movie, Series
from ..schemas.games import GameView, PlatformOut
from ..schemas.media import MovieView, ProviderOut, SeriesView
from ..schemas.providers import HLTBGame, TMDBEpisode, TMDBTitle
from .hltb_service import HLTBService
from .log_service import log_service
from .provider_cache import HLTBCache, TMDBCache
from .tmdb_service import TMDBService

Snapshot = TypeVar("Snapshot")


def build_game_view(game: Game, hltb: Optional[HLTBGame]) -> GameView:
    """Local fields always win; display fields fall back to the external id / None"""
    return GameView(
        id=str(game.id),
        external_id=game.external_id,
        name=(hltb.name if hltb else None) or game.external_id,
        image_url=hltb.image_url if hltb else None,
        status=game.status,
        user_rating=game.user_rating,
        platforms=[PlatformOut.model_validate(platform) for platform in game.platforms],
        tags=[tag.tag for tag in game.tags],
        gameplay_main=hltb.gameplay_main if hltb else None,
        gameplay_extra=hltb.gameplay_extra if hltb else None,
        gameplay_complete=hltb.gameplay_complete if hltb else None,
        gameplay_all=hltb.gameplay_all if hltb else None,
        rating=hltb.rating if hltb else None,
        dlcs=hltb.dlcs if hltb else [],
    )


def _media_fields(item, tmdb: Optional[TMDBTitle]) -> Dict:
    if tmdb is None:
        return {
            "id": str(item.id),
            "external_id": item.external_id,
            "status": item.status,
            "user_rating": item.user_rating,
            "providers": [ProviderOut.model_validate(p) for p in item.providers],
            "title": item.external_id,
        }
    return {
        "id": str(item.id),
        "external_id": item.external_id,
        "status": item.status,
        "user_rating": item.user_rating,
        "providers": [ProviderOut.model_validate(p) for p in item.providers],
        "title": tmdb.title_en or tmdb.title_de or item.external_id,
        "title_de": tmdb.title_de,
        "image_url": tmdb.image_url,
        "year": tmdb.year,
        "certification": tmdb.certification,
        "rating": tmdb.rating,
        "runtime": tmdb.runtime,
        "genres": tmdb.genres,
        "streaming_providers": tmdb.streaming_providers,
        "link_url": tmdb.link_url,
    }


def build_movie_view(movie: Movie, tmdb: Optional[TMDBTitle]) -> MovieView:
    return MovieView(**_media_fields(movie, tmdb))


def build_series_view(series: Series, tmdb: Optional[TMDBTitle]) -> SeriesView:
    return SeriesView(
        **_media_fields(series, tmdb),
        seasons=tmdb.seasons if tmdb else None,
        episodes=tmdb.episodes if tmdb else None,
    )


def title_sort_key(title: str):
    """
    Alphabetical order that ignores accents and case ('Ärger' sorts with A),
    ties broken by the case-folded then the raw title.
    """
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return (base.casefold(), title.casefold(), title)


def apply_custom_order(views: Sequence, positions: Dict[int, int]) -> List:
    """
    Items with a stored position first (ascending), then every other item in
    the order it arrived.
    """
    listed = [view for view in views if int(view.id) in positions]
    listed.sort(key=lambda view: positions[int(view.id)])
    unlisted = [view for view in views if int(view.id) not in positions]
    return listed + unlisted


async def fetch_or_none(
    fetch: Callable[[], Awaitable[Snapshot]], label: str
) -> Optional[Snapshot]:
    """Run a provider fetch; any failure is logged and degrades to None"""
    try:
        return await fetch()
    except Exception as e:
        log_service.error(f"{label} fetch failed: {e}")
        return None


class Aggregator:
    """Cache-or-fetch provider metadata and merge it into API views"""

    def __init__(self, db: AsyncSession, hltb: HLTBService, tmdb: TMDBService):
        self.db = db
        self.hltb = hltb
        self.tmdb = tmdb
        self.hltb_cache = HLTBCache(db)
        self.tmdb_cache = TMDBCache(db)

    # -- snapshots ---------------------------------------------------------

    async def _game_snapshots(self, external_ids: List[str]) -> Dict[str, Optional[HLTBGame]]:
        snapshots = {}
        for external_id in external_ids:
            snapshots[external_id] = await self.hltb_cache.get(external_id)

        missing = [eid for eid, snapshot in snapshots.items() if snapshot is None]
        if missing:
            log_service.provider(f"HLTB cache miss for {len(missing)} game(s)")
        fetched = await asyncio.gather(
            *(
                fetch_or_none(lambda eid=eid: self.hltb.get_game(eid), f"HLTB {eid}")
                for eid in missing
            )
        )
        for external_id, game in zip(missing, fetched):
            if game is not None:
                await self.hltb_cache.put(game)
                snapshots[external_id] = game
        return snapshots

    async def _tmdb_snapshots(
        self, external_ids: List[str], media_type: str
    ) -> Dict[str, Optional[TMDBTitle]]:
        snapshots = {}
        for external_id in external_ids:
            snapshots[external_id] = await self.tmdb_cache.get(external_id, media_type)

        fetch = self.tmdb.get_movie if media_type == "movie" else self.tmdb.get_series
        missing = [eid for eid, snapshot in snapshots.items() if snapshot is None]
        if missing:
            log_service.provider(f"TMDB cache miss for {len(missing)} {media_type}(s)")
        fetched = await asyncio.gather(
            *(
                fetch_or_none(lambda eid=eid: fetch(eid), f"TMDB {media_type} {eid}")
                for eid in missing
            )
        )
        for external_id, title in zip(missing, fetched):
            if title is not None:
                await self.tmdb_cache.put(title)
                snapshots[external_id] = title

        if media_type == "series":
            for external_id, title in snapshots.items():
                if title is not None and title.runtime is None:
                    runtime = await self.tmdb_cache.backfill_series_runtime(external_id)
                    if runtime is not None:
                        snapshots[external_id] = title.model_copy(update={"runtime": runtime})
        return snapshots

    async def game_snapshot(self, external_id: str) -> Optional[HLTBGame]:
        return (await self._game_snapshots([external_id]))[external_id]

    async def tmdb_snapshot(self, external_id: str, media_type: str) -> Optional[TMDBTitle]:
        return (await self._tmdb_snapshots([external_id], media_type))[external_id]

    # -- views -------------------------------------------------------------

    async def game(self, game: Game) -> GameView:
        return build_game_view(game, await self.game_snapshot(game.external_id))

    async def movie(self, movie: Movie) -> MovieView:
        return build_movie_view(movie, await self.tmdb_snapshot(movie.external_id, "movie"))

    async def series(self, series: Series) -> SeriesView:
        return build_series_view(
            series, await self.tmdb_snapshot(series.external_id, "series")
        )

    async def games(self, games: Sequence[Game]) -> List[GameView]:
        snapshots = await self._game_snapshots([game.external_id for game in games])
        views = [build_game_view(game, snapshots[game.external_id]) for game in games]
        return sorted(views, key=lambda view: title_sort_key(view.name))

    async def movies(self, movies: Sequence[Movie]) -> List[MovieView]:
        snapshots = await self._tmdb_snapshots([m.external_id for m in movies], "movie")
        views = [build_movie_view(movie, snapshots[movie.external_id]) for movie in movies]
        return sorted(views, key=lambda view: title_sort_key(view.title))

    async def series_list(self, series: Sequence[Series]) -> List[SeriesView]:
        snapshots = await self._tmdb_snapshots([s.external_id for s in series], "series")
        views = [build_series_view(item, snapshots[item.external_id]) for item in series]
        return sorted(views, key=lambda view: title_sort_key(view.title))

    async def episodes(self, series: Series) -> List[TMDBEpisode]:
        """
        Cached episode list of a series; on a miss every season is fetched
        from TMDB. Provider failures degrade to an empty list.
        """
        cache = self.tmdb_cache.episodes
        episodes = await cache.get_episodes(series.external_id)
        if episodes is not None:
            return episodes

        snapshot = await self.tmdb_snapshot(series.external_id, "series")
        if snapshot is None or not snapshot.seasons:
            return []

        fetched = await fetch_or_none(
            lambda: self.tmdb.get_series_episodes(series.external_id, snapshot.seasons),
            f"TMDB episodes {series.external_id}",
        )
        if not fetched:
            return []

        await cache.put_episodes(series.external_id, fetched)
        await self.tmdb_cache.backfill_series_runtime(series.external_id)
        return fetched
