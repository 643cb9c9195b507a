"""Provider cache (HLTB / TMDB snapshots with time-to-live)"""

import json
import math
import random
import statistics
import time
from collections import Counter
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..models.cache import HLTBCacheEntry, TMDBCacheEntry, TMDBEpisodeCacheEntry
from ..schemas.providers import HLTBGame, TMDBEpisode, TMDBTitle

DAY_MS = 24 * 60 * 60 * 1000

# TTL for rows written without a jittered ttl_ms (e.g. restored backups)
DEFAULT_TTL_MS = 7 * DAY_MS


def now_ms() -> int:
    return int(time.time() * 1000)


def random_ttl_ms() -> int:
    """Per-row TTL so entries written together do not all expire together"""
    return random.randint(
        settings.CACHE_TTL_MIN_DAYS * DAY_MS, settings.CACHE_TTL_MAX_DAYS * DAY_MS
    )


def is_fresh(updated_at: Optional[int], ttl_ms: Optional[int], now: int) -> bool:
    if updated_at is None:
        return False
    return now - updated_at <= (ttl_ms or DEFAULT_TTL_MS)


def fallback_runtime(runtimes: Iterable[Optional[int]]) -> Optional[int]:
    """
    Typical episode runtime: the mode when one value repeats more often than
    any other, otherwise the median (even counts rounded half-up).
    Unknown (None/0) runtimes are ignored.
    """
    values = sorted(value for value in runtimes if value)
    if not values:
        return None

    counts = Counter(values).most_common()
    top_count = counts[0][1]
    leaders = [value for value, count in counts if count == top_count]
    if top_count > 1 and len(leaders) == 1:
        return leaders[0]

    return math.floor(statistics.median(values) + 0.5)


class HLTBCache:
    """HowLongToBeat snapshots keyed by HLTB game id"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _row(self, game_id: str) -> Optional[HLTBCacheEntry]:
        result = await self.db.execute(
            select(HLTBCacheEntry).where(HLTBCacheEntry.id == str(game_id))
        )
        return result.scalar_one_or_none()

    async def get(self, game_id: str, now: int = None) -> Optional[HLTBGame]:
        """Snapshot if present and not expired"""
        now = now_ms() if now is None else now
        row = await self._row(game_id)
        if row is None or not is_fresh(row.updated_at, row.ttl_ms, now):
            return None

        return HLTBGame(
            id=row.id,
            name=row.name,
            image_url=row.image_url,
            gameplay_main=row.gameplay_main,
            gameplay_extra=row.gameplay_extra,
            gameplay_complete=row.gameplay_complete,
            gameplay_all=row.gameplay_all,
            rating=row.rating,
            dlcs=json.loads(row.dlcs or "[]"),
        )

    async def put(self, game: HLTBGame, now: int = None):
        """Upsert snapshot, refreshing updated_at and re-rolling the TTL"""
        row = await self._row(game.id)
        if row is None:
            row = HLTBCacheEntry(id=str(game.id))
            self.db.add(row)

        row.name = game.name
        row.image_url = game.image_url
        row.gameplay_main = game.gameplay_main
        row.gameplay_extra = game.gameplay_extra
        row.gameplay_complete = game.gameplay_complete
        row.gameplay_all = game.gameplay_all
        row.rating = game.rating
        row.dlcs = json.dumps([dlc.model_dump() for dlc in game.dlcs])
        row.updated_at = now_ms() if now is None else now
        row.ttl_ms = random_ttl_ms()
        await self.db.flush()

    async def invalidate(self, game_id: str):
        await self.db.execute(
            delete(HLTBCacheEntry).where(HLTBCacheEntry.id == str(game_id))
        )


class EpisodeCache:
    """Per-episode TMDB metadata keyed by (series id, season, episode)"""

    def __init__(self, db: AsyncSession, ttl_ms: int = None):
        self.db = db
        self.ttl_ms = ttl_ms or settings.EPISODE_CACHE_TTL_DAYS * DAY_MS

    @staticmethod
    def _to_schema(row: TMDBEpisodeCacheEntry) -> TMDBEpisode:
        return TMDBEpisode(
            season=row.season,
            episode=row.episode,
            title=row.title,
            air_date=row.air_date,
            runtime=row.runtime,
        )

    async def _rows(self, series_id: str) -> List[TMDBEpisodeCacheEntry]:
        result = await self.db.execute(
            select(TMDBEpisodeCacheEntry)
            .where(TMDBEpisodeCacheEntry.series_id == str(series_id))
            .order_by(TMDBEpisodeCacheEntry.season, TMDBEpisodeCacheEntry.episode)
        )
        return list(result.scalars().all())

    async def get_episodes(self, series_id: str, now: int = None) -> Optional[List[TMDBEpisode]]:
        """All cached episodes of a series, or None if missing or any row is stale"""
        now = now_ms() if now is None else now
        rows = await self._rows(series_id)
        if not rows:
            return None
        if not all(is_fresh(row.updated_at, self.ttl_ms, now) for row in rows):
            return None
        return [self._to_schema(row) for row in rows]

    async def get_episode(
        self, series_id: str, season: int, episode: int, now: int = None
    ) -> Optional[TMDBEpisode]:
        now = now_ms() if now is None else now
        row = await self.db.get(TMDBEpisodeCacheEntry, (str(series_id), season, episode))
        if row is None or not is_fresh(row.updated_at, self.ttl_ms, now):
            return None
        return self._to_schema(row)

    async def put_episodes(self, series_id: str, episodes: List[TMDBEpisode], now: int = None):
        """Upsert every episode with one shared timestamp"""
        now = now_ms() if now is None else now
        existing = {(row.season, row.episode): row for row in await self._rows(series_id)}

        for episode in episodes:
            row = existing.get((episode.season, episode.episode))
            if row is None:
                row = TMDBEpisodeCacheEntry(
                    series_id=str(series_id),
                    season=episode.season,
                    episode=episode.episode,
                )
                self.db.add(row)
                existing[(episode.season, episode.episode)] = row
            row.title = episode.title
            row.air_date = episode.air_date
            row.runtime = episode.runtime
            row.updated_at = now
        await self.db.flush()

    async def invalidate(self, series_id: str):
        await self.db.execute(
            delete(TMDBEpisodeCacheEntry).where(
                TMDBEpisodeCacheEntry.series_id == str(series_id)
            )
        )


class TMDBCache:
    """TMDB snapshots keyed by (TMDB id, media type)"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.episodes = EpisodeCache(db)

    async def _row(self, tmdb_id: str, media_type: str) -> Optional[TMDBCacheEntry]:
        return await self.db.get(TMDBCacheEntry, (str(tmdb_id), media_type))

    @staticmethod
    def _to_schema(row: TMDBCacheEntry) -> TMDBTitle:
        return TMDBTitle(
            id=row.id,
            media_type=row.media_type,
            title_en=row.title_en,
            title_de=row.title_de,
            image_url=row.image_url,
            year=row.year,
            certification=row.certification,
            rating=row.rating,
            runtime=row.runtime,
            seasons=row.seasons,
            episodes=row.episodes,
            genres=json.loads(row.genres or "[]"),
            streaming_providers=json.loads(row.streaming_providers or "[]"),
            link_url=row.link_url,
            original_lang=row.original_lang,
        )

    async def get(self, tmdb_id: str, media_type: str, now: int = None) -> Optional[TMDBTitle]:
        """Snapshot if present and not expired"""
        now = now_ms() if now is None else now
        row = await self._row(tmdb_id, media_type)
        if row is None or not is_fresh(row.updated_at, row.ttl_ms, now):
            return None
        return self._to_schema(row)

    async def put(self, title: TMDBTitle, now: int = None):
        """Upsert snapshot, refreshing updated_at and re-rolling the TTL"""
        row = await self._row(title.id, title.media_type)
        if row is None:
            row = TMDBCacheEntry(id=str(title.id), media_type=title.media_type)
            self.db.add(row)

        row.title_en = title.title_en
        row.title_de = title.title_de
        row.image_url = title.image_url
        row.year = title.year
        row.certification = title.certification
        row.rating = title.rating
        row.runtime = title.runtime
        row.seasons = title.seasons
        row.episodes = title.episodes
        row.genres = json.dumps(title.genres)
        row.streaming_providers = json.dumps(
            [provider.model_dump() for provider in title.streaming_providers]
        )
        row.link_url = title.link_url
        row.original_lang = title.original_lang
        row.updated_at = now_ms() if now is None else now
        row.ttl_ms = random_ttl_ms()
        await self.db.flush()

    async def invalidate(self, tmdb_id: str, media_type: str):
        await self.db.execute(
            delete(TMDBCacheEntry).where(
                TMDBCacheEntry.id == str(tmdb_id),
                TMDBCacheEntry.media_type == media_type,
            )
        )

    async def backfill_series_runtime(self, series_id: str, now: int = None) -> Optional[int]:
        """
        Fill in a series' unknown runtime from its cached episode runtimes.

        Preconditions: the series row exists with runtime NULL and the
        episode cache holds fresh episodes. The row's updated_at and TTL are
        left alone. Returns the written runtime, or None if nothing changed.
        """
        row = await self._row(series_id, "series")
        if row is None or row.runtime is not None:
            return None

        episodes = await self.episodes.get_episodes(series_id, now=now)
        if not episodes:
            return None

        runtime = fallback_runtime(episode.runtime for episode in episodes)
        if runtime is None:
            return None

        row.runtime = runtime
        await self.db.flush()
        return runtime
