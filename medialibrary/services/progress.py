"""Episode watch progress"""

from typing import Iterable, List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.media import EpisodeProgress, Series
from .library_service import InvalidInput, ItemNotFound


class ProgressService:
    """Row present = episode watched"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _series(self, series_id: int) -> Series:
        series = await self.db.get(Series, series_id)
        if series is None:
            raise ItemNotFound(f"series {series_id} not found")
        return series

    async def list(self, series_id: int) -> List[EpisodeProgress]:
        await self._series(series_id)
        result = await self.db.execute(
            select(EpisodeProgress)
            .where(EpisodeProgress.series_id == series_id)
            .order_by(EpisodeProgress.season, EpisodeProgress.episode)
        )
        return list(result.scalars().all())

    async def toggle(self, series_id: int, season: int, episode: int) -> bool:
        """Flip one episode; returns the new watched state"""
        await self._series(series_id)
        row = await self.db.get(EpisodeProgress, (series_id, season, episode))
        if row is None:
            self.db.add(EpisodeProgress(series_id=series_id, season=season, episode=episode))
            watched = True
        else:
            await self.db.delete(row)
            watched = False
        await self.db.commit()
        return watched

    async def set_season(
        self, series_id: int, season: int, episodes: Iterable[int] = None, watched: bool = True
    ) -> List[int]:
        """
        Mark every listed episode of a season watched (existing rows are
        kept) or unwatched. Unmarking without a list clears the whole season;
        marking needs the episode numbers.
        """
        await self._series(series_id)
        if episodes is None:
            if watched:
                raise InvalidInput(f"No episode list known for season {season}")
            return await self._clear_season(series_id, season)

        numbers = sorted(set(episodes))
        if any(number < 1 for number in numbers):
            raise InvalidInput("Episode numbers must be positive")

        if watched:
            result = await self.db.execute(
                select(EpisodeProgress.episode).where(
                    EpisodeProgress.series_id == series_id,
                    EpisodeProgress.season == season,
                )
            )
            present = set(result.scalars().all())
            for number in numbers:
                if number not in present:
                    self.db.add(
                        EpisodeProgress(series_id=series_id, season=season, episode=number)
                    )
        elif numbers:
            await self.db.execute(
                delete(EpisodeProgress).where(
                    EpisodeProgress.series_id == series_id,
                    EpisodeProgress.season == season,
                    EpisodeProgress.episode.in_(numbers),
                )
            )
        await self.db.commit()
        return numbers

    async def _clear_season(self, series_id: int, season: int) -> List[int]:
        """Delete every watched row of a season; returns the cleared numbers"""
        result = await self.db.execute(
            select(EpisodeProgress.episode)
            .where(EpisodeProgress.series_id == series_id, EpisodeProgress.season == season)
            .order_by(EpisodeProgress.episode)
        )
        numbers = list(result.scalars().all())
        await self.db.execute(
            delete(EpisodeProgress).where(
                EpisodeProgress.series_id == series_id, EpisodeProgress.season == season
            )
        )
        await self.db.commit()
        return numbers
