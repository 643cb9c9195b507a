"""Library management service"""

from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.constants import (
    GAME_STATUSES,
    GAME_TAGS,
    MOVIE_STATUSES,
    PLATFORMS,
    SERIES_STATUSES,
    STOREFRONTS,
)
from ..models.game import Game, GamePlatform, GameTag
from ..models.media import Movie, MovieProvider, Series, SeriesProvider
from ..models.next_up import NextUp
from .log_service import log_service


class LibraryError(ValueError):
    """Base for errors the API reports back to the client"""


class ItemNotFound(LibraryError):
    """Referenced library item does not exist"""


class DuplicateItem(LibraryError):
    """External id already present in the library"""


class InvalidInput(LibraryError):
    """Value outside an enumerated or numeric range"""


def check_rating(user_rating: Optional[int]):
    if user_rating is not None and not 1 <= user_rating <= 10:
        raise InvalidInput("userRating must be between 1 and 10")


class LibraryService:
    """Shared CRUD for games, movies and series"""

    model = None
    media_type: str = None
    statuses: tuple = ()
    load_options: tuple = ()

    def __init__(self, db: AsyncSession):
        self.db = db

    def check_status(self, status: str):
        if status not in self.statuses:
            raise InvalidInput(
                f"Invalid status '{status}'. Allowed: {', '.join(self.statuses)}"
            )

    def _query(self):
        return select(self.model).options(*self.load_options)

    async def list(self) -> List:
        result = await self.db.execute(self._query())
        return list(result.scalars().all())

    async def get(self, item_id: int):
        """Item with its child associations loaded"""
        result = await self.db.execute(
            self._query()
            .where(self.model.id == item_id)
            .execution_options(populate_existing=True)
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise ItemNotFound(f"{self.media_type} {item_id} not found")
        return item

    async def require(self, item_id: int):
        """Bare row (no children loaded) or ItemNotFound"""
        item = await self.db.get(self.model, item_id)
        if item is None:
            raise ItemNotFound(f"{self.media_type} {item_id} not found")
        return item

    async def _ensure_unique(self, external_id: str, exclude_id: int = None):
        query = select(self.model.id).where(self.model.external_id == external_id)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self.db.execute(query)
        if result.first() is not None:
            raise DuplicateItem(
                f"{self.media_type} with externalId {external_id} already exists"
            )

    async def _create(self, external_id: str, status: str, user_rating: Optional[int]):
        self.check_status(status)
        check_rating(user_rating)
        await self._ensure_unique(external_id)

        item = self.model(external_id=external_id, status=status, user_rating=user_rating)
        self.db.add(item)
        await self.db.flush()
        return item

    async def update(
        self,
        item_id: int,
        status: str = None,
        user_rating: int = None,
        external_id: str = None,
    ):
        """Partial update; None keeps the stored value. No transition rules."""
        item = await self.require(item_id)
        if status is not None:
            self.check_status(status)
        check_rating(user_rating)
        if external_id is not None and external_id != item.external_id:
            await self._ensure_unique(external_id, exclude_id=item_id)

        if status is not None:
            item.status = status
        if user_rating is not None:
            item.user_rating = user_rating
        if external_id is not None:
            item.external_id = external_id

        await self.db.commit()
        return await self.get(item_id)

    async def remove(self, item_id: int):
        """Delete item; children cascade, its next-up entry goes with it"""
        item = await self.require(item_id)
        await self.db.execute(
            delete(NextUp).where(
                NextUp.media_id == item_id, NextUp.media_type == self.media_type
            )
        )
        await self.db.delete(item)
        await self.db.commit()
        log_service.info(f"Removed {self.media_type} {item.external_id} from library")


class GameLibrary(LibraryService):
    model = Game
    media_type = "game"
    statuses = GAME_STATUSES
    load_options = (selectinload(Game.platforms), selectinload(Game.tags))

    @staticmethod
    def _check_platforms(platforms: Iterable):
        for entry in platforms:
            if entry.platform not in PLATFORMS:
                raise InvalidInput(f"Invalid platform '{entry.platform}'")
            if entry.storefront is not None and entry.storefront not in STOREFRONTS:
                raise InvalidInput(f"Invalid storefront '{entry.storefront}'")

    @staticmethod
    def _check_tags(tags: Iterable[str]):
        invalid = [tag for tag in tags if tag not in GAME_TAGS]
        if invalid:
            raise InvalidInput(
                f"Invalid tags: {', '.join(invalid)}. Allowed: {', '.join(GAME_TAGS)}"
            )

    async def add(
        self,
        external_id: str,
        status: str,
        platforms: Iterable = (),
        tags: Iterable[str] = (),
        user_rating: int = None,
    ) -> Game:
        platforms = list(platforms)
        tags = list(dict.fromkeys(tags))
        self._check_platforms(platforms)
        self._check_tags(tags)

        game = await self._create(external_id, status, user_rating)
        for entry in platforms:
            self.db.add(
                GamePlatform(game_id=game.id, platform=entry.platform, storefront=entry.storefront)
            )
        for tag in tags:
            self.db.add(GameTag(game_id=game.id, tag=tag))

        await self.db.commit()
        log_service.info(f"Added game {external_id} ({status})")
        return await self.get(game.id)

    async def replace_platforms(self, game_id: int, platforms: Iterable) -> Game:
        """Replace every platform association of a game"""
        platforms = list(platforms)
        self._check_platforms(platforms)
        await self.require(game_id)

        await self.db.execute(delete(GamePlatform).where(GamePlatform.game_id == game_id))
        for entry in platforms:
            self.db.add(
                GamePlatform(game_id=game_id, platform=entry.platform, storefront=entry.storefront)
            )
        await self.db.commit()
        return await self.get(game_id)

    async def replace_tags(self, game_id: int, tags: Iterable[str]) -> Game:
        """Replace every tag of a game; duplicates collapse"""
        tags = list(dict.fromkeys(tags))
        self._check_tags(tags)
        await self.require(game_id)

        await self.db.execute(delete(GameTag).where(GameTag.game_id == game_id))
        for tag in tags:
            self.db.add(GameTag(game_id=game_id, tag=tag))
        await self.db.commit()
        return await self.get(game_id)


class MediaLibrary(LibraryService):
    """Movies and series share the user-curated provider list"""

    provider_model = None
    parent_key: str = None

    async def add(
        self,
        external_id: str,
        status: str,
        providers: Iterable[str] = (),
        user_rating: int = None,
    ):
        item = await self._create(external_id, status, user_rating)
        for provider in dict.fromkeys(providers):
            self.db.add(self.provider_model(**{self.parent_key: item.id, "provider": provider}))

        await self.db.commit()
        log_service.info(f"Added {self.media_type} {external_id} ({status})")
        return await self.get(item.id)

    async def replace_providers(self, item_id: int, providers: Iterable[str]):
        """Replace every provider association; duplicates collapse"""
        await self.require(item_id)
        parent_column = getattr(self.provider_model, self.parent_key)

        await self.db.execute(delete(self.provider_model).where(parent_column == item_id))
        for provider in dict.fromkeys(providers):
            self.db.add(self.provider_model(**{self.parent_key: item_id, "provider": provider}))
        await self.db.commit()
        return await self.get(item_id)


class MovieLibrary(MediaLibrary):
    model = Movie
    media_type = "movie"
    statuses = MOVIE_STATUSES
    load_options = (selectinload(Movie.providers),)
    provider_model = MovieProvider
    parent_key = "movie_id"


class SeriesLibrary(MediaLibrary):
    model = Series
    media_type = "series"
    statuses = SERIES_STATUSES
    load_options = (selectinload(Series.providers),)
    provider_model = SeriesProvider
    parent_key = "series_id"
