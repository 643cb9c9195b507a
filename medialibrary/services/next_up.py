"""Next-up shortlist"""

from collections import Counter
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..models.constants import MEDIA_TYPES
from ..models.next_up import NextUp
from .library_service import InvalidInput


class NextUpService:
    """
    At most NEXT_UP_LIMIT entries per media type.

    A write replaces only the media types present in the submitted list;
    types that do not appear keep their current entries.
    """

    def __init__(self, db: AsyncSession, limit: int = None):
        self.db = db
        self.limit = limit or settings.NEXT_UP_LIMIT

    @staticmethod
    def check_media_type(media_type: Optional[str]):
        if media_type not in MEDIA_TYPES:
            raise InvalidInput(
                f"Invalid media type '{media_type}'. Allowed: {', '.join(MEDIA_TYPES)}"
            )

    async def get(self, media_type: str = None) -> List[NextUp]:
        query = select(NextUp).order_by(NextUp.id)
        if media_type in MEDIA_TYPES:
            query = query.where(NextUp.media_type == media_type)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def replace(self, entries: Iterable) -> List[NextUp]:
        pairs = list(dict.fromkeys((entry.media_id, entry.media_type) for entry in entries))
        for _, media_type in pairs:
            self.check_media_type(media_type)

        for media_type, count in Counter(media_type for _, media_type in pairs).items():
            if count > self.limit:
                raise InvalidInput(
                    f"At most {self.limit} entries per type allowed ({media_type}: {count})"
                )

        types = {media_type for _, media_type in pairs}
        if types:
            await self.db.execute(delete(NextUp).where(NextUp.media_type.in_(types)))
        for media_id, media_type in pairs:
            self.db.add(NextUp(media_id=media_id, media_type=media_type))
        await self.db.commit()
        return await self.get()

    async def remove(self, media_id: int, media_type: str):
        self.check_media_type(media_type)
        await self.db.execute(
            delete(NextUp).where(NextUp.media_id == media_id, NextUp.media_type == media_type)
        )
        await self.db.commit()
