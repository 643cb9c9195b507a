"""Custom sort order of games"""

from typing import Dict, List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.game import Game, SortPosition
from .library_service import InvalidInput


class SortOrderService:
    """Full-replace projection: position = index in the submitted list"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self) -> List[SortPosition]:
        result = await self.db.execute(select(SortPosition).order_by(SortPosition.position))
        return list(result.scalars().all())

    async def positions(self) -> Dict[int, int]:
        return {entry.game_id: entry.position for entry in await self.get()}

    async def replace(self, game_ids: List[int]) -> List[SortPosition]:
        """Replace the whole table; repeated ids keep their first position"""
        ordered = list(dict.fromkeys(game_ids))

        if ordered:
            result = await self.db.execute(select(Game.id).where(Game.id.in_(ordered)))
            known = set(result.scalars().all())
            unknown = [game_id for game_id in ordered if game_id not in known]
            if unknown:
                raise InvalidInput(f"Unknown game ids: {', '.join(map(str, unknown))}")

        await self.db.execute(delete(SortPosition))
        for position, game_id in enumerate(ordered):
            self.db.add(SortPosition(game_id=game_id, position=position))
        await self.db.commit()
        return await self.get()
