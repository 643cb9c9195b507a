"""Game schemas"""

from typing import List, Literal, Optional

from pydantic import Field

from ..models.constants import GAME_STATUSES, GAME_TAGS, PLATFORMS, STOREFRONTS
from .base import CamelModel
from .providers import HLTBDlc

GameStatus = Literal[GAME_STATUSES]
Platform = Literal[PLATFORMS]
Storefront = Literal[STOREFRONTS]
GameTagValue = Literal[GAME_TAGS]


class PlatformIn(CamelModel):
    platform: Platform
    storefront: Optional[Storefront] = None


class PlatformOut(CamelModel):
    id: int
    platform: str
    storefront: Optional[str] = None


class GameCreate(CamelModel):
    """Schema for adding a game to the library"""

    external_id: str = Field(..., min_length=1)
    status: GameStatus
    user_rating: Optional[int] = Field(None, ge=1, le=10)
    platforms: List[PlatformIn] = []
    tags: List[GameTagValue] = []


class GameUpdate(CamelModel):
    """Partial update; omitted or null fields keep their stored value"""

    status: Optional[GameStatus] = None
    user_rating: Optional[int] = Field(None, ge=1, le=10)
    external_id: Optional[str] = Field(None, min_length=1)


class GameView(CamelModel):
    """Game merged with its HLTB snapshot"""

    id: str
    external_id: str
    name: str
    image_url: Optional[str] = None
    status: str
    user_rating: Optional[int] = None
    platforms: List[PlatformOut] = []
    tags: List[str] = []
    gameplay_main: Optional[float] = None
    gameplay_extra: Optional[float] = None
    gameplay_complete: Optional[float] = None
    gameplay_all: Optional[float] = None
    rating: Optional[float] = None
    dlcs: List[HLTBDlc] = []


class SortOrderUpdate(CamelModel):
    order: List[int]


class SortPositionOut(CamelModel):
    game_id: int
    position: int
