"""Game models"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..database import Base
from .constants import GAME_STATUSES, PLATFORMS, STOREFRONTS, sql_in


class Game(Base):
    """Tracked game, identified by its HLTB id"""

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint(sql_in("status", GAME_STATUSES), name="ck_games_status"),
        CheckConstraint(
            "user_rating IS NULL OR user_rating BETWEEN 1 AND 10",
            name="ck_games_user_rating",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(50), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False)
    user_rating = Column(Integer)

    platforms = relationship(
        "GamePlatform",
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GamePlatform.id",
    )
    tags = relationship(
        "GameTag",
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GameTag.id",
    )
    sort_position = relationship(
        "SortPosition",
        back_populates="game",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Game {self.external_id} ({self.status})>"


class GamePlatform(Base):
    """Platform (and optional storefront) a game is owned on"""

    __tablename__ = "game_platforms"
    __table_args__ = (
        CheckConstraint(sql_in("platform", PLATFORMS), name="ck_game_platforms_platform"),
        CheckConstraint(
            "storefront IS NULL OR " + sql_in("storefront", STOREFRONTS),
            name="ck_game_platforms_storefront",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(
        Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    platform = Column(String(20), nullable=False)
    storefront = Column(String(20))

    game = relationship("Game", back_populates="platforms")

    def __repr__(self):
        return f"<GamePlatform {self.game_id}:{self.platform}/{self.storefront}>"


class GameTag(Base):
    """Free-form tag from the allow-list"""

    __tablename__ = "game_tags"
    __table_args__ = (UniqueConstraint("game_id", "tag", name="uq_game_tags_game_tag"),)

    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(
        Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag = Column(String(50), nullable=False)

    game = relationship("Game", back_populates="tags")


class SortPosition(Base):
    """User-defined position of a game in the custom order"""

    __tablename__ = "sort_order"

    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(
        Integer,
        ForeignKey("games.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    position = Column(Integer, nullable=False)

    game = relationship("Game", back_populates="sort_position")

    def __repr__(self):
        return f"<SortPosition game={self.game_id} position={self.position}>"
