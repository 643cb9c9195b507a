"""Next-up shortlist model"""

from sqlalchemy import CheckConstraint, Column, Integer, String, UniqueConstraint

from ..database import Base
from .constants import MEDIA_TYPES, sql_in


class NextUp(Base):
    """Item the user intends to play or watch next"""

    __tablename__ = "next_up"
    __table_args__ = (
        CheckConstraint(sql_in("media_type", MEDIA_TYPES), name="ck_next_up_media_type"),
        UniqueConstraint("media_id", "media_type", name="uq_next_up_media"),
    )

    id = Column(Integer, primary_key=True, index=True)
    media_id = Column(Integer, nullable=False)  # games.id / movies.id / series.id
    media_type = Column(String(10), nullable=False, index=True)

    def __repr__(self):
        return f"<NextUp {self.media_type}:{self.media_id}>"
