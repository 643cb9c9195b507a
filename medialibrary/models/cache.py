"""Provider cache models"""

from sqlalchemy import BigInteger, CheckConstraint, Column, Float, Integer, String, Text

from ..database import Base
from .constants import TMDB_MEDIA_TYPES, sql_in


class HLTBCacheEntry(Base):
    """Last HowLongToBeat snapshot of a game"""

    __tablename__ = "hltb_cache"

    id = Column(String(50), primary_key=True)  # HLTB game id
    name = Column(String(255))
    image_url = Column(Text)
    gameplay_main = Column(Float)
    gameplay_extra = Column(Float)
    gameplay_complete = Column(Float)
    gameplay_all = Column(Float)
    rating = Column(Float)
    dlcs = Column(Text)  # JSON array: [{"id": "...", "name": "..."}]
    updated_at = Column(BigInteger)  # epoch ms
    ttl_ms = Column(BigInteger)

    def __repr__(self):
        return f"<HLTBCacheEntry {self.id} - {self.name}>"


class TMDBCacheEntry(Base):
    """Last TMDB snapshot of a movie or series"""

    __tablename__ = "tmdb_cache"
    __table_args__ = (
        CheckConstraint(sql_in("media_type", TMDB_MEDIA_TYPES), name="ck_tmdb_cache_media_type"),
    )

    id = Column(String(50), primary_key=True)  # TMDB id
    media_type = Column(String(10), primary_key=True)
    title_en = Column(String(255))
    title_de = Column(String(255))
    image_url = Column(Text)
    year = Column(String(4))
    certification = Column(String(20))
    rating = Column(Float)
    runtime = Column(Integer)
    seasons = Column(Integer)
    episodes = Column(Integer)
    genres = Column(Text)  # JSON array of names
    streaming_providers = Column(Text)  # JSON array: [{"id", "name", "logo"}]
    link_url = Column(Text)
    original_lang = Column(String(10))
    updated_at = Column(BigInteger)  # epoch ms
    ttl_ms = Column(BigInteger)

    def __repr__(self):
        return f"<TMDBCacheEntry {self.media_type}:{self.id}>"


class TMDBEpisodeCacheEntry(Base):
    """Per-episode TMDB metadata"""

    __tablename__ = "tmdb_episode_cache"

    series_id = Column(String(50), primary_key=True)  # TMDB series id
    season = Column(Integer, primary_key=True)
    episode = Column(Integer, primary_key=True)
    title = Column(String(255))
    air_date = Column(String(10))
    runtime = Column(Integer)
    updated_at = Column(BigInteger)  # epoch ms

    def __repr__(self):
        return f"<TMDBEpisodeCacheEntry {self.series_id} S{self.season}E{self.episode}>"
