"""Movie and series models"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .constants import MOVIE_STATUSES, SERIES_STATUSES, sql_in


class Movie(Base):
    """Tracked movie, identified by its TMDB id"""

    __tablename__ = "movies"
    __table_args__ = (
        CheckConstraint(sql_in("status", MOVIE_STATUSES), name="ck_movies_status"),
        CheckConstraint(
            "user_rating IS NULL OR user_rating BETWEEN 1 AND 10",
            name="ck_movies_user_rating",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(50), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False)
    user_rating = Column(Integer)

    providers = relationship(
        "MovieProvider",
        back_populates="movie",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MovieProvider.id",
    )

    def __repr__(self):
        return f"<Movie {self.external_id} ({self.status})>"


class MovieProvider(Base):
    """Streaming service the user watches a movie on"""

    __tablename__ = "movie_providers"
    __table_args__ = (
        UniqueConstraint("movie_id", "provider", name="uq_movie_providers_movie_provider"),
    )

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(
        Integer, ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    provider = Column(String(100), nullable=False)

    movie = relationship("Movie", back_populates="providers")


class Series(Base):
    """Tracked TV series, identified by its TMDB id"""

    __tablename__ = "series"
    __table_args__ = (
        CheckConstraint(sql_in("status", SERIES_STATUSES), name="ck_series_status"),
        CheckConstraint(
            "user_rating IS NULL OR user_rating BETWEEN 1 AND 10",
            name="ck_series_user_rating",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(50), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False)
    user_rating = Column(Integer)

    providers = relationship(
        "SeriesProvider",
        back_populates="series",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SeriesProvider.id",
    )
    progress = relationship(
        "EpisodeProgress",
        back_populates="series",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Series {self.external_id} ({self.status})>"


class SeriesProvider(Base):
    """Streaming service the user watches a series on"""

    __tablename__ = "series_providers"
    __table_args__ = (
        UniqueConstraint("series_id", "provider", name="uq_series_providers_series_provider"),
    )

    id = Column(Integer, primary_key=True, index=True)
    series_id = Column(
        Integer, ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True
    )
    provider = Column(String(100), nullable=False)

    series = relationship("Series", back_populates="providers")


class EpisodeProgress(Base):
    """A watched episode; the row's presence is the watched flag"""

    __tablename__ = "episode_progress"

    series_id = Column(
        Integer, ForeignKey("series.id", ondelete="CASCADE"), primary_key=True
    )
    season = Column(Integer, primary_key=True)
    episode = Column(Integer, primary_key=True)
    watched_at = Column(DateTime(timezone=True), server_default=func.now())

    series = relationship("Series", back_populates="progress")

    def __repr__(self):
        return f"<EpisodeProgress {self.series_id} S{self.season}E{self.episode}>"
