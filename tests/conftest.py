"""Shared fixtures: throwaway SQLite database, fake providers, API client"""

import os
import tempfile
from pathlib import Path

# Settings are read at import time; point them at a scratch directory first
TEST_DIR = Path(tempfile.mkdtemp(prefix="medialibrary-tests-"))
os.environ["DATA_DIR"] = str(TEST_DIR)
os.environ["LOGS_DIR"] = str(TEST_DIR / "logs")
os.environ["STATIC_DIR"] = str(TEST_DIR / "public")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DIR / 'app.db'}"
os.environ["TMDB_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from medialibrary import models  # noqa: E402,F401
from medialibrary.api.deps import get_hltb_service, get_tmdb_service  # noqa: E402
from medialibrary.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from medialibrary.main import app  # noqa: E402
from medialibrary.schemas.providers import (  # noqa: E402
    HLTBDlc,
    HLTBGame,
    HLTBSearchResult,
    StreamingProvider,
    TMDBEpisode,
    TMDBSearchResult,
    TMDBTitle,
)
from medialibrary.services.hltb_service import HLTBError  # noqa: E402


class FakeHLTB:
    """HLTBService stand-in; unknown ids fail like a missing game page"""

    def __init__(self, games=None):
        self.games = {game.id: game for game in (games or [])}
        self.calls = []

    async def get_game(self, game_id):
        self.calls.append(game_id)
        if game_id not in self.games:
            raise HLTBError(f"HLTB game {game_id} not found: HTTP 404")
        return self.games[game_id]

    async def search(self, query):
        return [
            HLTBSearchResult(id=game.id, name=game.name, image_url=game.image_url)
            for game in self.games.values()
            if query.lower() in (game.name or "").lower()
        ]

    async def close(self):
        pass


class FakeTMDB:
    """TMDBService stand-in keyed by (id, media type)"""

    def __init__(self, titles=None, episodes=None, configured=True):
        self.titles = {(title.id, title.media_type): title for title in (titles or [])}
        self.episodes = episodes or {}
        self.configured = configured
        self.calls = []

    async def _title(self, tmdb_id, media_type):
        self.calls.append((tmdb_id, media_type))
        if (tmdb_id, media_type) not in self.titles:
            raise RuntimeError(f"TMDB {media_type} {tmdb_id} unavailable")
        return self.titles[(tmdb_id, media_type)]

    async def get_movie(self, tmdb_id):
        return await self._title(tmdb_id, "movie")

    async def get_series(self, tmdb_id):
        return await self._title(tmdb_id, "series")

    async def get_series_episodes(self, tmdb_id, seasons):
        self.calls.append((tmdb_id, "episodes"))
        if tmdb_id not in self.episodes:
            raise RuntimeError(f"TMDB episodes {tmdb_id} unavailable")
        return self.episodes[tmdb_id]

    async def search(self, query, media_type="movie"):
        return [
            TMDBSearchResult(id=title.id, name=title.title_en, title_en=title.title_en)
            for title in self.titles.values()
            if title.media_type == media_type
        ]

    async def close(self):
        pass


def hltb_game(game_id, name, main=10.0):
    return HLTBGame(
        id=game_id,
        name=name,
        image_url=f"https://howlongtobeat.com/games/{game_id}.jpg",
        gameplay_main=main,
        gameplay_extra=main + 5,
        gameplay_complete=main + 10,
        gameplay_all=main + 2,
        rating=85,
        dlcs=[HLTBDlc(id=f"{game_id}1", name=f"{name} DLC")],
    )


def tmdb_title(tmdb_id, media_type, title_en, title_de=None, **extra):
    return TMDBTitle(
        id=tmdb_id,
        media_type=media_type,
        title_en=title_en,
        title_de=title_de or title_en,
        year="2020",
        rating=7.5,
        genres=["Drama"],
        streaming_providers=[StreamingProvider(id=8, name="Netflix")],
        **extra,
    )


def episodes(season, runtimes):
    return [
        TMDBEpisode(season=season, episode=number, title=f"Episode {number}", runtime=runtime)
        for number, runtime in enumerate(runtimes, start=1)
    ]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def session_factory(tmp_path):
    """Fresh schema per test; NullPool so every loop opens its own connection"""
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"

    sync_engine = create_engine(url.replace("+aiosqlite", ""), poolclass=NullPool)
    enable_sqlite_foreign_keys(sync_engine)
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(url, poolclass=NullPool)
    enable_sqlite_foreign_keys(engine.sync_engine)
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def hltb():
    return FakeHLTB(
        [
            hltb_game("1001", "Zelda"),
            hltb_game("1002", "alpha Centauri", main=20.0),
            hltb_game("1003", "Celeste", main=8.5),
        ]
    )


@pytest.fixture
def tmdb():
    return FakeTMDB(
        [
            tmdb_title("603", "movie", "The Matrix", "Matrix"),
            tmdb_title("550", "movie", "Fight Club"),
            tmdb_title("1399", "series", "Game of Thrones", seasons=2, episodes=5),
            tmdb_title("66732", "series", "Stranger Things", seasons=1, episodes=3, runtime=None),
        ],
        episodes={
            "1399": episodes(1, [55, 55, 60]) + episodes(2, [50, 55]),
            "66732": episodes(1, [48, 52, 45]),
        },
    )


@pytest.fixture
def client(session_factory, hltb, tmdb):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_hltb_service] = lambda: hltb
    app.dependency_overrides[get_tmdb_service] = lambda: tmdb
    yield TestClient(app)
    app.dependency_overrides.clear()
