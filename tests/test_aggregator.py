from types import SimpleNamespace

import pytest

from conftest import FakeHLTB, FakeTMDB, hltb_game, tmdb_title
from medialibrary.schemas.games import PlatformIn
from medialibrary.services.aggregator import Aggregator, apply_custom_order, title_sort_key
from medialibrary.services.library_service import GameLibrary, MovieLibrary, SeriesLibrary
from medialibrary.services.provider_cache import HLTBCache


def test_title_sort_key_ignores_case_first():
    titles = ["beta", "Alpha", "alpha", "Gamma"]
    assert sorted(titles, key=title_sort_key) == ["Alpha", "alpha", "beta", "Gamma"]


def test_title_sort_key_ignores_accents():
    titles = ["Zelda", "Über uns", "Émile", "Fargo", "Ärger"]
    assert sorted(titles, key=title_sort_key) == ["Ärger", "Émile", "Fargo", "Über uns", "Zelda"]


def test_title_sort_key_accent_ties_stay_deterministic():
    assert sorted(["Ärger", "Arger", "arger"], key=title_sort_key) == ["Arger", "arger", "Ärger"]


def test_apply_custom_order():
    views = [SimpleNamespace(id=str(i)) for i in (1, 2, 3, 4)]
    ordered = apply_custom_order(views, {3: 0, 1: 1})
    assert [view.id for view in ordered] == ["3", "1", "2", "4"]


@pytest.mark.anyio
async def test_games_merge_and_sort_by_name(session_factory, hltb, tmdb):
    async with session_factory() as db:
        library = GameLibrary(db)
        await library.add("1001", "started", platforms=[PlatformIn(platform="pc", storefront="steam")])
        await library.add("1002", "backlog")
        await library.add("1003", "completed", tags=["100%"])

        views = await Aggregator(db, hltb, tmdb).games(await library.list())

    assert [view.name for view in views] == ["alpha Centauri", "Celeste", "Zelda"]
    zelda = views[2]
    assert zelda.status == "started"
    assert zelda.platforms[0].storefront == "steam"
    assert zelda.gameplay_main == 10.0
    assert zelda.dlcs[0].name == "Zelda DLC"


@pytest.mark.anyio
async def test_games_second_read_uses_cache(session_factory, hltb, tmdb):
    async with session_factory() as db:
        await GameLibrary(db).add("1001", "started")
        aggregator = Aggregator(db, hltb, tmdb)

        await aggregator.games(await GameLibrary(db).list())
        await aggregator.games(await GameLibrary(db).list())

    assert hltb.calls == ["1001"]


@pytest.mark.anyio
async def test_provider_failure_degrades_to_external_id(session_factory, tmdb):
    hltb = FakeHLTB([hltb_game("1001", "Zelda")])
    async with session_factory() as db:
        await GameLibrary(db).add("1001", "started")
        await GameLibrary(db).add("9999", "backlog")

        views = await Aggregator(db, hltb, tmdb).games(await GameLibrary(db).list())

        assert [view.name for view in views] == ["9999", "Zelda"]
        missing = views[0]
        assert missing.image_url is None
        assert missing.gameplay_main is None
        assert missing.dlcs == []
        # failures are not cached
        assert await HLTBCache(db).get("9999") is None


@pytest.mark.anyio
async def test_movie_title_falls_back_to_german_then_id(session_factory, hltb):
    tmdb = FakeTMDB(
        [
            tmdb_title("1", "movie", None, "Das Boot"),
            tmdb_title("2", "movie", "Amélie"),
        ]
    )
    async with session_factory() as db:
        library = MovieLibrary(db)
        for external_id in ("1", "2", "3"):
            await library.add(external_id, "watchlist")

        views = await Aggregator(db, hltb, tmdb).movies(await library.list())

    assert [view.title for view in views] == ["3", "Amélie", "Das Boot"]
    assert views[2].title_de == "Das Boot"
    assert views[0].streaming_providers == []


@pytest.mark.anyio
async def test_series_episodes_fill_cache_and_runtime(session_factory, hltb, tmdb):
    async with session_factory() as db:
        series = await SeriesLibrary(db).add("66732", "watching")
        aggregator = Aggregator(db, hltb, tmdb)

        view = await aggregator.series(series)
        assert view.runtime is None

        episode_list = await aggregator.episodes(series)
        assert [ep.episode for ep in episode_list] == [1, 2, 3]

        # median of 45, 48, 52
        view = await aggregator.series(series)
        assert view.runtime == 48

        await aggregator.episodes(series)
        assert tmdb.calls.count(("66732", "episodes")) == 1


@pytest.mark.anyio
async def test_series_episodes_failure_is_empty(session_factory, hltb):
    tmdb = FakeTMDB([tmdb_title("5", "series", "No Episodes", seasons=2)])
    async with session_factory() as db:
        series = await SeriesLibrary(db).add("5", "watching")
        assert await Aggregator(db, hltb, tmdb).episodes(series) == []
