import httpx
import pytest

from medialibrary.services.tmdb_service import TMDBService

GERMAN_MOVIE = {
    "de-DE": {
        "id": 387,
        "title": "Das Boot",
        "original_title": "Das Boot",
        "original_language": "de",
        "poster_path": "/boot.jpg",
        "release_date": "1981-09-17",
        "runtime": 149,
        "vote_average": 8.1,
        "genres": [{"id": 18, "name": "Drama"}],
        "release_dates": {
            "results": [
                {"iso_3166_1": "US", "release_dates": [{"certification": "R"}]},
                {"iso_3166_1": "DE", "release_dates": [{"certification": ""}, {"certification": "12"}]},
            ]
        },
        "watch/providers": {
            "results": {
                "DE": {
                    "flatrate": [
                        {"provider_id": 8, "provider_name": "Netflix", "logo_path": "/n.jpg"},
                        {"provider_id": 1899, "provider_name": "Some Channel"},
                    ]
                },
                "US": {"flatrate": [{"provider_id": 9, "provider_name": "Prime Video"}]},
            }
        },
    },
    "en-US": {
        "id": 387,
        "title": "The Boat",
        "original_title": "Das Boot",
        "original_language": "de",
        "genres": [{"id": 18, "name": "Drama"}, {"id": 10752, "name": "War"}],
    },
}

FRENCH_MOVIE = {
    "de-DE": {
        "id": 194,
        "title": "Die fabelhafte Welt der Amélie",
        "original_title": "Le Fabuleux Destin d'Amélie Poulain",
        "original_language": "fr",
        "release_date": "2001-04-25",
    },
    "en-US": {
        "id": 194,
        "title": "Amélie",
        "original_title": "Le Fabuleux Destin d'Amélie Poulain",
        "original_language": "fr",
    },
}

SERIES = {
    "de-DE": {
        "id": 1399,
        "name": "Game of Thrones",
        "original_name": "Game of Thrones",
        "original_language": "en",
        "first_air_date": "2011-04-17",
        "episode_run_time": [],
        "number_of_seasons": 2,
        "number_of_episodes": 20,
        "content_ratings": {"results": [{"iso_3166_1": "DE", "rating": "16"}]},
    },
    "en-US": {"id": 1399, "name": "Game of Thrones", "original_name": "Game of Thrones"},
}


def tmdb_api(payloads, requests=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        language = request.url.params.get("language")
        path = request.url.path.removeprefix("/3/")
        if path.startswith("tv/1399/season/"):
            number = int(path.rsplit("/", 1)[1])
            return httpx.Response(
                200,
                json={
                    "season_number": number,
                    "episodes": [
                        {"season_number": number, "episode_number": 1, "name": "One", "runtime": 55},
                        {"season_number": number, "episode_number": 2, "name": "Two", "runtime": None},
                    ],
                },
            )
        if path not in payloads:
            return httpx.Response(404, json={"status_message": "not found"})
        return httpx.Response(200, json=payloads[path][language])

    return handler


def service(payloads, requests=None, api_key="key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(tmdb_api(payloads, requests)))
    return TMDBService(api_key, client=client, watch_region="DE", provider_ids={8, 9})


@pytest.mark.parametrize(
    "language, english, original, expected",
    [
        ("de", "The Boat", "Das Boot", "The Boat"),
        ("fr", "Amélie", "Le Fabuleux Destin d'Amélie Poulain", "Le Fabuleux Destin d'Amélie Poulain"),
        ("en", "Game of Thrones", None, "Game of Thrones"),
    ],
)
def test_pick_english_title(language, english, original, expected):
    assert TMDBService.pick_english_title(language, english, original) == expected


@pytest.mark.anyio
async def test_german_original_uses_english_title():
    requests = []
    tmdb = service({"movie/387": GERMAN_MOVIE}, requests)
    movie = await tmdb.get_movie("387")
    await tmdb.close()

    assert movie.title_en == "The Boat"
    assert movie.title_de == "Das Boot"
    assert movie.year == "1981"
    assert movie.runtime == 149
    assert movie.certification == "12"
    assert movie.genres == ["Drama", "War"]
    assert movie.image_url == "https://image.tmdb.org/t/p/w500/boot.jpg"
    assert movie.link_url == "https://www.themoviedb.org/movie/387"
    assert {request.url.params["api_key"] for request in requests} == {"key"}
    assert {request.url.params["language"] for request in requests} == {"de-DE", "en-US"}


@pytest.mark.anyio
async def test_other_originals_keep_original_title():
    tmdb = service({"movie/194": FRENCH_MOVIE})
    movie = await tmdb.get_movie("194")
    await tmdb.close()

    assert movie.title_en == "Le Fabuleux Destin d'Amélie Poulain"
    assert movie.title_de == "Die fabelhafte Welt der Amélie"
    assert movie.certification is None
    assert movie.streaming_providers == []


@pytest.mark.anyio
async def test_streaming_providers_filtered_by_region_and_allow_list():
    tmdb = service({"movie/387": GERMAN_MOVIE})
    movie = await tmdb.get_movie("387")
    await tmdb.close()

    assert [(p.id, p.name) for p in movie.streaming_providers] == [(8, "Netflix")]
    assert movie.streaming_providers[0].logo == "https://image.tmdb.org/t/p/w45/n.jpg"


@pytest.mark.anyio
async def test_series_details_and_episodes():
    tmdb = service({"tv/1399": SERIES})
    series = await tmdb.get_series("1399")
    episodes = await tmdb.get_series_episodes("1399", series.seasons)
    await tmdb.close()

    assert series.media_type == "series"
    assert series.runtime is None
    assert series.seasons == 2
    assert series.certification == "16"
    assert series.link_url == "https://www.themoviedb.org/tv/1399"
    assert [(ep.season, ep.episode) for ep in episodes] == [(1, 1), (1, 2), (2, 1), (2, 2)]
    assert episodes[1].runtime is None


@pytest.mark.anyio
async def test_missing_api_key():
    tmdb = service({"movie/387": GERMAN_MOVIE}, api_key=None)
    assert not tmdb.configured
    with pytest.raises(ValueError, match="not configured"):
        await tmdb.get_movie("387")
    await tmdb.close()


@pytest.mark.anyio
async def test_http_errors_propagate():
    tmdb = service({})
    with pytest.raises(httpx.HTTPStatusError):
        await tmdb.get_movie("1")
    await tmdb.close()
