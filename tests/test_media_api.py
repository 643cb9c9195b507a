import pytest


@pytest.mark.parametrize("kind, status", [("movies", "watchlist"), ("series", "watching")])
def test_add_update_and_remove(client, kind, status):
    response = client.post(f"/api/{kind}", json={"externalId": "603", "status": status})
    assert response.status_code == 201
    item = response.json()

    response = client.put(f"/api/{kind}/{item['id']}", json={"userRating": 9})
    assert response.status_code == 200
    assert response.json()["userRating"] == 9
    assert response.json()["status"] == status

    assert client.post(f"/api/{kind}", json={"externalId": "603", "status": status}).status_code == 409
    assert client.delete(f"/api/{kind}/{item['id']}").status_code == 204
    assert client.get(f"/api/{kind}/{item['id']}").status_code == 404


def test_movie_merges_tmdb_snapshot(client):
    movie = client.post("/api/movies", json={"externalId": "603", "status": "watchlist"}).json()

    assert movie["title"] == "The Matrix"
    assert movie["titleDe"] == "Matrix"
    assert movie["genres"] == ["Drama"]
    assert movie["streamingProviders"] == [{"id": 8, "name": "Netflix", "logo": None}]


def test_movie_status_is_validated_per_kind(client):
    response = client.post("/api/movies", json={"externalId": "603", "status": "paused"})
    assert response.status_code == 400
    response = client.post("/api/series", json={"externalId": "1399", "status": "paused"})
    assert response.status_code == 201


def test_replace_providers(client):
    movie = client.post(
        "/api/movies", json={"externalId": "550", "status": "watchlist", "providers": ["Netflix"]}
    ).json()
    assert [p["provider"] for p in movie["providers"]] == ["Netflix"]

    url = f"/api/movies/{movie['id']}/providers"
    response = client.put(url, json=["Prime Video", "Blu-ray", "Prime Video"])
    assert response.status_code == 200
    assert [p["provider"] for p in response.json()["providers"]] == ["Prime Video", "Blu-ray"]

    assert client.put(url, json=[]).json()["providers"] == []
    assert client.put(url, json={"providers": []}).status_code == 400


def test_movies_sorted_by_title(client):
    client.post("/api/movies", json={"externalId": "603", "status": "watchlist"})
    client.post("/api/movies", json={"externalId": "550", "status": "finished"})
    client.post("/api/movies", json={"externalId": "777", "status": "watchlist"})

    titles = [movie["title"] for movie in client.get("/api/movies").json()]
    assert titles == ["777", "Fight Club", "The Matrix"]


def test_series_episodes_with_watched_flags(client):
    series = client.post("/api/series", json={"externalId": "1399", "status": "watching"}).json()
    assert series["seasons"] == 2

    client.post(f"/api/series/{series['id']}/progress/toggle", json={"season": 1, "episode": 2})

    episodes = client.get(f"/api/series/{series['id']}/episodes").json()
    assert [(ep["season"], ep["episode"]) for ep in episodes] == [(1, 1), (1, 2), (1, 3), (2, 1), (2, 2)]
    assert [ep["watched"] for ep in episodes] == [False, True, False, False, False]

    # runtime derived from the cached episodes: 55 is the most common
    assert client.get(f"/api/series/{series['id']}").json()["runtime"] == 55


def test_series_cache_invalidation_drops_episodes(client, tmdb):
    series = client.post("/api/series", json={"externalId": "1399", "status": "watching"}).json()
    client.get(f"/api/series/{series['id']}/episodes")

    assert client.delete(f"/api/series/{series['id']}/cache").status_code == 200
    client.get(f"/api/series/{series['id']}/episodes")
    assert tmdb.calls.count(("1399", "episodes")) == 2


def test_movie_without_metadata(client):
    movie = client.post("/api/movies", json={"externalId": "31337", "status": "watchlist"}).json()
    assert movie["title"] == "31337"
    assert movie["imageUrl"] is None
    assert movie["genres"] == []
