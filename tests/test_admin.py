def seed(client):
    game = client.post(
        "/api/games",
        json={
            "externalId": "1001",
            "status": "started",
            "platforms": [{"platform": "pc", "storefront": "steam"}],
            "tags": ["physical"],
        },
    ).json()
    series = client.post("/api/series", json={"externalId": "1399", "status": "watching"}).json()
    client.post(f"/api/series/{series['id']}/progress/toggle", json={"season": 1, "episode": 1})
    client.put("/api/sort-order", json={"order": [int(game["id"])]})
    client.put("/api/next", json=[{"mediaId": int(game["id"]), "mediaType": "game"}])
    return game, series


def test_export_is_an_attachment_with_every_table(client):
    seed(client)
    response = client.get("/api/admin/export")

    assert response.status_code == 200
    assert response.headers["content-disposition"].startswith("attachment;")
    data = response.json()
    assert "exportedAt" in data
    assert [row["external_id"] for row in data["games"]] == ["1001"]
    assert data["game_platforms"][0]["storefront"] == "steam"
    assert data["episode_progress"][0]["episode"] == 1
    assert len(data["hltb_cache"]) == 1


def test_import_restores_export(client):
    game, series = seed(client)
    backup = client.get("/api/admin/export").json()

    client.delete(f"/api/games/{game['id']}")
    client.post("/api/movies", json={"externalId": "550", "status": "watchlist"})

    response = client.post("/api/admin/import", json=backup)
    assert response.status_code == 200
    result = response.json()
    assert result["success"] is True
    assert result["imported"]["games"] == 1
    assert result["imported"]["movies"] == 0

    restored = client.get(f"/api/games/{game['id']}").json()
    assert restored["platforms"][0]["platform"] == "pc"
    assert restored["tags"] == ["physical"]
    assert client.get("/api/movies").json() == []
    assert client.get("/api/sort-order").json() == [{"gameId": int(game["id"]), "position": 0}]
    progress = client.get(f"/api/series/{series['id']}/progress").json()
    assert [(row["season"], row["episode"]) for row in progress] == [(1, 1)]


def test_import_without_games_is_rejected(client):
    seed(client)
    response = client.post("/api/admin/import", json={"movies": []})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid backup format"

    # nothing was wiped
    assert len(client.get("/api/games").json()) == 1


def test_import_requires_object(client):
    assert client.post("/api/admin/import", json=[1, 2]).status_code == 400
