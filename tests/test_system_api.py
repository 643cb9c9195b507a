from medialibrary import __version__
from medialibrary.services.log_service import log_service


def test_health_reports_version_and_database(client):
    response = client.get("/api/system/health")
    assert response.status_code == 200
    health = response.json()
    assert health["version"] == __version__
    assert health["database"]["status"] == "ok"
    assert health["tmdb"]["status"] == "ok"


def test_health_degraded_without_tmdb_key(client, tmdb):
    tmdb.configured = False
    health = client.get("/api/system/health").json()
    assert health["status"] == "degraded"
    assert health["tmdb"]["status"] == "not_configured"


def test_logs_returns_recent_lines(client):
    log_service.info("log line for the logs endpoint")
    response = client.get("/api/system/logs?type=info&limit=50")
    assert response.status_code == 200
    assert any("log line for the logs endpoint" in line for line in response.json()["lines"])


def test_logs_rejects_unknown_type(client):
    assert client.get("/api/system/logs?type=stream").status_code == 400


def test_hltb_search_requires_query(client):
    assert client.get("/api/hltb/search").status_code == 400
    assert client.get("/api/hltb/search?q=%20").status_code == 400
    results = client.get("/api/hltb/search?q=zel").json()
    assert results == [
        {"id": "1001", "name": "Zelda", "imageUrl": "https://howlongtobeat.com/games/1001.jpg"}
    ]


def test_hltb_lookup_reports_source(client, hltb):
    first = client.get("/api/hltb/1002").json()
    second = client.get("/api/hltb/1002").json()
    assert first["source"] == "hltb"
    assert second["source"] == "cache"
    assert second["name"] == "alpha Centauri"
    assert hltb.calls == ["1002"]

    assert client.delete("/api/hltb/cache/1002").json()["success"] is True
    assert client.get("/api/hltb/1002").json()["source"] == "hltb"


def test_hltb_lookup_failure_is_500(client):
    response = client.get("/api/hltb/424242")
    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to fetch HLTB game")


def test_tmdb_search(client, tmdb):
    assert client.get("/api/tmdb/search?type=movie").status_code == 400
    assert client.get("/api/tmdb/search?q=matrix&type=book").status_code == 400

    names = [item["name"] for item in client.get("/api/tmdb/search?q=x&type=series").json()]
    assert names == ["Game of Thrones", "Stranger Things"]

    tmdb.configured = False
    response = client.get("/api/tmdb/search?q=matrix")
    assert response.status_code == 400
    assert response.json()["detail"] == "TMDB API key not configured"


def test_tmdb_lookup_reports_source(client, tmdb):
    assert client.get("/api/tmdb/603?type=movie").json()["source"] == "tmdb"
    cached = client.get("/api/tmdb/603").json()
    assert cached["source"] == "cache"
    assert cached["titleEn"] == "The Matrix"

    client.delete("/api/tmdb/cache/603?type=movie")
    assert client.get("/api/tmdb/603").json()["source"] == "tmdb"
    assert tmdb.calls == [("603", "movie"), ("603", "movie")]


def test_validation_errors_are_400(client):
    response = client.post("/api/games", json={"status": "started"})
    assert response.status_code == 400
    assert "externalId" in response.json()["detail"]
