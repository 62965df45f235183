from __future__ import annotations

import httpx
import pytest

from spotify_proxy.main import app
from spotify_proxy.models.credentials import CredentialRecord

NO_TOKEN_ERROR = {"error": "No valid tokens found. Please complete OAuth setup first."}


def _client(**transport_options) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app, **transport_options),
        base_url="http://testserver",
    )


@pytest.fixture()
def connected(api_overrides):
    api_overrides["vault"].store(CredentialRecord(access_token="A", token_type="Bearer"))
    return api_overrides


@pytest.mark.anyio
@pytest.mark.parametrize("path", ["/now-playing", "/recent"])
async def test_data_endpoints_require_credential(api_overrides, path):
    async with _client() as client:
        response = await client.get(path)

    assert response.status_code == 401
    assert response.json() == NO_TOKEN_ERROR
    assert response.headers["access-control-allow-origin"] == "*"
    assert api_overrides["api_client"].calls == []


@pytest.mark.anyio
async def test_now_playing_relays_upstream_json(connected):
    track = {"is_playing": True, "item": {"name": "Song", "artists": [{"name": "Band"}]}}
    connected["api_client"].responses.append(httpx.Response(200, json=track))

    async with _client() as client:
        response = await client.get("/now-playing")

    assert response.status_code == 200
    assert response.json() == track
    assert connected["api_client"].calls == [("currently-playing", "A")]


@pytest.mark.anyio
async def test_now_playing_translates_no_content(connected):
    connected["api_client"].responses.append(httpx.Response(204))

    async with _client() as client:
        response = await client.get("/now-playing")

    assert response.status_code == 200
    assert response.json() == {"playing": False, "message": "No track currently playing"}


@pytest.mark.anyio
async def test_now_playing_passes_upstream_status_through(connected):
    connected["api_client"].responses.append(
        httpx.Response(429, json={"error": {"status": 429}})
    )

    async with _client() as client:
        response = await client.get("/now-playing")

    assert response.status_code == 429
    assert response.json() == {"error": "Failed to fetch current track"}


@pytest.mark.anyio
async def test_recent_relays_last_ten_items(connected):
    history = {"items": [{"track": {"name": f"Song {i}"}} for i in range(10)]}
    connected["api_client"].responses.append(httpx.Response(200, json=history))

    async with _client() as client:
        response = await client.get("/recent")

    assert response.status_code == 200
    assert response.json() == history
    assert connected["api_client"].calls == [("recently-played?limit=10", "A")]


@pytest.mark.anyio
async def test_recent_passes_upstream_status_through(connected):
    connected["api_client"].responses.append(httpx.Response(401))

    async with _client() as client:
        response = await client.get("/recent")

    assert response.status_code == 401
    assert response.json() == {"error": "Failed to fetch recent tracks"}


@pytest.mark.anyio
async def test_expired_credential_requires_reauthorization(connected, clock):
    clock.advance(3600)

    async with _client() as client:
        response = await client.get("/now-playing")

    assert response.status_code == 401
    assert response.json() == NO_TOKEN_ERROR


@pytest.mark.anyio
async def test_health_reports_missing_credential(api_overrides):
    async with _client() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["oauth_configured"] is False
    assert body["environment"] == "test"
    assert body["endpoints"] == {
        "setup": "/setup",
        "callback": "/callback",
        "now_playing": "/now-playing",
        "recent": "/recent",
        "health": "/health",
    }
    assert "timestamp" in body


@pytest.mark.anyio
async def test_health_reports_stored_credential(connected):
    async with _client() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["oauth_configured"] is True


@pytest.mark.anyio
async def test_health_survives_unopenable_storage(api_overrides, monkeypatch):
    from spotify_proxy import dependencies
    from spotify_proxy.dependencies import clients

    def read_only_store():
        raise OSError("read-only filesystem")

    monkeypatch.setattr(clients, "get_kv_store", read_only_store)
    del app.dependency_overrides[dependencies.get_optional_token_vault]

    async with _client() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["oauth_configured"] is False


@pytest.mark.anyio
async def test_health_survives_storage_errors_on_read(api_overrides):
    import sqlite3

    from spotify_proxy import dependencies
    from spotify_proxy.services import TokenVault

    class LockedStore:
        def get(self, key: str):
            raise sqlite3.OperationalError("database is locked")

    app.dependency_overrides[dependencies.get_optional_token_vault] = (
        lambda: TokenVault(LockedStore())
    )

    async with _client() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["oauth_configured"] is False


@pytest.mark.anyio
async def test_home_page_links_to_setup(api_overrides):
    async with _client() as client:
        response = await client.get("/")

    assert response.status_code == 200
    assert 'href="/setup"' in response.text


@pytest.mark.anyio
async def test_unknown_path_is_not_found(api_overrides):
    async with _client() as client:
        response = await client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.text == "Not Found"
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.anyio
async def test_preflight_returns_cors_headers(api_overrides):
    async with _client() as client:
        response = await client.options("/now-playing")

    assert response.status_code == 200
    assert response.headers["access-control-allow-methods"] == (
        "GET, POST, PUT, DELETE, OPTIONS"
    )
    assert response.headers["access-control-allow-headers"] == (
        "Content-Type, Authorization"
    )


@pytest.mark.anyio
async def test_unexpected_errors_become_generic_500(connected):
    class ExplodingAPIClient:
        async def currently_playing(self, access_token: str):
            raise RuntimeError("boom")

    from spotify_proxy import dependencies

    app.dependency_overrides[dependencies.get_spotify_api_client] = (
        lambda: ExplodingAPIClient()
    )

    async with _client(raise_app_exceptions=False) as client:
        response = await client.get("/now-playing")

    assert response.status_code == 500
    assert response.text == "Internal Server Error"
    assert response.headers["access-control-allow-origin"] == "*"
