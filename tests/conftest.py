"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from spotify_proxy.clients.kv_store import SQLiteKeyValueStore


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store(tmp_path, clock) -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(str(tmp_path / "kv.db"), clock=clock)


class DummyOAuthClient:
    """Stand-in for ``SpotifyOAuthClient`` that never touches the network."""

    AUTHORIZE_URL = "https://accounts.example.com/authorize"

    def __init__(self) -> None:
        self.states: list[str] = []
        self.exchanges: list[tuple[str, str]] = []
        self.error: Exception | None = None

    def build_authorization_url(self, state: str, redirect_uri: str) -> str:
        self.states.append(state)
        return f"{self.AUTHORIZE_URL}?state={state}&redirect_uri={redirect_uri}"

    async def exchange_authorization_code(self, code: str, redirect_uri: str):
        from spotify_proxy.models.credentials import CredentialRecord

        self.exchanges.append((code, redirect_uri))
        if self.error is not None:
            raise self.error
        return CredentialRecord(
            access_token="A",
            token_type="Bearer",
            expires_in=3600,
            refresh_token="R",
            scope="user-read-currently-playing",
        )


class StubSpotifyAPIClient:
    """Returns queued ``httpx.Response`` objects for the player endpoints."""

    def __init__(self) -> None:
        self.responses: list = []
        self.calls: list[tuple[str, str]] = []

    def _next(self, endpoint: str, access_token: str):
        self.calls.append((endpoint, access_token))
        if not self.responses:
            raise AssertionError("Upstream response not configured")
        return self.responses.pop(0)

    async def currently_playing(self, access_token: str):
        return self._next("currently-playing", access_token)

    async def recently_played(self, access_token: str, *, limit: int = 10):
        return self._next(f"recently-played?limit={limit}", access_token)


@pytest.fixture()
def api_overrides(kv_store):
    """Wire the app to temporary storage and network-free Spotify clients."""
    from spotify_proxy import dependencies
    from spotify_proxy.core.config import AppSettings, SpotifySettings
    from spotify_proxy.main import app
    from spotify_proxy.services import StateLedger, TokenCipherService, TokenVault

    settings = AppSettings(
        environment="test",
        spotify=SpotifySettings(client_id="cid", client_secret="csecret"),
    )
    ledger = StateLedger(kv_store)
    vault = TokenVault(kv_store, cipher=TokenCipherService(secret="test-secret"))
    oauth_client = DummyOAuthClient()
    api_client = StubSpotifyAPIClient()

    app.dependency_overrides.update(
        {
            dependencies.get_app_settings: lambda: settings,
            dependencies.get_state_ledger: lambda: ledger,
            dependencies.get_token_vault: lambda: vault,
            dependencies.get_optional_token_vault: lambda: vault,
            dependencies.get_spotify_oauth_client: lambda: oauth_client,
            dependencies.get_spotify_api_client: lambda: api_client,
        }
    )

    yield {
        "settings": settings,
        "ledger": ledger,
        "vault": vault,
        "oauth_client": oauth_client,
        "api_client": api_client,
    }

    app.dependency_overrides.clear()
