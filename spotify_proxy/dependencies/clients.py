"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

import logging
import sqlite3
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends

from spotify_proxy.clients import (
    SQLiteKeyValueStore,
    SpotifyAPIClient,
    SpotifyOAuthClient,
)
from spotify_proxy.core.config import get_settings
from spotify_proxy.services import (
    OAuthCallbackCoordinator,
    PlaybackRelay,
    StateLedger,
    TokenCipherService,
    TokenVault,
)

logger = logging.getLogger(__name__)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_kv_store() -> SQLiteKeyValueStore:
    """Provide the shared key/value store backing the ledger and vault."""
    settings = _settings()
    store = SQLiteKeyValueStore(settings.storage.db_path)
    purged = store.purge_expired()
    if purged:
        logger.info("Purged %s expired entries from %s", purged, settings.storage.db_path)
    return store


@lru_cache()
def get_spotify_oauth_client() -> SpotifyOAuthClient:
    """Create a singleton Spotify OAuth client."""
    settings = _settings()
    return SpotifyOAuthClient(
        settings.spotify, settings.oauth, timeout=settings.http_timeout_seconds
    )


@lru_cache()
def get_spotify_api_client() -> SpotifyAPIClient:
    """Provide the Spotify Web API client."""
    settings = _settings()
    return SpotifyAPIClient(timeout=settings.http_timeout_seconds)


@lru_cache()
def get_token_cipher_service() -> Optional[TokenCipherService]:
    """Provide symmetric encryption for stored tokens when a secret is known."""
    settings = _settings()
    secret = settings.security.token_encryption_secret or settings.spotify.client_secret
    if not secret:
        return None
    return TokenCipherService(secret=secret)


def get_state_ledger() -> StateLedger:
    """Build the OAuth state ledger."""
    settings = _settings()
    return StateLedger(
        get_kv_store(),
        ttl_seconds=settings.oauth.state_ttl_seconds,
        nonce_length=settings.oauth.state_length,
    )


def get_token_vault() -> TokenVault:
    """Build the single-slot token vault."""
    settings = _settings()
    return TokenVault(
        get_kv_store(),
        ttl_seconds=settings.oauth.token_ttl_seconds,
        cipher=get_token_cipher_service(),
    )


def get_optional_token_vault() -> Optional[TokenVault]:
    """Build the token vault, or ``None`` when its storage cannot be opened."""
    try:
        return get_token_vault()
    except (OSError, sqlite3.Error):
        logger.exception("Token storage unavailable")
        return None


def get_callback_coordinator(
    ledger: Annotated[StateLedger, Depends(get_state_ledger)],
    vault: Annotated[TokenVault, Depends(get_token_vault)],
    oauth_client: Annotated[SpotifyOAuthClient, Depends(get_spotify_oauth_client)],
) -> OAuthCallbackCoordinator:
    """Build a coordinator for a single OAuth callback request."""
    return OAuthCallbackCoordinator(ledger=ledger, vault=vault, exchanger=oauth_client)


def get_playback_relay(
    vault: Annotated[TokenVault, Depends(get_token_vault)],
    api_client: Annotated[SpotifyAPIClient, Depends(get_spotify_api_client)],
) -> PlaybackRelay:
    """Build the relay for the player data endpoints."""
    return PlaybackRelay(vault=vault, api_client=api_client)


__all__ = [
    "get_callback_coordinator",
    "get_kv_store",
    "get_optional_token_vault",
    "get_playback_relay",
    "get_spotify_api_client",
    "get_spotify_oauth_client",
    "get_state_ledger",
    "get_token_cipher_service",
    "get_token_vault",
]
