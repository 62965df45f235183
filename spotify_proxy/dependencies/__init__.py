"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_callback_coordinator,
    get_kv_store,
    get_optional_token_vault,
    get_playback_relay,
    get_spotify_api_client,
    get_spotify_oauth_client,
    get_state_ledger,
    get_token_cipher_service,
    get_token_vault,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
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
