"""Expose constructed client wrappers."""

from .kv_store import SQLiteKeyValueStore
from .spotify_api import SpotifyAPIClient
from .spotify_auth import SpotifyOAuthClient

__all__ = [
    "SQLiteKeyValueStore",
    "SpotifyAPIClient",
    "SpotifyOAuthClient",
]
