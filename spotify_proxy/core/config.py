"""
Application configuration models and helpers.

Centralizes settings management so the HTTP routes, the OAuth coordinator and
the operations scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from spotify_proxy.core.errors import ConfigurationError


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class SpotifySettings(BaseSettings):
    """Application credentials registered with the Spotify developer dashboard."""

    model_config = SettingsConfigDict(env_prefix="SPOTIFY_")

    client_id: Optional[str] = Field(None, description="Spotify application client id.")
    client_secret: Optional[str] = Field(
        None, description="Spotify application client secret."
    )
    redirect_uri: Optional[AnyHttpUrl] = Field(
        None,
        description=(
            "Callback URL registered with Spotify. Derived from the request "
            "origin when omitted."
        ),
    )

    def require_credentials(self) -> tuple[str, str]:
        """Return ``(client_id, client_secret)`` or fail loudly when unset."""
        if not self.client_id or not self.client_secret:
            raise ConfigurationError(
                "Spotify client credentials not configured. Please set "
                "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET secrets."
            )
        return self.client_id, self.client_secret


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(env_prefix="OAUTH_", populate_by_name=True)

    state_ttl_seconds: int = Field(
        600, validation_alias="OAUTH_STATE_TTL", gt=0
    )
    token_ttl_seconds: int = Field(
        3600, validation_alias="OAUTH_TOKEN_TTL", gt=0
    )
    state_length: int = Field(16, ge=8)
    scopes: Annotated[tuple[str, ...], NoDecode] = (
        "user-read-currently-playing",
        "user-read-recently-played",
        "user-read-playback-state",
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma or space separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(
            scope for scope in value.replace(",", " ").split() if scope.strip()
        )


class StorageSettings(BaseSettings):
    """Location of the durable key/value store backing the ledger and vault."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    db_path: str = Field("data/spotify_proxy.db")


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting stored tokens."
        ),
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: Optional[str] = Field(None, validation_alias="ENVIRONMENT")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    http_timeout_seconds: float = Field(
        10.0, validation_alias="HTTP_TIMEOUT_SECONDS", gt=0
    )
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "OAuthSettings",
    "SecuritySettings",
    "SpotifySettings",
    "StorageSettings",
    "get_settings",
]
