"""Relay Spotify player data for the stored credential without reshaping it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import httpx

from spotify_proxy.clients.spotify_api import SpotifyAPIClient
from spotify_proxy.core.errors import NoCredentialError, UpstreamDataError
from spotify_proxy.services.token_vault import TokenVault

logger = logging.getLogger(__name__)

NOTHING_PLAYING = {"playing": False, "message": "No track currently playing"}


@dataclass(slots=True)
class RelayResult:
    status_code: int
    payload: Any


class PlaybackRelay:
    """Forward player requests with the vault's access token."""

    def __init__(self, *, vault: TokenVault, api_client: SpotifyAPIClient) -> None:
        self._vault = vault
        self._api = api_client

    def _access_token(self) -> str:
        record = self._vault.fetch()
        if record is None:
            raise NoCredentialError(
                "No valid tokens found. Please complete OAuth setup first."
            )
        return record.access_token

    @staticmethod
    def _relay(response: httpx.Response, failure_message: str) -> RelayResult:
        if not response.is_success:
            logger.warning("Spotify API answered %s: %s", response.status_code, failure_message)
            raise UpstreamDataError(failure_message, upstream_status=response.status_code)
        return RelayResult(status_code=HTTPStatus.OK, payload=response.json())

    async def now_playing(self) -> RelayResult:
        response = await self._api.currently_playing(self._access_token())
        if response.status_code == HTTPStatus.NO_CONTENT:
            return RelayResult(status_code=HTTPStatus.OK, payload=dict(NOTHING_PLAYING))
        return self._relay(response, "Failed to fetch current track")

    async def recent(self) -> RelayResult:
        response = await self._api.recently_played(self._access_token(), limit=10)
        return self._relay(response, "Failed to fetch recent tracks")


__all__ = ["NOTHING_PLAYING", "PlaybackRelay", "RelayResult"]
