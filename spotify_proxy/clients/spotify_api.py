"""Thin wrapper around the Spotify Web API player endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


class SpotifyAPIClient:
    """Issue authenticated GET requests against ``api.spotify.com``."""

    BASE_URL = "https://api.spotify.com"
    CURRENTLY_PLAYING_PATH = "/v1/me/player/currently-playing"
    RECENTLY_PLAYED_PATH = "/v1/me/player/recently-played"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def get(
        self,
        path: str,
        access_token: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Forward a GET with the bearer token; the response is returned as-is."""
        async with httpx.AsyncClient(
            base_url=self.BASE_URL, timeout=self._timeout, transport=self._transport
        ) as client:
            return await client.get(
                path,
                params=params,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
            )

    async def currently_playing(self, access_token: str) -> httpx.Response:
        return await self.get(self.CURRENTLY_PLAYING_PATH, access_token)

    async def recently_played(
        self, access_token: str, *, limit: int = 10
    ) -> httpx.Response:
        return await self.get(
            self.RECENTLY_PLAYED_PATH, access_token, params={"limit": limit}
        )


__all__ = ["SpotifyAPIClient"]
