"""
Spotify OAuth utilities.

Builds the consent URL that starts the authorization-code flow and performs
the server-to-server code exchange against the Spotify accounts service.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from spotify_proxy.core.config import OAuthSettings, SpotifySettings
from spotify_proxy.core.errors import UpstreamAuthError
from spotify_proxy.models.credentials import CredentialRecord

logger = logging.getLogger(__name__)


class SpotifyOAuthClient:
    """Build Spotify authorization URLs and exchange authorization codes."""

    AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
    TOKEN_URL = "https://accounts.spotify.com/api/token"

    def __init__(
        self,
        spotify_settings: SpotifySettings,
        oauth_settings: OAuthSettings,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._spotify = spotify_settings
        self._oauth = oauth_settings
        self._timeout = timeout
        self._transport = transport

    def build_authorization_url(self, state: str, redirect_uri: str) -> str:
        """Construct the Spotify consent URL carrying the anti-forgery state."""
        client_id, _ = self._spotify.require_credentials()
        params = {
            "response_type": "code",
            "client_id": client_id,
            "scope": " ".join(self._oauth.scopes),
            "redirect_uri": redirect_uri,
            "state": state,
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_authorization_code(
        self, code: str, redirect_uri: str
    ) -> CredentialRecord:
        """
        Exchange an authorization code for a credential record.

        ``redirect_uri`` must be identical to the one sent with the consent
        request; Spotify rejects the exchange otherwise. The code is single-use,
        so failures are never retried.
        """
        client_id, client_secret = self._spotify.require_credentials()
        payload = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        }

        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.post(
                self.TOKEN_URL,
                data=payload,
                auth=httpx.BasicAuth(client_id, client_secret),
            )

        if not response.is_success:
            logger.warning(
                "Spotify token exchange rejected with status %s", response.status_code
            )
            raise UpstreamAuthError(
                f"Token exchange failed: {response.reason_phrase}",
                upstream_status=response.status_code,
            )

        try:
            return CredentialRecord.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamAuthError(
                "Token exchange failed: incomplete token payload returned from Spotify.",
                upstream_status=None,
            ) from exc


__all__ = ["SpotifyOAuthClient"]
