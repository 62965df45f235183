"""
FastAPI routes for the Spotify proxy.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from spotify_proxy.api.pages import render_home, render_setup, render_success
from spotify_proxy.core.config import AppSettings
from spotify_proxy.dependencies import (
    get_app_settings,
    get_callback_coordinator,
    get_optional_token_vault,
    get_playback_relay,
    get_spotify_oauth_client,
    get_state_ledger,
)
from spotify_proxy.schemas import HealthResponse

router = APIRouter()
logger = logging.getLogger(__name__)


def _callback_url(request: Request, settings: AppSettings) -> str:
    """Redirect URI sent to Spotify; identical for the consent and the exchange."""
    if settings.spotify.redirect_uri:
        return str(settings.spotify.redirect_uri)
    return f"{str(request.base_url).rstrip('/')}/callback"


@router.get("/", response_class=HTMLResponse)
async def home() -> HTMLResponse:
    """Landing page linking to setup and health."""
    return HTMLResponse(render_home())


@router.api_route("/setup", methods=["GET", "POST"], response_class=HTMLResponse)
async def setup(
    request: Request,
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    ledger: Annotated[Any, Depends(get_state_ledger)],
    oauth_client: Annotated[Any, Depends(get_spotify_oauth_client)],
) -> Response:
    """
    GET renders setup instructions. POST records a pending authorization
    attempt and sends the browser to Spotify.
    """
    settings.spotify.require_credentials()
    callback_url = _callback_url(request, settings)
    if request.method == "GET":
        return HTMLResponse(render_setup(callback_url))

    state = ledger.begin()
    authorization_url = oauth_client.build_authorization_url(
        state=state, redirect_uri=callback_url
    )
    return RedirectResponse(url=authorization_url, status_code=HTTPStatus.FOUND)


@router.get("/callback", response_class=HTMLResponse)
async def oauth_callback(
    request: Request,
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    coordinator: Annotated[Any, Depends(get_callback_coordinator)],
    code: str | None = Query(default=None, description="Authorization code from Spotify."),
    state: str | None = Query(default=None, description="State nonce issued by /setup."),
    error: str | None = Query(default=None, description="Error reported by Spotify."),
) -> HTMLResponse:
    """Complete the OAuth handshake and store the resulting credential."""
    await coordinator.complete(
        code=code,
        state=state,
        error=error,
        redirect_uri=_callback_url(request, settings),
    )
    return HTMLResponse(render_success())


@router.get("/now-playing")
async def now_playing(
    relay: Annotated[Any, Depends(get_playback_relay)],
) -> JSONResponse:
    """Relay the currently playing item, or a placeholder when idle."""
    result = await relay.now_playing()
    return JSONResponse(status_code=result.status_code, content=result.payload)


@router.get("/recent")
async def recent(
    relay: Annotated[Any, Depends(get_playback_relay)],
) -> JSONResponse:
    """Relay the ten most recently played items."""
    result = await relay.recent()
    return JSONResponse(status_code=result.status_code, content=result.payload)


@router.get("/health", response_model=HealthResponse, status_code=HTTPStatus.OK)
async def healthcheck(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    vault: Annotated[Any, Depends(get_optional_token_vault)],
) -> HealthResponse:
    """Liveness check reporting whether a usable credential is stored."""
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment or "unknown",
        oauth_configured=vault is not None and vault.is_connected(),
    )


__all__ = ["router"]
