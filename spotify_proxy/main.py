"""
FastAPI application entrypoint for the Spotify proxy.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from spotify_proxy.api.routes import router
from spotify_proxy.core.config import get_settings
from spotify_proxy.core.errors import (
    NoCredentialError,
    SpotifyProxyError,
    UpstreamDataError,
)
from spotify_proxy.core.logging import configure_logging

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


async def _handle_proxy_error(request: Request, exc: SpotifyProxyError) -> Response:
    # Data endpoints answer in JSON; the browser-facing OAuth flow in plain text.
    if isinstance(exc, (NoCredentialError, UpstreamDataError)):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    if exc.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def _handle_http_error(
    request: Request, exc: StarletteHTTPException
) -> Response:
    if exc.status_code == HTTPStatus.NOT_FOUND:
        return PlainTextResponse("Not Found", status_code=HTTPStatus.NOT_FOUND)
    return PlainTextResponse(
        str(exc.detail), status_code=exc.status_code, headers=exc.headers
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> Response:
    logger.exception("Error handling request %s %s", request.method, request.url.path)
    return PlainTextResponse(
        "Internal Server Error",
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS,
    )


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Spotify Proxy",
        version="0.1.0",
        description=(
            "Personal Spotify API proxy handling OAuth and relaying playback data."
        ),
    )

    @app.middleware("http")
    async def attach_cors_headers(request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=HTTPStatus.OK, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(SpotifyProxyError, _handle_proxy_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
    app.include_router(router)
    return app


app = create_app()

__all__ = ["CORS_HEADERS", "app", "create_app"]
