"""HTML pages served by the browser-facing OAuth setup flow."""

from __future__ import annotations

from html import escape
from string import Template

_BASE_STYLE = """
        body { font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px; }
        .container { text-align: center; }
        .button { display: inline-block; padding: 10px 20px; background: #1db954; color: white;
                  text-decoration: none; border-radius: 5px; margin: 10px; border: none;
                  cursor: pointer; font-size: 16px; }
        .button:hover { background: #1ed760; }
"""

_HOME_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
    <title>Spotify Proxy</title>
    <style>$style</style>
</head>
<body>
    <div class="container">
        <h1>&#127925; Spotify Proxy</h1>
        <p>Your personal Spotify API proxy is running!</p>
        <a href="/setup" class="button">Setup OAuth</a>
        <a href="/health" class="button">Health Check</a>
    </div>
</body>
</html>
"""
)

_SETUP_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
    <title>Spotify Proxy Setup</title>
    <style>$style
        body { background-color: #f5f5f5; }
        .panel { background: white; padding: 30px; border-radius: 10px;
                 box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        .info { background: #e8f5e8; padding: 15px; border-radius: 5px; margin: 20px 0; }
        .step { margin: 15px 0; padding: 10px; background: #f9f9f9; border-left: 4px solid #1db954; }
    </style>
</head>
<body>
    <div class="panel">
        <h1>&#127925; Spotify Proxy Setup</h1>

        <div class="info">
            <h3>Before you begin:</h3>
            <ol>
                <li>Create a Spotify app at <a href="https://developer.spotify.com/dashboard" target="_blank">developer.spotify.com</a></li>
                <li>Add this callback URL to your app: <code>$redirect_uri</code></li>
                <li>Make sure SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET are set in the proxy environment</li>
            </ol>
        </div>

        <div class="step">
            <h3>Step 1: Authorize with Spotify</h3>
            <p>Click the button below to connect your Spotify account:</p>
            <form method="POST" action="/setup">
                <button type="submit" class="button">Connect Spotify Account</button>
            </form>
        </div>

        <div class="step">
            <h3>Step 2: Test Your Setup</h3>
            <p>After authorization, test these endpoints:</p>
            <ul>
                <li><a href="/now-playing">/now-playing</a> - Current track</li>
                <li><a href="/recent">/recent</a> - Recent tracks</li>
                <li><a href="/health">/health</a> - Health check</li>
            </ul>
        </div>

        <p><a href="/">&larr; Back to Home</a></p>
    </div>
</body>
</html>
"""
)

_SUCCESS_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head><title>OAuth Success</title></head>
<body style="font-family: Arial, sans-serif; text-align: center; padding: 50px;">
    <h1>&#9989; OAuth Setup Complete!</h1>
    <p>Your Spotify account has been successfully connected.</p>
    <p>You can now use the API endpoints:</p>
    <ul style="display: inline-block; text-align: left;">
        <li><a href="/now-playing">/now-playing</a></li>
        <li><a href="/recent">/recent</a></li>
        <li><a href="/health">/health</a></li>
    </ul>
    <p><a href="/">&larr; Back to Home</a></p>
</body>
</html>
"""
)


def render_home() -> str:
    return _HOME_TEMPLATE.substitute(style=_BASE_STYLE)


def render_setup(redirect_uri: str) -> str:
    """Render the setup instructions with the callback URL to register."""
    return _SETUP_TEMPLATE.substitute(
        style=_BASE_STYLE, redirect_uri=escape(redirect_uri)
    )


def render_success() -> str:
    return _SUCCESS_TEMPLATE.substitute()


__all__ = ["render_home", "render_setup", "render_success"]
