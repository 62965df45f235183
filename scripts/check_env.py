"""Pre-flight check for a Spotify proxy deployment.

Loads ``AppSettings`` the way the service does (shell environment first, then
the optional ``.env`` file) and reports whether the proxy can complete the
OAuth handshake once started:

* the Spotify client id and secret are set,
* ``SPOTIFY_REDIRECT_URI``, when set, points at ``/callback`` over HTTPS
  (plain HTTP is only accepted by Spotify for loopback addresses),
* ``STORAGE_DB_PATH`` can be created and written,
* stored tokens will be encrypted (a warning only when they would not be).

Example usage::

    python -m scripts.check_env --env-file /srv/spotify-proxy/.env
"""

from __future__ import annotations

import argparse
import sqlite3
import sys
from pathlib import Path
from typing import Callable, NamedTuple, Optional

from pydantic import ValidationError

from spotify_proxy.clients.kv_store import SQLiteKeyValueStore
from spotify_proxy.core.config import AppSettings, _load_env_file
from spotify_proxy.core.errors import ConfigurationError

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5

LOOPBACK_HOSTS = {"127.0.0.1", "::1", "[::1]"}
WRITE_CHECK_KEY = "check_env_write"


class CheckResult(NamedTuple):
    name: str
    ok: bool
    detail: str
    fatal: bool = True


def check_credentials(settings: AppSettings) -> CheckResult:
    try:
        settings.spotify.require_credentials()
    except ConfigurationError as exc:
        return CheckResult("credentials", False, exc.message)
    return CheckResult("credentials", True, "client id and secret present")


def check_redirect_uri(settings: AppSettings) -> CheckResult:
    redirect_uri = settings.spotify.redirect_uri
    if redirect_uri is None:
        return CheckResult("redirect_uri", True, "derived from the request origin")
    if (redirect_uri.path or "").rstrip("/") != "/callback":
        return CheckResult(
            "redirect_uri", False, f"{redirect_uri} does not end in /callback"
        )
    if redirect_uri.scheme != "https" and redirect_uri.host not in LOOPBACK_HOSTS:
        return CheckResult(
            "redirect_uri",
            False,
            f"{redirect_uri} must use https unless it targets a loopback address",
        )
    return CheckResult("redirect_uri", True, str(redirect_uri))


def check_storage(settings: AppSettings) -> CheckResult:
    db_path = settings.storage.db_path
    try:
        store = SQLiteKeyValueStore(db_path)
        store.put(WRITE_CHECK_KEY, "ok", ttl_seconds=1)
        store.delete(WRITE_CHECK_KEY)
    except (OSError, sqlite3.Error) as exc:
        return CheckResult("storage", False, f"{db_path} is not writable: {exc}")
    return CheckResult("storage", True, db_path)


def check_encryption(settings: AppSettings) -> CheckResult:
    if settings.security.token_encryption_secret:
        return CheckResult("encryption", True, "TOKEN_ENCRYPTION_SECRET set")
    if settings.spotify.client_secret:
        return CheckResult(
            "encryption",
            True,
            "keyed from the client secret; rotating it discards the stored token",
        )
    return CheckResult(
        "encryption", False, "tokens would be stored unencrypted", fatal=False
    )


CHECKS: tuple[Callable[[AppSettings], CheckResult], ...] = (
    check_credentials,
    check_redirect_uri,
    check_storage,
    check_encryption,
)


def run_checks(settings: AppSettings) -> list[CheckResult]:
    return [check(settings) for check in CHECKS]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check that the Spotify proxy is ready to authorize."
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Environment file to load before the checks (shell values win).",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    env_file: Optional[Path] = args.env_file
    if env_file is not None:
        if not env_file.exists():
            print(f"Environment file {env_file} does not exist.", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        _load_env_file(str(env_file))

    try:
        settings = AppSettings()
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    exit_code = EXIT_OK
    for result in run_checks(settings):
        if result.ok:
            label = "OK"
        elif result.fatal:
            label = "FAIL"
            exit_code = EXIT_VALIDATION_ERROR
        else:
            label = "WARN"
        print(f"{label:<4} {result.name}: {result.detail}")
    return exit_code


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
