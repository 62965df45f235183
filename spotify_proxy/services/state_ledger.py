"""
Anti-forgery ledger for in-flight OAuth authorization attempts.

Each attempt is a short-lived ``pending`` marker keyed by a random nonce. The
nonce travels through the Spotify consent redirect as the ``state`` parameter
and must come back unchanged within the TTL.
"""

from __future__ import annotations

import logging
import secrets
import string

from spotify_proxy.clients.kv_store import SQLiteKeyValueStore

logger = logging.getLogger(__name__)

NONCE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
PENDING_MARKER = "pending"
KEY_PREFIX = "oauth_state_"


def generate_nonce(length: int) -> str:
    """Return a random string over ``[A-Za-z0-9]`` of the given length."""
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))


class StateLedger:
    """Issue and redeem one-shot OAuth state nonces."""

    def __init__(
        self,
        store: SQLiteKeyValueStore,
        *,
        ttl_seconds: int = 600,
        nonce_length: int = 16,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._length = nonce_length

    @staticmethod
    def _key(nonce: str) -> str:
        return f"{KEY_PREFIX}{nonce}"

    def begin(self) -> str:
        """Record a new pending attempt and return its nonce."""
        nonce = generate_nonce(self._length)
        self._store.put(self._key(nonce), PENDING_MARKER, ttl_seconds=self._ttl)
        logger.info("Started OAuth authorization attempt (state TTL %ss)", self._ttl)
        return nonce

    def consume(self, nonce: str) -> bool:
        """Redeem ``nonce``; succeeds at most once and only before expiry."""
        if not nonce:
            return False
        redeemed = self._store.take(self._key(nonce))
        if not redeemed:
            logger.warning("Rejected unknown or expired OAuth state")
        return redeemed


__all__ = ["NONCE_ALPHABET", "PENDING_MARKER", "StateLedger", "generate_nonce"]
