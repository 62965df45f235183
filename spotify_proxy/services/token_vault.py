"""
Single-slot persistence for the Spotify credential.

The vault holds at most one :class:`CredentialRecord`. Storing a new record
replaces the previous one unconditionally (last write wins), and a record older
than the TTL reads back as absent even if Spotify would still accept it.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Optional

from pydantic import ValidationError

from spotify_proxy.clients.kv_store import SQLiteKeyValueStore
from spotify_proxy.models.credentials import CredentialRecord
from spotify_proxy.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)

VAULT_KEY = "spotify_tokens"


class TokenVault:
    """Store and fetch the current Spotify credential."""

    def __init__(
        self,
        store: SQLiteKeyValueStore,
        *,
        ttl_seconds: int = 3600,
        cipher: Optional[TokenCipherService] = None,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._cipher = cipher

    def store(self, record: CredentialRecord) -> None:
        document = record.model_dump()
        if self._cipher is not None:
            value = self._cipher.seal(document)
        else:
            value = json.dumps(document)
        self._store.put(VAULT_KEY, value, ttl_seconds=self._ttl)
        logger.info("Stored Spotify credential (TTL %ss)", self._ttl)

    def fetch(self) -> Optional[CredentialRecord]:
        raw = self._store.get(VAULT_KEY)
        if raw is None:
            return None
        try:
            document = (
                self._cipher.unseal(raw) if self._cipher is not None else json.loads(raw)
            )
            return CredentialRecord.model_validate(document)
        except (ValueError, ValidationError):
            # Unreadable records (e.g. after a secret rotation) require re-authorization.
            logger.warning("Discarding unreadable Spotify credential record")
            return None

    def is_connected(self) -> bool:
        """Report whether a usable credential is stored; storage faults read as no."""
        try:
            return self.fetch() is not None
        except sqlite3.Error:
            logger.exception("Token vault unavailable")
            return False


__all__ = ["TokenVault", "VAULT_KEY"]
