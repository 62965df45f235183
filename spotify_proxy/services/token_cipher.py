"""Symmetric encryption for credential records kept in the token vault."""

from __future__ import annotations

import base64
import hashlib
import json
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken


class TokenCipherService:
    """Seal and unseal JSON documents using a Fernet key derived from a secret."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def seal(self, document: Dict[str, Any]) -> str:
        """Serialize ``document`` to JSON and return the Fernet ciphertext."""
        serialized = json.dumps(document, separators=(",", ":"), sort_keys=True)
        return self._fernet.encrypt(serialized.encode("utf-8")).decode("utf-8")

    def unseal(self, ciphertext: str) -> Dict[str, Any]:
        """Decrypt ciphertext produced by :meth:`seal` back into a mapping."""
        try:
            plaintext = self._fernet.decrypt(ciphertext.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError(
                "Failed to decrypt credential record; invalid ciphertext provided."
            ) from exc
        return json.loads(plaintext)


__all__ = ["TokenCipherService"]
