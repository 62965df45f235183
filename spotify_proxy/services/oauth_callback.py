"""
Coordinator for the OAuth redirect back from Spotify.

The callback is handled as a small state machine::

    AWAITING_CODE -> VALIDATING_STATE -> EXCHANGING -> COMPLETE

with an exit to FAILED from every step. Any failure is terminal for the
request. Authorization codes are single-use, so nothing is
retried: the user has to restart the flow from ``/setup``.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional, Protocol

from spotify_proxy.core.errors import CallbackValidationError, SpotifyProxyError
from spotify_proxy.models.credentials import CredentialRecord
from spotify_proxy.services.state_ledger import StateLedger
from spotify_proxy.services.token_vault import TokenVault

logger = logging.getLogger(__name__)


class CallbackState(str, enum.Enum):
    AWAITING_CODE = "awaiting_code"
    VALIDATING_STATE = "validating_state"
    EXCHANGING = "exchanging"
    COMPLETE = "complete"
    FAILED = "failed"


class CodeExchanger(Protocol):
    async def exchange_authorization_code(
        self, code: str, redirect_uri: str
    ) -> CredentialRecord: ...


class OAuthCallbackCoordinator:
    """Validate a callback, exchange its code and persist the credential."""

    def __init__(
        self,
        *,
        ledger: StateLedger,
        vault: TokenVault,
        exchanger: CodeExchanger,
    ) -> None:
        self._ledger = ledger
        self._vault = vault
        self._exchanger = exchanger
        self.state = CallbackState.AWAITING_CODE

    def _transition(self, new_state: CallbackState) -> None:
        logger.debug("OAuth callback %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    def _fail(self, error: SpotifyProxyError) -> SpotifyProxyError:
        self._transition(CallbackState.FAILED)
        logger.warning("OAuth callback failed: %s", error.message)
        return error

    async def complete(
        self,
        *,
        code: Optional[str],
        state: Optional[str],
        error: Optional[str],
        redirect_uri: str,
    ) -> CredentialRecord:
        """Run the callback to completion or raise the error that stopped it."""
        if error:
            raise self._fail(CallbackValidationError(f"OAuth Error: {error}"))
        if not code or not state:
            raise self._fail(
                CallbackValidationError("Missing authorization code or state")
            )

        self._transition(CallbackState.VALIDATING_STATE)
        if not self._ledger.consume(state):
            raise self._fail(
                CallbackValidationError("Invalid or expired state parameter")
            )

        self._transition(CallbackState.EXCHANGING)
        try:
            record = await self._exchanger.exchange_authorization_code(
                code, redirect_uri
            )
        except SpotifyProxyError as exc:
            self._fail(exc)
            raise

        self._vault.store(record)
        self._transition(CallbackState.COMPLETE)
        logger.info("Spotify account connected")
        return record


__all__ = ["CallbackState", "CodeExchanger", "OAuthCallbackCoordinator"]
