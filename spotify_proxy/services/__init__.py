"""Service layer exports."""

from .oauth_callback import CallbackState, OAuthCallbackCoordinator
from .playback_relay import PlaybackRelay, RelayResult
from .state_ledger import StateLedger
from .token_cipher import TokenCipherService
from .token_vault import TokenVault

__all__ = [
    "CallbackState",
    "OAuthCallbackCoordinator",
    "PlaybackRelay",
    "RelayResult",
    "StateLedger",
    "TokenCipherService",
    "TokenVault",
]
