"""
Domain models for the Spotify OAuth credential persisted by the token vault.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CredentialRecord(BaseModel):
    """Token payload returned by the Spotify token endpoint, kept verbatim."""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(..., min_length=1)
    token_type: Optional[str] = None
    scope: Optional[str] = None
    expires_in: Optional[int] = None
    # Stored for completeness; the proxy never refreshes tokens.
    refresh_token: Optional[str] = None


__all__ = ["CredentialRecord"]
