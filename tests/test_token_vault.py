from __future__ import annotations

import json
import sqlite3

import pytest

from spotify_proxy.models.credentials import CredentialRecord
from spotify_proxy.services.token_cipher import TokenCipherService
from spotify_proxy.services.token_vault import VAULT_KEY, TokenVault

TOKEN_PAYLOAD = {
    "access_token": "A",
    "token_type": "Bearer",
    "expires_in": 3600,
    "refresh_token": "R",
    "scope": "user-read-currently-playing user-read-recently-played",
}


@pytest.fixture
def cipher() -> TokenCipherService:
    return TokenCipherService(secret="vault-secret")


def test_fetch_without_store_returns_none(kv_store, cipher) -> None:
    vault = TokenVault(kv_store, cipher=cipher)

    assert vault.fetch() is None


def test_fetch_after_store_returns_record(kv_store, cipher) -> None:
    vault = TokenVault(kv_store, cipher=cipher)

    vault.store(CredentialRecord.model_validate(TOKEN_PAYLOAD))
    record = vault.fetch()

    assert record is not None
    assert record.access_token == "A"
    assert record.refresh_token == "R"
    assert record.token_type == "Bearer"
    assert record.expires_in == 3600


def test_store_overwrites_previous_record(kv_store, cipher) -> None:
    vault = TokenVault(kv_store, cipher=cipher)

    vault.store(CredentialRecord(access_token="first"))
    vault.store(CredentialRecord(access_token="second"))

    record = vault.fetch()
    assert record is not None
    assert record.access_token == "second"


def test_record_expires_after_ttl(kv_store, clock, cipher) -> None:
    vault = TokenVault(kv_store, ttl_seconds=3600, cipher=cipher)
    vault.store(CredentialRecord(access_token="A"))

    clock.advance(3599)
    assert vault.fetch() is not None

    clock.advance(1)
    assert vault.fetch() is None


def test_record_is_encrypted_at_rest(kv_store, cipher) -> None:
    vault = TokenVault(kv_store, cipher=cipher)
    vault.store(CredentialRecord(access_token="very-secret-token"))

    raw = kv_store.get(VAULT_KEY)
    assert raw is not None
    assert "very-secret-token" not in raw
    assert cipher.unseal(raw)["access_token"] == "very-secret-token"


def test_plaintext_storage_without_cipher(kv_store) -> None:
    vault = TokenVault(kv_store)
    vault.store(CredentialRecord.model_validate(TOKEN_PAYLOAD))

    assert json.loads(kv_store.get(VAULT_KEY))["access_token"] == "A"
    assert vault.fetch().access_token == "A"


def test_unknown_upstream_fields_are_kept(kv_store, cipher) -> None:
    vault = TokenVault(kv_store, cipher=cipher)
    vault.store(CredentialRecord.model_validate({**TOKEN_PAYLOAD, "extra": "kept"}))

    record = vault.fetch()
    assert record is not None
    assert record.model_dump()["extra"] == "kept"


def test_unreadable_record_reads_as_absent(kv_store, cipher) -> None:
    TokenVault(kv_store, cipher=TokenCipherService(secret="old-secret")).store(
        CredentialRecord(access_token="A")
    )

    assert TokenVault(kv_store, cipher=cipher).fetch() is None


def test_explicit_nulls_are_kept(kv_store) -> None:
    vault = TokenVault(kv_store)
    vault.store(
        CredentialRecord.model_validate(
            {"access_token": "A", "refresh_token": None, "device": None}
        )
    )

    document = json.loads(kv_store.get(VAULT_KEY))
    assert document["refresh_token"] is None
    assert "device" in document and document["device"] is None


def test_is_connected_tracks_stored_record(kv_store, cipher) -> None:
    vault = TokenVault(kv_store, cipher=cipher)
    assert vault.is_connected() is False

    vault.store(CredentialRecord(access_token="A"))
    assert vault.is_connected() is True


def test_is_connected_reads_storage_errors_as_disconnected() -> None:
    class LockedStore:
        def get(self, key: str):
            raise sqlite3.OperationalError("database is locked")

    assert TokenVault(LockedStore()).is_connected() is False
