"""Cipher Codec — tests for encrypt/decrypt round-trip, failure modes and digests.

Invariants:
    - decrypt(encrypt(n)) preserves title, content, tags, created_at, updated_at
    - encrypt() is non-deterministic (fresh IV per call)
    - Wrong key / malformed token / non-JSON plaintext raise CipherError
    - digest() is deterministic SHA-256 hex; verify() compares against it
"""

import hashlib
from datetime import datetime, timezone

import pytest
from cryptography.fernet import Fernet

from notechain.core.cipher_codec import CipherCodec, derive_key, digest
from notechain.core.domain_types import EncryptedPayload, Note
from notechain.core.errors import CipherError


# -- Round-trip ----------------------------------------------------------------

def test_roundtrip_preserves_note_fields(codec, make_note):
    note = make_note(tags=("home", "weekly"))
    restored = codec.decrypt(codec.encrypt(note))

    assert restored == note
    assert restored.tags == ("home", "weekly")


def test_roundtrip_unicode_and_empty_tags(codec, make_note):
    note = make_note(title="Café ☕", content="línea 1\nlínea 2", tags=())
    restored = codec.decrypt(codec.encrypt(note))

    assert restored.title == "Café ☕"
    assert restored.content == "línea 1\nlínea 2"
    assert restored.tags == ()


def test_payload_mirrors_note_id_and_timestamps(codec, make_note):
    note = make_note(note_id="abc")
    payload = codec.encrypt(note)

    assert payload.id == "abc"
    assert payload.created_at == note.created_at
    assert payload.updated_at == note.updated_at


def test_ciphertext_hides_plaintext(codec, make_note):
    payload = codec.encrypt(make_note(content="super secret content"))
    assert "super secret content" not in payload.encrypted_data
    assert "Groceries" not in payload.encrypted_data


def test_encrypt_is_non_deterministic(codec, make_note):
    note = make_note()
    assert codec.encrypt(note).encrypted_data != codec.encrypt(note).encrypted_data


def test_decrypt_uses_payload_timestamps(codec, make_note):
    """Timestamps are stitched back from the payload, not the ciphertext."""
    payload = codec.encrypt(make_note())
    later = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    moved = EncryptedPayload(
        id="other", encrypted_data=payload.encrypted_data,
        created_at=later, updated_at=later,
    )
    restored = codec.decrypt(moved)

    assert restored.id == "other"
    assert restored.created_at == later
    assert restored.title == "Groceries"


# -- Failures ------------------------------------------------------------------

def test_decrypt_with_different_key_raises(codec, make_note):
    payload = codec.encrypt(make_note())
    with pytest.raises(CipherError) as exc:
        CipherCodec.generate().decrypt(payload)
    assert exc.value.code == "CIPHER_ERROR"
    assert exc.value.context.note_id == "n1"


def test_decrypt_malformed_token_raises(codec):
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    payload = EncryptedPayload(
        id="x", encrypted_data="not-a-token", created_at=stamp, updated_at=stamp,
    )
    with pytest.raises(CipherError):
        codec.decrypt(payload)


@pytest.mark.parametrize("plaintext", [b"", b"not json", b"[1, 2]", b"{}"])
def test_decrypt_non_object_plaintext_raises(plaintext):
    key = Fernet.generate_key()
    codec = CipherCodec(key)
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    payload = EncryptedPayload(
        id="x",
        encrypted_data=Fernet(key).encrypt(plaintext).decode(),
        created_at=stamp, updated_at=stamp,
    )
    with pytest.raises(CipherError):
        codec.decrypt(payload)


# -- Key derivation ------------------------------------------------------------

def test_derived_key_is_stable_for_same_secret_and_salt():
    assert derive_key("s3cret", "salt", 1000) == derive_key("s3cret", "salt", 1000)
    assert derive_key("s3cret", "salt", 1000) != derive_key("s3cret", "pepper", 1000)


def test_codecs_from_same_secret_interoperate(make_note):
    a = CipherCodec.from_secret("s3cret", "salt", 1000)
    b = CipherCodec.from_secret("s3cret", "salt", 1000)
    note = make_note()
    assert b.decrypt(a.encrypt(note)) == note


# -- Digest --------------------------------------------------------------------

def test_digest_is_sha256_hex():
    assert digest("abc") == hashlib.sha256(b"abc").hexdigest()
    assert len(digest("")) == 64


def test_digest_is_deterministic():
    assert CipherCodec.digest("same input") == CipherCodec.digest("same input")


def test_verify_accepts_own_digest_and_rejects_others():
    assert CipherCodec.verify("x", CipherCodec.digest("x")) is True
    assert CipherCodec.verify("x", CipherCodec.digest("y")) is False


def test_note_timestamps_normalized_to_milliseconds():
    precise = datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
    note = Note(id="n", title="t", content="c", created_at=precise, updated_at=precise)
    assert note.created_at.microsecond == 123000
