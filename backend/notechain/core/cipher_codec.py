"""Cipher Codec — confidentiality and integrity digesting for note payloads.

Invariants:
    - encrypt() is non-deterministic: Fernet draws a fresh random IV per call,
      so equal ciphertexts never imply equal plaintexts (and vice versa)
    - decrypt() restores id/created_at/updated_at from the payload itself, never
      from the ciphertext
    - digest() is SHA-256 over the UTF-8 bytes of its input, lowercase hex
    - Every codec failure surfaces as CipherError; nothing is swallowed

Design Decisions:
    - Fernet (AES-128-CBC + HMAC-SHA256) over raw AES: authenticated, so a token
      sealed under another key fails loudly instead of yielding garbage
    - Key is injected (derive_key from a configured secret) — the default
      secret in config is a placeholder and must be replaced before deployment
"""

import base64
import hashlib
import json
import logging

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from notechain.core.domain_types import EncryptedPayload, Note
from notechain.core.errors import CipherError, ErrorContext

logger = logging.getLogger(__name__)

DEFAULT_KDF_ITERATIONS = 390_000


def derive_key(secret: str, salt: str, iterations: int = DEFAULT_KDF_ITERATIONS) -> bytes:
    """Derive a urlsafe-base64 Fernet key from a passphrase with PBKDF2-HMAC-SHA256."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt.encode("utf-8"),
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode("utf-8")))


def digest(data: str) -> str:
    """Deterministic SHA-256 hex digest of data."""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


class CipherCodec:
    """Encrypts/decrypts notes under one symmetric key; stateless beyond the key."""

    def __init__(self, key: bytes):
        self._fernet = Fernet(key)

    @classmethod
    def from_secret(
        cls, secret: str, salt: str, iterations: int = DEFAULT_KDF_ITERATIONS,
    ) -> "CipherCodec":
        return cls(derive_key(secret, salt, iterations))

    @classmethod
    def generate(cls) -> "CipherCodec":
        """Codec with a random key — tests and throwaway ledgers."""
        return cls(Fernet.generate_key())

    def encrypt(self, note: Note) -> EncryptedPayload:
        try:
            plaintext = json.dumps(
                {
                    "title": note.title,
                    "content": note.content,
                    "tags": list(note.tags),
                },
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as e:
            logger.warning("Note serialization failed", extra={"note_id": note.id})
            raise CipherError(str(e), "encrypt", ErrorContext(note_id=note.id)) from e

        token = self._fernet.encrypt(plaintext.encode("utf-8"))
        return EncryptedPayload(
            id=note.id,
            encrypted_data=token.decode("ascii"),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    def decrypt(self, payload: EncryptedPayload) -> Note:
        ctx = ErrorContext(note_id=payload.id)
        try:
            raw = self._fernet.decrypt(payload.encrypted_data.encode("utf-8"))
        except (InvalidToken, ValueError, TypeError) as e:
            logger.warning("Decryption failed", extra={"note_id": payload.id})
            raise CipherError(
                "invalid token or wrong key", "decrypt", ctx,
            ) from e

        try:
            data = json.loads(raw.decode("utf-8")) if raw else None
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CipherError("plaintext is not JSON", "decrypt", ctx) from e
        if not isinstance(data, dict) or not data:
            raise CipherError("plaintext is empty", "decrypt", ctx)

        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise CipherError("tags are not a list", "decrypt", ctx)

        return Note(
            id=payload.id,
            title=str(data.get("title", "")),
            content=str(data.get("content", "")),
            tags=tuple(str(t) for t in tags),
            created_at=payload.created_at,
            updated_at=payload.updated_at,
        )

    @staticmethod
    def digest(data: str) -> str:
        return digest(data)

    @staticmethod
    def verify(data: str, expected: str) -> bool:
        return digest(data) == expected
