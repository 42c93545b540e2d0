"""Error Hierarchy — typed, categorized exceptions for all NoteChain failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Codec failures are raised; a rejected chain import is a boolean in core/
    - to_response() produces the REST envelope
    - No ciphertext, key material or plaintext leaked in user-facing messages

Design Decisions:
    - Single hierarchy with NoteChainError base: FastAPI global handler catches all
    - ChainImportRejectedError only raised by the HTTP shell, never by Chain itself
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    INTEGRITY = "integrity"
    CRYPTO = "crypto"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    note_id: str | None = None
    block_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class NoteChainError(Exception):
    """Base exception for all NoteChain errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "note_id": self.context.note_id,
                    "block_id": self.context.block_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class CipherError(NoteChainError):
    """Encryption or decryption failed (malformed token, wrong key, bad plaintext)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to {operation} note: {message}",
            "CIPHER_ERROR", ErrorCategory.CRYPTO,
            ErrorSeverity.ERROR, context, 422,
        )
        self.operation = operation


class ChainImportRejectedError(NoteChainError):
    """Candidate chain failed parsing or validation; existing chain kept."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Imported chain is invalid; the existing chain was left unchanged.",
            "CHAIN_IMPORT_REJECTED", ErrorCategory.INTEGRITY,
            ErrorSeverity.WARNING, context, 409,
        )


class ResourceNotFoundError(NoteChainError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class MiningTimeoutError(NoteChainError):
    """Nonce search hit the configured iteration cap without sealing the block."""
    def __init__(self, max_iterations: int, difficulty: int, context: ErrorContext | None = None):
        super().__init__(
            f"Mining exceeded {max_iterations} iterations at difficulty {difficulty}",
            "MINING_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.max_iterations = max_iterations
        self.difficulty = difficulty


class StorageError(NoteChainError):
    """Key-value store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
