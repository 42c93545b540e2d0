"""Chain — append-only, tamper-evident sequence of sealed blocks.

Invariants:
    - chain[0].previous_hash == "0" (sentinel) and chain[0].id == "genesis"
    - chain[i].previous_hash == chain[i-1].hash for every i >= 1
    - chain[i].hash == digest(previous_hash + timestamp + serialize(payload) + nonce)
    - every hash starts with `difficulty` leading '0' hex characters
    - the sequence only grows via append() or is wholesale replaced via import_chain()
    - a failed import leaves the previous sequence in place, object for object

Design Decisions:
    - Explicit Chain instances, no module-level state: one chain per owning context
    - Mutations serialized with an RLock — two concurrent appends could otherwise
      both read the same tip and fork the chain
    - Mining is a blocking brute-force nonce search with no timeout by default;
      expected ~16**difficulty attempts. max_iterations turns an unbounded search
      into MiningTimeoutError for callers that raise the difficulty
    - This is local sealing, not consensus: there are no peers and no fork choice
"""

import dataclasses
import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone

from notechain.core.chain_snapshot import (
    SnapshotFormatError, dump_chain, load_chain, serialize_payload,
)
from notechain.core.cipher_codec import digest as sha256_digest
from notechain.core.domain_types import (
    DEFAULT_DIFFICULTY, GENESIS_DATA, GENESIS_ID, GENESIS_PREVIOUS_HASH,
    Block, ChainStats, EncryptedPayload,
)
from notechain.core.errors import ErrorContext, MiningTimeoutError
from notechain.core.timestamps import now_ms

logger = logging.getLogger(__name__)


class Chain:
    """Owned block sequence plus its sealing procedure."""

    def __init__(
        self,
        digest: Callable[[str], str] = sha256_digest,
        difficulty: int = DEFAULT_DIFFICULTY,
        clock: Callable[[], int] = now_ms,
        max_iterations: int | None = None,
    ):
        if difficulty < 0:
            raise ValueError("difficulty must be >= 0")
        self._digest = digest
        self._difficulty = difficulty
        self._target = "0" * difficulty
        self._clock = clock
        self._max_iterations = max_iterations
        self._blocks: list[Block] = []
        self._lock = threading.RLock()

    @property
    def difficulty(self) -> int:
        return self._difficulty

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)

    def blocks(self) -> list[Block]:
        """Snapshot copy of the sequence; blocks themselves are frozen."""
        with self._lock:
            return list(self._blocks)

    # ─── Sealing ─────────────────────────────────────────────────

    def calculate_hash(self, block: Block) -> str:
        return self._digest(
            f"{block.previous_hash}{block.timestamp}"
            f"{serialize_payload(block.payload)}{block.nonce}"
        )

    def _meets_difficulty(self, block_hash: str) -> bool:
        return block_hash[:self._difficulty] == self._target

    def mine(self, candidate: Block) -> Block:
        """Increment the nonce until the hash meets the difficulty prefix.

        Blocks the caller for the whole search. The nonce is bumped before the
        first digest, so a candidate arriving with nonce 0 is sealed with nonce >= 1.
        """
        nonce = candidate.nonce
        block_hash = candidate.hash
        attempts = 0
        while not (block_hash and self._meets_difficulty(block_hash)):
            if self._max_iterations is not None and attempts >= self._max_iterations:
                raise MiningTimeoutError(
                    self._max_iterations, self._difficulty,
                    ErrorContext(block_id=candidate.id),
                )
            nonce += 1
            attempts += 1
            block_hash = self.calculate_hash(
                dataclasses.replace(candidate, nonce=nonce),
            )
        logger.debug(
            "Block mined: %s", block_hash,
            extra={"block_id": candidate.id, "nonce": nonce},
        )
        return dataclasses.replace(candidate, nonce=nonce, hash=block_hash)

    def genesis(self) -> Block:
        """Build and mine the fixed first block."""
        timestamp = self._clock()
        now = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
        candidate = Block(
            id=GENESIS_ID,
            hash="",
            previous_hash=GENESIS_PREVIOUS_HASH,
            timestamp=timestamp,
            payload=EncryptedPayload(
                id=GENESIS_ID,
                encrypted_data=GENESIS_DATA,
                created_at=now,
                updated_at=now,
            ),
            nonce=0,
        )
        return self.mine(candidate)

    def append(self, payload: EncryptedPayload) -> Block:
        """Seal payload into a new tip block; seals genesis first on an empty chain."""
        with self._lock:
            if not self._blocks:
                self._blocks.append(self.genesis())
            candidate = Block(
                id=payload.id,
                hash="",
                previous_hash=self._blocks[-1].hash,
                timestamp=self._clock(),
                payload=payload,
                nonce=0,
            )
            block = self.mine(candidate)
            self._blocks.append(block)
        logger.info(
            "Block appended at height %d", len(self._blocks) - 1,
            extra={"block_id": block.id, "nonce": block.nonce},
        )
        return block

    # ─── Verification ────────────────────────────────────────────

    def _first_invalid_index(self, blocks: list[Block]) -> int | None:
        """Index of the first block breaking an invariant, or None. Single pass."""
        for i, block in enumerate(blocks):
            if i == 0:
                if block.previous_hash != GENESIS_PREVIOUS_HASH:
                    return 0
            elif block.previous_hash != blocks[i - 1].hash:
                return i
            if block.hash != self.calculate_hash(block):
                return i
            if not self._meets_difficulty(block.hash):
                return i
        return None

    def validate(self) -> bool:
        """True iff every invariant holds. Never raises."""
        with self._lock:
            blocks = self._blocks
            try:
                bad = self._first_invalid_index(blocks)
            except Exception:
                logger.warning("Chain validation errored", exc_info=True)
                return False
        if bad is not None:
            logger.warning(
                "Invalid block at index %d", bad,
                extra={"block_id": blocks[bad].id},
            )
            return False
        return True

    def lookup_by_payload_id(self, payload_id: str) -> Block | None:
        with self._lock:
            return next(
                (b for b in self._blocks if b.payload.id == payload_id), None,
            )

    def stats(self) -> ChainStats:
        with self._lock:
            return ChainStats(
                count=len(self._blocks),
                is_valid=self.validate(),
                tip=self._blocks[-1] if self._blocks else None,
            )

    # ─── Export / Import ─────────────────────────────────────────

    def export(self) -> str:
        """JSON array of block records, in chain order."""
        with self._lock:
            return dump_chain(self._blocks)

    def import_chain(self, serialized: str) -> bool:
        """Atomically replace the sequence with a valid candidate.

        Returns False (state untouched) when the candidate cannot be parsed or
        fails validation.
        """
        try:
            candidate = load_chain(serialized)
        except SnapshotFormatError as e:
            logger.warning("Chain import rejected: %s", e)
            return False

        with self._lock:
            previous = self._blocks
            self._blocks = candidate
            if self.validate():
                logger.info("Chain imported with %d blocks", len(candidate))
                return True
            self._blocks = previous
        logger.warning("Chain import rejected: validation failed")
        return False
