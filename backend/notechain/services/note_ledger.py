"""Note Ledger — the encrypt-then-append contract between CipherCodec and Chain.

Invariants:
    - record(note) == chain.append(codec.encrypt(note)); nothing else writes blocks
    - reveal()/verify_note() are read-only over the chain

Design Decisions:
    - The ledger owns one Chain and one CipherCodec; hosts keep one ledger per
      owning context (app.state in the HTTP service), never a module global
    - verify_note() compares decrypted content, not ciphertext: encryption is
      non-deterministic, so equal notes never produce equal tokens
"""

import logging

from notechain.core.chain import Chain
from notechain.core.cipher_codec import CipherCodec
from notechain.core.domain_types import Block, Note

logger = logging.getLogger(__name__)


class NoteLedger:
    def __init__(self, codec: CipherCodec, chain: Chain | None = None):
        self.codec = codec
        self.chain = chain if chain is not None else Chain(digest=codec.digest)

    def record(self, note: Note) -> Block:
        """Encrypt a note and seal it into the chain."""
        block = self.chain.append(self.codec.encrypt(note))
        logger.info(
            "Note recorded", extra={"note_id": note.id, "block_id": block.id},
        )
        return block

    def reveal(self, note_id: str) -> Note | None:
        """Decrypt the attested snapshot of a note, if it was ever recorded."""
        block = self.chain.lookup_by_payload_id(note_id)
        if block is None:
            return None
        return self.codec.decrypt(block.payload)

    def verify_note(self, note: Note) -> bool:
        """True iff the note's title/content/tags match its attested snapshot."""
        attested = self.reveal(note.id)
        if attested is None:
            return False
        return (
            attested.title == note.title
            and attested.content == note.content
            and attested.tags == note.tags
        )
