"""
Journal codec.

The verification capability returns the proof's public output as the ABI
encoding of (uint64 batch_index, uint64 latest_mmr_block, uint64
leaves_count, uint256 root_hash): four 32-byte big-endian words.
"""

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError

from mmr_toolkit.shared.exceptions import InvalidInput, JournalDecodeFailed
from mmr_toolkit.store.types import Journal

JOURNAL_ABI_TYPES = ["uint64", "uint64", "uint64", "uint256"]
JOURNAL_SIZE = 32 * len(JOURNAL_ABI_TYPES)


def decode_journal(data: bytes) -> Journal:
    """Decode verifier output bytes into a Journal."""
    if not isinstance(data, (bytes, bytearray)):
        raise JournalDecodeFailed(
            f"Journal must be bytes, got {type(data).__name__}"
        )
    if len(data) < JOURNAL_SIZE:
        raise JournalDecodeFailed(
            f"Journal too short: {len(data)} bytes, expected {JOURNAL_SIZE}"
        )

    try:
        batch_index, latest_mmr_block, leaves_count, root_hash = decode(
            JOURNAL_ABI_TYPES, bytes(data[:JOURNAL_SIZE])
        )
    except DecodingError as e:
        raise JournalDecodeFailed(f"Malformed journal: {e}") from e

    return Journal(
        batch_index=batch_index,
        latest_mmr_block=latest_mmr_block,
        leaves_count=leaves_count,
        root_hash=root_hash,
    )


def encode_journal(journal: Journal) -> bytes:
    """Encode a Journal the way the verification capability emits it."""
    try:
        return encode(
            JOURNAL_ABI_TYPES,
            [
                journal.batch_index,
                journal.latest_mmr_block,
                journal.leaves_count,
                journal.root_hash,
            ],
        )
    except EncodingError as e:
        raise InvalidInput(f"Journal cannot be encoded: {e}") from e
