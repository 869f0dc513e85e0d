"""
Value types for the MMR commitment store.
"""

from dataclasses import dataclass

from mmr_toolkit.utils.validation import check_u64, check_u256

# =============================================================================
# COMMITTED STATE
# =============================================================================


@dataclass(frozen=True)
class MMRBatch:
    """Committed state of one batch. Root and leaf count are written together."""

    leaves_count: int = 0
    root_hash: int = 0

    def __post_init__(self):
        check_u64(self.leaves_count, "leaves_count")
        check_u256(self.root_hash, "root_hash")


@dataclass(frozen=True)
class MMRSnapshot:
    """Read-only view of one batch tagged with its index."""

    batch_index: int
    root_hash: int
    leaves_count: int

    @classmethod
    def from_batch(cls, batch_index: int, batch: MMRBatch) -> "MMRSnapshot":
        return cls(
            batch_index=batch_index,
            root_hash=batch.root_hash,
            leaves_count=batch.leaves_count,
        )

    def to_dict(self):
        return {
            "batch_index": self.batch_index,
            "root_hash": "0x%064x" % self.root_hash,
            "leaves_count": self.leaves_count,
        }


@dataclass(frozen=True)
class BlockhashRecord:
    """Most recent reference blockhash recorded from L1."""

    block_number: int = 0
    blockhash: int = 0

    def __post_init__(self):
        check_u64(self.block_number, "block_number")
        check_u256(self.blockhash, "blockhash")

    def to_dict(self):
        return {
            "block_number": self.block_number,
            "blockhash": "0x%064x" % self.blockhash,
        }


# =============================================================================
# PROOF OUTPUT
# =============================================================================


@dataclass(frozen=True)
class Journal:
    """Public output of an MMR update proof."""

    batch_index: int
    latest_mmr_block: int
    leaves_count: int
    root_hash: int

    def __post_init__(self):
        check_u64(self.batch_index, "batch_index")
        check_u64(self.latest_mmr_block, "latest_mmr_block")
        check_u64(self.leaves_count, "leaves_count")
        check_u256(self.root_hash, "root_hash")
