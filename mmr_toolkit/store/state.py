"""
Commitment state owned by a single MMRStore.

GlobalState is an explicit context object: one instance per deployed store,
handed to MMRStore at construction. Nothing in the toolkit keeps it in a
module-level global.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from mmr_toolkit.store.types import BlockhashRecord, MMRBatch


@dataclass
class GlobalState:
    initialized: bool = False
    verifier_address: Optional[str] = None
    min_update_interval: int = 0
    latest_blockhash_from_l1: BlockhashRecord = field(
        default_factory=BlockhashRecord
    )
    latest_mmr_block: int = 0
    mmr_batches: Dict[int, MMRBatch] = field(default_factory=dict)

    def batch(self, batch_index: int) -> MMRBatch:
        """Stored batch, or the zero-valued default for unwritten indices."""
        return self.mmr_batches.get(batch_index, MMRBatch())

    def copy(self) -> "GlobalState":
        return copy.deepcopy(self)

    def restore(self, other: "GlobalState") -> None:
        """Overwrite this state in place with another one's values."""
        self.initialized = other.initialized
        self.verifier_address = other.verifier_address
        self.min_update_interval = other.min_update_interval
        self.latest_blockhash_from_l1 = other.latest_blockhash_from_l1
        self.latest_mmr_block = other.latest_mmr_block
        self.mmr_batches = dict(other.mmr_batches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initialized": self.initialized,
            "verifier_address": self.verifier_address,
            "min_update_interval": self.min_update_interval,
            "latest_blockhash_from_l1": self.latest_blockhash_from_l1.to_dict(),
            "latest_mmr_block": self.latest_mmr_block,
            "mmr_batches": {
                str(index): {
                    "leaves_count": batch.leaves_count,
                    "root_hash": "0x%064x" % batch.root_hash,
                }
                for index, batch in sorted(self.mmr_batches.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlobalState":
        blockhash = data.get("latest_blockhash_from_l1") or {}
        return cls(
            initialized=bool(data.get("initialized", False)),
            verifier_address=data.get("verifier_address"),
            min_update_interval=int(data.get("min_update_interval", 0)),
            latest_blockhash_from_l1=BlockhashRecord(
                block_number=int(blockhash.get("block_number", 0)),
                blockhash=int(blockhash.get("blockhash", "0x0"), 16),
            ),
            latest_mmr_block=int(data.get("latest_mmr_block", 0)),
            mmr_batches={
                int(index): MMRBatch(
                    leaves_count=int(batch["leaves_count"]),
                    root_hash=int(batch["root_hash"], 16),
                )
                for index, batch in (data.get("mmr_batches") or {}).items()
            },
        )
