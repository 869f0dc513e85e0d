from mmr_toolkit.store.events import (
    EventLog,
    LatestBlockhashFromL1Stored,
    MmrProofVerified,
    MmrStateUpdated,
)
from mmr_toolkit.store.service import MMRStore
from mmr_toolkit.store.state import GlobalState
from mmr_toolkit.store.types import (
    BlockhashRecord,
    Journal,
    MMRBatch,
    MMRSnapshot,
)

__all__ = [
    "MMRStore",
    "GlobalState",
    "EventLog",
    "LatestBlockhashFromL1Stored",
    "MmrStateUpdated",
    "MmrProofVerified",
    "BlockhashRecord",
    "Journal",
    "MMRBatch",
    "MMRSnapshot",
]
