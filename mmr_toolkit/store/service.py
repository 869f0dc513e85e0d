"""
MMR commitment store.

Sole custodian of the MMR batch snapshots, the MMR block high-water mark
and the reference L1 blockhash. Every MMR mutation is checked against the
state as it stood when the call started, and becomes visible (together
with its event) only once every check has passed.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from mmr_toolkit.shared.exceptions import (
    AlreadyInitialized,
    BlockNotIncreasing,
    IntervalTooSmall,
    Unauthorized,
)
from mmr_toolkit.shared.logging import get_logger
from mmr_toolkit.store.events import (
    EventLog,
    LatestBlockhashFromL1Stored,
    MmrStateUpdated,
)
from mmr_toolkit.store.state import GlobalState
from mmr_toolkit.store.types import BlockhashRecord, MMRBatch, MMRSnapshot
from mmr_toolkit.utils.validation import (
    check_u64,
    check_u256,
    same_address,
    validate_eth_address,
)

_logger = get_logger(__name__)


class MMRStore:
    """Proof-gated store of MMR batch commitments."""

    def __init__(
        self,
        state: Optional[GlobalState] = None,
        event_log: Optional[EventLog] = None,
    ):
        self._state = state if state is not None else GlobalState()
        self._events = event_log if event_log is not None else EventLog()

    @property
    def state(self) -> GlobalState:
        return self._state

    @property
    def event_log(self) -> EventLog:
        return self._events

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run a unit of work that either fully applies or leaves no trace.

        State is restored and buffered events are dropped if the block
        raises. Nested transactions join the enclosing one.
        """
        if self._events.in_transaction:
            yield
            return

        snapshot = self._state.copy()
        with self._events.transaction():
            try:
                yield
            except BaseException:
                self._state.restore(snapshot)
                raise

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def initialize(self, verifier_address: str, min_update_interval: int) -> None:
        """Register the verifier identity and update cadence, exactly once."""
        if self._state.initialized:
            raise AlreadyInitialized()

        verifier_address = validate_eth_address(
            verifier_address, "verifier_address"
        )
        check_u64(min_update_interval, "min_update_interval")

        self._state.verifier_address = verifier_address
        self._state.min_update_interval = min_update_interval
        self._state.initialized = True

        _logger.info(
            f"Store initialized: verifier={verifier_address}, "
            f"min_update_interval={min_update_interval}"
        )

    def store_latest_blockhash_from_l1(
        self, block_number: int, blockhash: int
    ) -> None:
        """Overwrite the reference L1 blockhash. Independent of MMR state."""
        record = BlockhashRecord(block_number=block_number, blockhash=blockhash)

        with self.transaction():
            self._state.latest_blockhash_from_l1 = record
            self._events.emit(
                LatestBlockhashFromL1Stored(
                    block_number=block_number, blockhash=blockhash
                )
            )

        _logger.debug(f"Stored L1 blockhash for block {block_number}")

    def update_mmr_state(
        self,
        caller: str,
        batch_index: int,
        latest_mmr_block: int,
        leaves_count: int,
        mmr_root: int,
    ) -> None:
        """Commit a new snapshot for a batch and advance the MMR block.

        Args:
            caller: Identity of the account making the call
            batch_index: Batch to write; created if absent, overwritten if present
            latest_mmr_block: New MMR block high-water mark
            leaves_count: Leaves covered by the new root
            mmr_root: New root hash of the batch

        Raises:
            Unauthorized: caller is not the registered verifier
            BlockNotIncreasing: latest_mmr_block is not above the current one
            IntervalTooSmall: the gap is below min_update_interval
        """
        state = self._state
        if not same_address(caller, state.verifier_address):
            _logger.warning(f"Rejected MMR update from {caller}: unauthorized")
            raise Unauthorized(caller, state.verifier_address)

        check_u64(batch_index, "batch_index")
        check_u64(latest_mmr_block, "latest_mmr_block")
        check_u64(leaves_count, "leaves_count")
        check_u256(mmr_root, "mmr_root")

        current = state.latest_mmr_block
        if latest_mmr_block <= current:
            _logger.warning(
                f"Rejected MMR update for batch {batch_index}: block "
                f"{latest_mmr_block} does not advance past {current}"
            )
            raise BlockNotIncreasing(
                latest_mmr_block, current, state.min_update_interval
            )

        if latest_mmr_block - current < state.min_update_interval:
            _logger.warning(
                f"Rejected MMR update for batch {batch_index}: interval "
                f"{latest_mmr_block - current} < {state.min_update_interval}"
            )
            raise IntervalTooSmall(
                latest_mmr_block, current, state.min_update_interval
            )

        previous = state.mmr_batches.get(batch_index)
        if previous is not None and leaves_count < previous.leaves_count:
            _logger.warning(
                f"Batch {batch_index} leaves count decreases from "
                f"{previous.leaves_count} to {leaves_count}"
            )

        with self.transaction():
            state.mmr_batches[batch_index] = MMRBatch(
                leaves_count=leaves_count, root_hash=mmr_root
            )
            state.latest_mmr_block = latest_mmr_block
            self._events.emit(
                MmrStateUpdated(
                    batch_index=batch_index,
                    leaves_count=leaves_count,
                    root_hash=mmr_root,
                )
            )

        _logger.info(
            f"MMR batch {batch_index} updated: leaves={leaves_count}, "
            f"root={hex(mmr_root)}, latest_mmr_block={latest_mmr_block}"
        )

    # =========================================================================
    # READS
    # =========================================================================

    def get_latest_blockhash_from_l1(self) -> BlockhashRecord:
        return self._state.latest_blockhash_from_l1

    def get_mmr_state(self, batch_index: int) -> MMRSnapshot:
        """Snapshot of a batch; unwritten indices read as zero."""
        return MMRSnapshot.from_batch(
            batch_index, self._state.batch(batch_index)
        )

    def get_latest_mmr_block(self) -> int:
        return self._state.latest_mmr_block

    def get_verifier_address(self) -> Optional[str]:
        return self._state.verifier_address

    def get_min_update_interval(self) -> int:
        return self._state.min_update_interval
