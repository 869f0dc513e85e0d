"""
Batch arithmetic and committed-root checks.

The MMR is split into fixed-size batches of consecutive blocks; batch i
covers blocks [i * batch_size, (i + 1) * batch_size - 1] and has its own
root in the store.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from mmr_toolkit.shared.exceptions import InvalidInput, InvalidMmrRoot
from mmr_toolkit.shared.logging import get_logger
from mmr_toolkit.store.service import MMRStore
from mmr_toolkit.store.types import MMRSnapshot
from mmr_toolkit.utils.validation import check_u64

_logger = get_logger(__name__)


@dataclass(frozen=True)
class BatchRange:
    start: int
    end: int


def _check_batch_size(batch_size: int) -> int:
    check_u64(batch_size, "batch_size")
    if batch_size == 0:
        raise InvalidInput("Batch size must be greater than 0")
    return batch_size


def batch_index_for_block(block_number: int, batch_size: int) -> int:
    _check_batch_size(batch_size)
    return check_u64(block_number, "block_number") // batch_size


def calculate_batch_bounds(batch_index: int, batch_size: int) -> Tuple[int, int]:
    """First and last block of a batch, inclusive."""
    _check_batch_size(batch_size)
    batch_start = batch_index * batch_size
    return batch_start, batch_start + batch_size - 1


def calculate_batch_range(
    current_end: int, start_block: int, batch_size: int
) -> BatchRange:
    """Part of current_end's batch that lies at or after start_block."""
    _check_batch_size(batch_size)
    batch_start = current_end - (current_end % batch_size)
    return BatchRange(
        start=max(batch_start, start_block),
        end=min(current_end, batch_start + batch_size - 1),
    )


def split_into_batches(
    start_block: int, end_block: int, batch_size: int
) -> List[BatchRange]:
    """Cover [start_block, end_block] with batch-aligned ranges, newest first."""
    _check_batch_size(batch_size)
    if end_block < start_block:
        raise InvalidInput(
            f"End block {end_block} is before start block {start_block}"
        )

    ranges = []
    current_end = end_block
    while current_end >= start_block:
        batch_range = calculate_batch_range(current_end, start_block, batch_size)
        ranges.append(batch_range)
        if batch_range.start == 0:
            break
        current_end = batch_range.start - 1
    return ranges


def is_batch_complete(snapshot: MMRSnapshot, batch_size: int) -> bool:
    return snapshot.leaves_count >= _check_batch_size(batch_size)


def verify_mmr_roots(store: MMRStore, local_roots: Dict[int, int]) -> None:
    """Check locally computed batch roots against the committed ones.

    Raises InvalidMmrRoot on the first mismatch, in batch index order.
    """
    for batch_index in sorted(local_roots):
        committed = store.get_mmr_state(batch_index).root_hash
        local = local_roots[batch_index]
        if committed != local:
            _logger.error(
                f"MMR root mismatch for batch {batch_index}: "
                f"committed={hex(committed)} local={hex(local)}"
            )
            raise InvalidMmrRoot(batch_index, committed, local)

    _logger.debug(f"Verified {len(local_roots)} MMR roots against the store")
