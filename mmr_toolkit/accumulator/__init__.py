from mmr_toolkit.accumulator.batches import (
    BatchRange,
    batch_index_for_block,
    calculate_batch_bounds,
    calculate_batch_range,
    is_batch_complete,
    split_into_batches,
    verify_mmr_roots,
)

__all__ = [
    "BatchRange",
    "batch_index_for_block",
    "calculate_batch_bounds",
    "calculate_batch_range",
    "is_batch_complete",
    "split_into_batches",
    "verify_mmr_roots",
]
