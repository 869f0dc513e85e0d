from mmr_toolkit.l1.blockhash import (
    compute_block_hash,
    encode_block_header,
    fetch_l1_blockhash,
    relay_latest_blockhash,
)

__all__ = [
    "compute_block_hash",
    "encode_block_header",
    "fetch_l1_blockhash",
    "relay_latest_blockhash",
]
