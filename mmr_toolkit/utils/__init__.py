from mmr_toolkit.utils.validation import (
    check_u64,
    check_u256,
    same_address,
    u256_from_hex,
    validate_eth_address,
    validate_u256_hex,
)

__all__ = [
    "check_u64",
    "check_u256",
    "same_address",
    "u256_from_hex",
    "validate_eth_address",
    "validate_u256_hex",
]
