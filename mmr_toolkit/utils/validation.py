"""Input validation shared by the store, the gateway and the CLI."""

import string
from typing import Optional

from eth_utils import is_address, to_checksum_address

from mmr_toolkit.shared.constants import U64_MAX, U256_MAX
from mmr_toolkit.shared.exceptions import InvalidInput


def validate_eth_address(address: str, param_name: str = "address") -> str:
    """Validate and return checksum ethereum address"""
    if not address or not isinstance(address, str):
        raise InvalidInput(
            f"Invalid {param_name}: address must be a non-empty string"
        )
    if not is_address(address):
        raise InvalidInput(
            f"Invalid {param_name}: {address} is not a valid Ethereum address"
        )
    return to_checksum_address(address)


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two addresses regardless of checksum casing."""
    if not a or not b:
        return False
    if not (is_address(a) and is_address(b)):
        return False
    return to_checksum_address(a) == to_checksum_address(b)


def check_u64(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= U64_MAX:
        raise InvalidInput(f"{name} out of u64 range: {value}")
    return value


def check_u256(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= U256_MAX:
        raise InvalidInput(f"{name} out of u256 range: {value}")
    return value


def validate_u256_hex(hex_str: str) -> str:
    """Check that a string is a 0x-prefixed hex number of at most 256 bits.

    Shorter values are accepted; they are small numbers, not truncated ones.
    """
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        raise InvalidInput(f"Invalid u256 hex: {hex_str!r}")

    digits = hex_str[2:]
    if not digits or not all(c in string.hexdigits for c in digits):
        raise InvalidInput(f"Invalid u256 hex: {hex_str!r}")
    if len(digits) > 64:
        raise InvalidInput(f"Invalid u256 hex: {hex_str!r}")

    return hex_str


def u256_from_hex(hex_str: str) -> int:
    return int(validate_u256_hex(hex_str), 16)


def parse_u64(raw: str) -> int:
    """argparse type for u64 values; accepts decimal or 0x-hex."""
    try:
        value = int(raw, 0)
    except ValueError:
        raise InvalidInput(f"Not an integer: {raw!r}")
    return check_u64(value, "value")
