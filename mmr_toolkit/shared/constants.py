"""All constants and environment configuration for the project"""

import os
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from mmr_toolkit.shared.exceptions import ConfigurationException

load_dotenv()

T = TypeVar("T")

U64_MAX = 2**64 - 1
U256_MAX = 2**256 - 1


def get_env_var(key: str) -> str:
    """Read an environment variable, failing if it is unset or empty."""
    value = os.getenv(key)
    if not value:
        raise ConfigurationException(f"Environment variable {key} not set")
    return value


def get_var(
    key: str, parse: Callable[[str], T] = int, default: Optional[T] = None
) -> T:
    """Read and parse an environment variable.

    When a default is given, an unset variable yields the default instead
    of raising. A set but unparseable value always raises.
    """
    raw = os.getenv(key)
    if not raw:
        if default is not None:
            return default
        raise ConfigurationException(f"Environment variable {key} not set")
    try:
        return parse(raw)
    except ValueError as e:
        raise ConfigurationException(
            f"Unable to parse {key} environment variable: {e}"
        ) from e


class GlobalConstants:
    """Global class constants for the project"""

    DEFAULT_BATCH_SIZE = 1024
    DEFAULT_MIN_UPDATE_INTERVAL = 0
    DEFAULT_STATE_FILE = "mmr_state.json"

    # First proof element is a framing marker, not part of the Groth16 calldata
    PROOF_FRAMING_ELEMENTS = 1

    CHAIN_ID_TO_RPC = {
        1: os.getenv("ETHEREUM_MAINNET_RPC_URL") or None,
        11155111: os.getenv("ETHEREUM_SEPOLIA_RPC_URL") or None,
        17000: os.getenv("ETHEREUM_HOLESKY_RPC_URL") or None,
    }

    @staticmethod
    def get_rpc_url(chain_id: int) -> str:
        """Get RPC URL for specified chain"""
        chain_id = int(chain_id)
        if chain_id not in GlobalConstants.CHAIN_ID_TO_RPC:
            raise ConfigurationException(f"Chain ID {chain_id} not supported")

        rpc_url = GlobalConstants.CHAIN_ID_TO_RPC[chain_id]
        if not rpc_url:
            raise ConfigurationException(f"RPC URL not set for chain {chain_id}")

        return rpc_url

    @staticmethod
    def get_groth16_verifier_address() -> str:
        return get_env_var("GROTH16_VERIFIER_ADDRESS")

    @staticmethod
    def get_mmr_verifier_address() -> str:
        return get_env_var("MMR_VERIFIER_ADDRESS")

    @staticmethod
    def get_min_update_interval() -> int:
        return get_var(
            "MMR_MIN_UPDATE_INTERVAL",
            int,
            GlobalConstants.DEFAULT_MIN_UPDATE_INTERVAL,
        )

    @staticmethod
    def get_batch_size() -> int:
        return get_var(
            "MMR_BATCH_SIZE", int, GlobalConstants.DEFAULT_BATCH_SIZE
        )

    @staticmethod
    def get_state_file() -> str:
        return os.getenv("MMR_STATE_FILE") or GlobalConstants.DEFAULT_STATE_FILE
