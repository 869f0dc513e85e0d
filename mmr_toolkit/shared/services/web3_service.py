"""
L1 JSON-RPC access.

One Web3Service per chain id is shared by the blockhash relay and the
contract-backed proof verifier.
"""

from typing import Any, Dict, Tuple, Union

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from mmr_toolkit.shared.constants import GlobalConstants
from mmr_toolkit.shared.services.resource_manager import resource_manager

BlockIdentifier = Union[int, str]

_instances: Dict[int, "Web3Service"] = {}


class Web3Service:
    """Web3 client for one chain, with block and contract caches"""

    def __init__(self, chain_id: int, rpc_url: str):
        self.chain_id = chain_id
        self.w3 = Web3(Web3.HTTPProvider(rpc_url))
        if chain_id != 1:
            # Testnets and dev chains may carry PoA extraData
            self.w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        self._blocks: Dict[int, Dict[str, Any]] = {}
        self._contracts: Dict[Tuple[str, str], Any] = {}

    @classmethod
    def get_instance(cls, chain_id: int) -> "Web3Service":
        """Shared service for a chain, using the configured RPC URL."""
        if chain_id not in _instances:
            _instances[chain_id] = cls(
                chain_id, GlobalConstants.get_rpc_url(chain_id)
            )
        return _instances[chain_id]

    def get_block(self, block_identifier: BlockIdentifier) -> Dict[str, Any]:
        # Tags such as "finalized" move, so only numbered blocks are cached
        if not isinstance(block_identifier, int):
            return self.w3.eth.get_block(block_identifier)

        block = self._blocks.get(block_identifier)
        if block is None:
            block = self.w3.eth.get_block(block_identifier)
            self._blocks[block_identifier] = block
        return block

    def get_contract(self, address: str, abi_name: str) -> Any:
        checksum = Web3.to_checksum_address(address)
        key = (checksum, abi_name)
        if key not in self._contracts:
            self._contracts[key] = self.w3.eth.contract(
                address=checksum, abi=resource_manager.load_abi(abi_name)
            )
        return self._contracts[key]
