"""L1 reference blockhash relay"""

from typing import Any, Dict, Union

import rlp
from hexbytes import HexBytes
from web3 import Web3

from mmr_toolkit.shared.exceptions import BlockHashMismatch
from mmr_toolkit.shared.logging import get_logger
from mmr_toolkit.shared.retry import RPC_RETRY_CONFIG
from mmr_toolkit.shared.services.web3_service import Web3Service
from mmr_toolkit.store.service import MMRStore
from mmr_toolkit.store.types import BlockhashRecord

_logger = get_logger(__name__)

BLOCK_HEADER = (
    "parentHash",
    "sha3Uncles",
    "miner",
    "stateRoot",
    "transactionsRoot",
    "receiptsRoot",
    "logsBloom",
    "difficulty",
    "number",
    "gasLimit",
    "gasUsed",
    "timestamp",
    "extraData",
    "mixHash",
    "nonce",
    "baseFeePerGas",
    "withdrawalsRoot",
    "blobGasUsed",
    "excessBlobGas",
    "parentBeaconBlockRoot",
    "requestsHash",
)


def encode_block_header(block: Dict[str, Any]) -> bytes:
    """Encode a block header -> RLP encoded"""
    block_header = [
        (
            HexBytes("0x")
            if isinstance(block.get(k), int) and block.get(k) == 0
            else HexBytes(block.get(k))
        )
        for k in BLOCK_HEADER
        if k in block
    ]
    return rlp.encode(block_header)


def compute_block_hash(block: Dict[str, Any]) -> HexBytes:
    """keccak256 of the RLP-encoded header"""
    return HexBytes(Web3.keccak(encode_block_header(block)))


def fetch_l1_blockhash(
    web3_service: Web3Service,
    block_identifier: Union[int, str] = "finalized",
    verify_header: bool = True,
) -> BlockhashRecord:
    """Fetch a block and return its number and hash.

    With verify_header, the reported hash must equal the hash recomputed
    from the header fields, otherwise BlockHashMismatch is raised.
    """
    block = RPC_RETRY_CONFIG.run(
        web3_service.get_block,
        block_identifier,
        operation_name=f"get_block_{block_identifier}",
    )
    reported = HexBytes(block["hash"])
    block_number = int(block["number"])

    if verify_header:
        computed = compute_block_hash(block)
        if computed != reported:
            raise BlockHashMismatch(
                block_number, reported.to_0x_hex(), computed.to_0x_hex()
            )

    return BlockhashRecord(
        block_number=block_number,
        blockhash=int.from_bytes(reported, "big"),
    )


def relay_latest_blockhash(
    store: MMRStore,
    web3_service: Web3Service,
    block_identifier: Union[int, str] = "finalized",
    verify_header: bool = True,
) -> BlockhashRecord:
    """Fetch an L1 blockhash and record it in the store."""
    record = fetch_l1_blockhash(web3_service, block_identifier, verify_header)
    store.store_latest_blockhash_from_l1(record.block_number, record.blockhash)

    _logger.info(
        f"Relayed L1 blockhash for block {record.block_number}: "
        f"{'0x%064x' % record.blockhash}"
    )
    return record
