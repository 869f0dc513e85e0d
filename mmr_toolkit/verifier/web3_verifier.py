"""
Groth16/BN254 verification through an on-chain verifier contract.

Implements the ProofVerifier protocol by calling the contract's
verifyGroth16ProofBn254 view function over JSON-RPC.
"""

from typing import Optional, Sequence

from web3.exceptions import ContractLogicError, Web3Exception

from mmr_toolkit.shared.exceptions import VerifierRPCException
from mmr_toolkit.shared.logging import get_logger
from mmr_toolkit.shared.services.web3_service import Web3Service
from mmr_toolkit.utils.validation import check_u256, validate_eth_address

_logger = get_logger(__name__)

GROTH16_VERIFIER_ABI = "groth16_verifier"


class Web3Groth16Verifier:
    """Proof verification capability backed by a deployed verifier contract"""

    def __init__(self, web3_service: Web3Service, contract_address: str):
        self.web3_service = web3_service
        self.contract_address = validate_eth_address(
            contract_address, "verifier contract"
        )

    def verify_groth16_proof_bn254(
        self, full_proof_with_hints: Sequence[int]
    ) -> Optional[bytes]:
        calldata = [
            check_u256(value, f"proof[{i}]")
            for i, value in enumerate(full_proof_with_hints)
        ]
        contract = self.web3_service.get_contract(
            self.contract_address, GROTH16_VERIFIER_ABI
        )

        try:
            valid, journal = contract.functions.verifyGroth16ProofBn254(
                calldata
            ).call()
        except ContractLogicError as e:
            # A revert is the contract refusing the proof
            _logger.info(f"Verifier contract rejected proof: {e}")
            return None
        except (Web3Exception, ConnectionError, TimeoutError) as e:
            raise VerifierRPCException(
                f"RPC call to verifier {self.contract_address} failed: {e}"
            ) from e

        if not valid:
            return None
        return bytes(journal)
