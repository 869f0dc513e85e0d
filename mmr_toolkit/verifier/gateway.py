"""
Verifier gateway.

The only component allowed to drive MMR updates on the store. It hands the
proof to the external verification capability, decodes the journal the
capability returns and forwards the claimed batch update to the store, all
inside one store transaction.
"""

from typing import Sequence

from mmr_toolkit.shared.constants import GlobalConstants
from mmr_toolkit.shared.exceptions import (
    ProofVerificationFailed,
    ProofVerifierUnavailable,
    RetryableException,
)
from mmr_toolkit.shared.logging import get_logger
from mmr_toolkit.store.events import EventLog, MmrProofVerified
from mmr_toolkit.store.types import Journal
from mmr_toolkit.utils.validation import validate_eth_address
from mmr_toolkit.verifier.interfaces import MMRStateStore, ProofVerifier
from mmr_toolkit.verifier.journal import decode_journal

_logger = get_logger(__name__)


class VerifierGateway:
    """Bridges proof verification into proof-gated store updates.

    Args:
        address: Identity the gateway presents to the store; must match the
            store's registered verifier address
        store: Store to update
        verifier: External proof verification capability
        event_log: Log for MmrProofVerified events (normally the store's)
    """

    def __init__(
        self,
        address: str,
        store: MMRStateStore,
        verifier: ProofVerifier,
        event_log: EventLog,
    ):
        self.address = validate_eth_address(address, "gateway address")
        self._store = store
        self._verifier = verifier
        self._events = event_log

    def verify_mmr_proof(self, proof: Sequence[int], ipfs_hash: str) -> bool:
        """Verify a proof and apply the MMR update it attests to.

        Args:
            proof: Framing element followed by the Groth16 calldata
            ipfs_hash: Reference to the off-chain batch data, passed through

        Returns:
            True. Every other outcome raises.

        Raises:
            ProofVerificationFailed: proof rejected or the verifier errored
            JournalDecodeFailed: verifier output does not decode
            MMRStateException: the store rejected the update
        """
        with self._store.transaction():
            journal = self._verify(proof)

            self._store.update_mmr_state(
                self.address,
                journal.batch_index,
                journal.latest_mmr_block,
                journal.leaves_count,
                journal.root_hash,
            )

            self._events.emit(
                MmrProofVerified(
                    batch_index=journal.batch_index,
                    latest_mmr_block=journal.latest_mmr_block,
                    new_leaves_count=journal.leaves_count,
                    new_mmr_root=journal.root_hash,
                    ipfs_hash=ipfs_hash,
                )
            )

        _logger.info(
            f"MMR proof accepted for batch {journal.batch_index} "
            f"(block {journal.latest_mmr_block}, ipfs {ipfs_hash})"
        )
        return True

    def _verify(self, proof: Sequence[int]) -> Journal:
        if len(proof) <= GlobalConstants.PROOF_FRAMING_ELEMENTS:
            raise ProofVerificationFailed("Proof is empty")

        calldata = list(proof[GlobalConstants.PROOF_FRAMING_ELEMENTS :])
        _logger.debug(f"Verifying proof with {len(calldata)} elements")

        try:
            output = self._verifier.verify_groth16_proof_bn254(calldata)
        except ProofVerificationFailed:
            raise
        except RetryableException as e:
            raise ProofVerifierUnavailable(
                f"Proof verifier unavailable: {e}"
            ) from e
        except Exception as e:
            raise ProofVerificationFailed(
                f"Proof verification errored: {e}"
            ) from e

        if output is None:
            raise ProofVerificationFailed("Proof rejected by verifier")

        return decode_journal(output)
