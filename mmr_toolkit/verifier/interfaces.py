"""
Collaborator interfaces for the verifier gateway.

Both are structural protocols, so tests can hand in plain fakes.
"""

from typing import ContextManager, Optional, Protocol, Sequence


class ProofVerifier(Protocol):
    """External Groth16/BN254 proof verification capability."""

    def verify_groth16_proof_bn254(
        self, full_proof_with_hints: Sequence[int]
    ) -> Optional[bytes]:
        """Return the journal bytes of a valid proof, or None if rejected.

        Errors reaching the verifier are raised, never reported as None.
        """
        ...


class MMRStateStore(Protocol):
    """Store surface the gateway drives."""

    def update_mmr_state(
        self,
        caller: str,
        batch_index: int,
        latest_mmr_block: int,
        leaves_count: int,
        mmr_root: int,
    ) -> None: ...

    def transaction(self) -> ContextManager[None]: ...
