"""
Proof submission with an explicit retry policy.

The gateway itself never retries. The submitter sits in front of it, retries
only when the verifier could not be reached (the call aborted before any
state changed) and reports every outcome as a Result.
"""

from typing import Iterable, Sequence, Tuple

from mmr_toolkit.shared.exceptions import ProofVerifierUnavailable
from mmr_toolkit.shared.logging import get_logger
from mmr_toolkit.shared.results import (
    ErrorSeverity,
    ProcessingError,
    Result,
    SubmissionSummary,
)
from mmr_toolkit.shared.retry import retry_sync_operation
from mmr_toolkit.verifier.gateway import VerifierGateway

_logger = get_logger(__name__)


class MMRProofSubmitter:
    """Submits MMR proofs to a gateway and collects outcomes"""

    def __init__(
        self,
        gateway: VerifierGateway,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ):
        self.gateway = gateway
        self.max_retries = max_retries
        self.base_delay = base_delay

    def submit(self, proof: Sequence[int], ipfs_hash: str) -> Result[bool]:
        """
        Submit one proof.

        Args:
            proof: Framed proof payload
            ipfs_hash: Off-chain data reference recorded with the update

        Returns:
            Result[bool]: ok(True) once the update is committed, or failure
        """
        attempts = {"count": 0}

        def _submit() -> bool:
            attempts["count"] += 1
            return self.gateway.verify_mmr_proof(proof, ipfs_hash)

        try:
            accepted = retry_sync_operation(
                _submit,
                max_attempts=self.max_retries,
                base_delay=self.base_delay,
                retryable_exceptions=(ProofVerifierUnavailable,),
                operation_name=f"verify_mmr_proof_{ipfs_hash[:16]}",
            )
        except Exception as e:
            _logger.error(f"Proof submission failed: {e}")
            return Result.fail(
                ProcessingError(
                    source="submit_proof",
                    message=f"Error submitting MMR proof: {str(e)}",
                    severity=ErrorSeverity.ERROR,
                    context={
                        "ipfs_hash": ipfs_hash,
                        "attempts": attempts["count"],
                    },
                    exception=e,
                )
            )

        result = Result.ok(accepted)
        if attempts["count"] > 1:
            result.add_warning(
                source="submit_proof",
                message=f"Proof accepted after {attempts['count']} attempts",
                context={"ipfs_hash": ipfs_hash},
            )
        return result

    def submit_many(
        self, submissions: Iterable[Tuple[Sequence[int], str]]
    ) -> SubmissionSummary:
        """Submit proofs in order, continuing past failures."""
        summary = SubmissionSummary()
        for proof, ipfs_hash in submissions:
            result = self.submit(proof, ipfs_hash)
            summary.attempts += 1
            summary.record(result)
        return summary
