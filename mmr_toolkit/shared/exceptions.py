"""
Exception hierarchy for the MMR toolkit.

Exception Categories:
- RetryableException: Transient failures that may succeed on retry (RPC, network)
- NonRetryableException: Permanent failures that won't benefit from retry (bad data)
- ConfigurationException: Startup/config errors that prevent operation

Every state transition failure is non-retryable: a rejected update leaves the
store untouched and resubmitting the same input yields the same rejection.
The only retryable branch is transport trouble while reaching the proof
verification capability.
"""

from typing import Optional


class RetryableException(Exception):
    """
    Base class for exceptions that may succeed on retry.

    Use for transient failures like:
    - RPC timeouts
    - Rate limiting
    - Temporary network issues
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonRetryableException(Exception):
    """
    Base class for exceptions that won't benefit from retry.

    Use for permanent failures like:
    - Invalid input data
    - Rejected proofs
    - State transition violations
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationException(NonRetryableException):
    """
    Exception for configuration/startup errors.

    Use when:
    - Required environment variables are missing
    - Invalid configuration values
    - Missing required resources
    """

    pass


class InvalidInput(NonRetryableException, ValueError):
    """A value is outside its declared range or is malformed."""

    pass


# =============================================================================
# STORE ERRORS
# =============================================================================


class MMRStateException(NonRetryableException):
    """Base class for rejected store mutations."""

    pass


class AlreadyInitialized(MMRStateException):
    def __init__(self):
        super().__init__("Store is already initialized")


class Unauthorized(MMRStateException):
    """Caller is not the registered verifier."""

    def __init__(self, caller: str, expected: Optional[str]):
        super().__init__(
            f"Caller {caller} is not authorized (verifier: {expected})"
        )
        self.caller = caller
        self.expected = expected


class IntervalTooSmall(MMRStateException):
    """New MMR block is too close to the previous one."""

    def __init__(
        self,
        latest_mmr_block: int,
        current_mmr_block: int,
        min_update_interval: int,
        message: Optional[str] = None,
    ):
        super().__init__(
            message
            or (
                f"Update interval {latest_mmr_block - current_mmr_block} "
                f"is below the minimum of {min_update_interval} blocks"
            )
        )
        self.latest_mmr_block = latest_mmr_block
        self.current_mmr_block = current_mmr_block
        self.min_update_interval = min_update_interval


class BlockNotIncreasing(IntervalTooSmall):
    """New MMR block is not strictly above the stored high-water mark."""

    def __init__(
        self,
        latest_mmr_block: int,
        current_mmr_block: int,
        min_update_interval: int,
    ):
        super().__init__(
            latest_mmr_block,
            current_mmr_block,
            min_update_interval,
            message=(
                f"MMR block {latest_mmr_block} is not greater than the "
                f"current MMR block {current_mmr_block}"
            ),
        )


class InvalidMmrRoot(MMRStateException):
    """A locally computed root disagrees with the committed snapshot."""

    def __init__(self, batch_index: int, expected: int, actual: int):
        super().__init__(
            f"MMR root mismatch for batch {batch_index}: "
            f"committed {hex(expected)}, local {hex(actual)}"
        )
        self.batch_index = batch_index
        self.expected = expected
        self.actual = actual


# =============================================================================
# PROOF ERRORS
# =============================================================================


class ProofVerificationFailed(NonRetryableException):
    """The proof verification capability rejected the proof or errored."""

    pass


class ProofVerifierUnavailable(ProofVerificationFailed):
    """
    The verification capability could not be reached.

    Still a verification failure for the call that hit it, but the proof
    itself was never judged, so a submitter may try again.
    """

    pass


class JournalDecodeFailed(NonRetryableException):
    """Verifier output does not match the journal layout."""

    pass


class BlockHashMismatch(NonRetryableException):
    """Block hash reported by the RPC does not hash from its header."""

    def __init__(self, block_number: int, reported: str, computed: str):
        super().__init__(
            f"Block {block_number}: reported hash {reported} "
            f"does not match header hash {computed}"
        )
        self.block_number = block_number
        self.reported = reported
        self.computed = computed


class VerifierRPCException(RetryableException):
    """
    Exception for RPC failures while calling the on-chain verifier.

    Inherits from RetryableException because RPC failures are often
    transient (rate limits, timeouts).
    """

    pass
