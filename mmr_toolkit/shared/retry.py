"""
Retry policy for the edges of the toolkit.

The store and the gateway never retry: a rejected update is final. Retries
happen only where a call crosses the network, namely the L1 block fetch
and the proof submitter, and only for the exception types a policy lists.
"""

import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from web3.exceptions import Web3Exception

from mmr_toolkit.shared.exceptions import RetryableException
from mmr_toolkit.shared.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

OnRetry = Callable[[Exception, int], None]

DEFAULT_RETRYABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    RetryableException,  # VerifierRPCException and friends
    ConnectionError,
    TimeoutError,
    OSError,
    Web3Exception,  # JSON-RPC errors such as rate limits
)


@dataclass(frozen=True)
class RetryConfig:
    """
    How many times to try an operation and how long to wait in between.

    Attempt n (0-based) that fails is followed by a sleep of
    base_delay * 2**n when exponential, else base_delay, capped at
    max_delay. No sleep follows the last attempt.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential: bool = True
    retryable_exceptions: Tuple[Type[Exception], ...] = (
        DEFAULT_RETRYABLE_EXCEPTIONS
    )

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay(self, attempt: int) -> float:
        if not self.exponential:
            return self.base_delay
        return min(self.base_delay * (2**attempt), self.max_delay)

    def run(
        self,
        operation: Callable[..., T],
        *args: Any,
        operation_name: Optional[str] = None,
        on_retry: Optional[OnRetry] = None,
        **kwargs: Any,
    ) -> T:
        """Call operation until it succeeds or the attempts run out.

        Exceptions outside retryable_exceptions propagate at once; after
        the last attempt the final retryable exception is re-raised.
        """
        name = operation_name or getattr(operation, "__name__", "operation")

        for attempt in range(self.max_attempts):
            try:
                return operation(*args, **kwargs)
            except self.retryable_exceptions as e:
                if attempt == self.max_attempts - 1:
                    raise

                delay = self.delay(attempt)
                logger.warning(
                    f"{name} failed (attempt {attempt + 1}/"
                    f"{self.max_attempts}): {e}; retrying in {delay:.1f}s"
                )
                if on_retry:
                    on_retry(e, attempt + 1)
                time.sleep(delay)

        raise AssertionError("unreachable")

    def decorate(
        self, func: Callable[..., T], on_retry: Optional[OnRetry] = None
    ) -> Callable[..., T]:
        """Wrap func so every call runs under this policy."""

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return self.run(
                func,
                *args,
                operation_name=func.__name__,
                on_retry=on_retry,
                **kwargs,
            )

        return wrapper


def retry_sync(
    on_retry: Optional[OnRetry] = None, **policy: Any
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator form of RetryConfig.

    Example:
        @retry_sync(max_attempts=3, base_delay=0.5)
        def fetch_finalized_block():
            ...
    """
    config = RetryConfig(**policy)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        return config.decorate(func, on_retry=on_retry)

    return decorator


def retry_sync_operation(
    operation: Callable[..., T],
    *args: Any,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential: bool = True,
    retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    operation_name: Optional[str] = None,
    on_retry: Optional[OnRetry] = None,
    **kwargs: Any,
) -> T:
    """Run a single call under an ad hoc policy."""
    config = RetryConfig(
        max_attempts=max_attempts,
        base_delay=base_delay,
        max_delay=max_delay,
        exponential=exponential,
        retryable_exceptions=(
            retryable_exceptions or DEFAULT_RETRYABLE_EXCEPTIONS
        ),
    )
    return config.run(
        operation,
        *args,
        operation_name=operation_name,
        on_retry=on_retry,
        **kwargs,
    )


# L1 JSON-RPC reads
RPC_RETRY_CONFIG = RetryConfig(max_attempts=3, base_delay=1.0, max_delay=10.0)
