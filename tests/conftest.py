"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

from typing import List, Optional, Sequence

import pytest

from mmr_toolkit.store.service import MMRStore
from mmr_toolkit.store.types import Journal
from mmr_toolkit.verifier.gateway import VerifierGateway
from mmr_toolkit.verifier.journal import encode_journal

PROOF_MARKER = 0x0


class FakeProofVerifier:
    """In-memory stand-in for the Groth16 verification capability.

    Returns `output` for every proof, or raises `error` when set.
    """

    def __init__(
        self,
        output: Optional[bytes] = None,
        error: Optional[Exception] = None,
    ):
        self.output = output
        self.error = error
        self.calls: List[List[int]] = []

    def accept(self, journal: Journal) -> "FakeProofVerifier":
        self.output = encode_journal(journal)
        self.error = None
        return self

    def verify_groth16_proof_bn254(
        self, full_proof_with_hints: Sequence[int]
    ) -> Optional[bytes]:
        self.calls.append(list(full_proof_with_hints))
        if self.error is not None:
            raise self.error
        return self.output


def make_proof(*elements: int) -> List[int]:
    """Framed proof: marker element followed by the calldata."""
    return [PROOF_MARKER, *(elements or (0x1111, 0x2222, 0x3333))]


@pytest.fixture
def verifier_address() -> str:
    """Address registered as the store's verifier."""
    return "0x52f541764E6e90eeBc5c21Ff570De0e2D63766B6"


@pytest.fixture
def other_address() -> str:
    """Address that is not the verifier."""
    return "0x7E1444BA99dcdFfE8fBdb42C02fb0DA4AAAcE4d5"


@pytest.fixture
def store() -> MMRStore:
    return MMRStore()


@pytest.fixture
def initialized_store(store: MMRStore, verifier_address: str) -> MMRStore:
    store.initialize(verifier_address, 10)
    return store


@pytest.fixture
def sample_journal() -> Journal:
    return Journal(
        batch_index=1,
        latest_mmr_block=10,
        leaves_count=5,
        root_hash=0xABC,
    )


@pytest.fixture
def fake_verifier(sample_journal: Journal) -> FakeProofVerifier:
    return FakeProofVerifier().accept(sample_journal)


@pytest.fixture
def gateway(
    initialized_store: MMRStore,
    verifier_address: str,
    fake_verifier: FakeProofVerifier,
) -> VerifierGateway:
    return VerifierGateway(
        verifier_address,
        initialized_store,
        fake_verifier,
        initialized_store.event_log,
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line("markers", "slow: mark test as slow-running")
