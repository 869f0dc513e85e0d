"""
Unit tests for the verifier gateway.

Every failure path must leave the store exactly as it was: no batch
written, no MMR block advanced, no event emitted.
"""

import pytest

from mmr_toolkit.shared.exceptions import (
    IntervalTooSmall,
    InvalidInput,
    JournalDecodeFailed,
    ProofVerificationFailed,
    ProofVerifierUnavailable,
    Unauthorized,
    VerifierRPCException,
)
from mmr_toolkit.store.events import EventLog, MmrProofVerified, MmrStateUpdated
from mmr_toolkit.store.service import MMRStore
from mmr_toolkit.store.types import Journal, MMRSnapshot
from mmr_toolkit.verifier.gateway import VerifierGateway
from tests.conftest import FakeProofVerifier, make_proof


def assert_untouched(store: MMRStore) -> None:
    assert store.get_latest_mmr_block() == 0
    assert store.state.mmr_batches == {}
    assert len(store.event_log) == 0


class TestVerifyMmrProofSuccess:
    def test_returns_true_and_commits(self, gateway, initialized_store):
        assert gateway.verify_mmr_proof(make_proof(), "QmBatch1") is True

        assert initialized_store.get_mmr_state(1) == MMRSnapshot(1, 0xABC, 5)
        assert initialized_store.get_latest_mmr_block() == 10

    def test_emits_store_then_gateway_event(self, gateway, initialized_store):
        gateway.verify_mmr_proof(make_proof(), "QmBatch1")

        assert initialized_store.event_log.events() == [
            MmrStateUpdated(batch_index=1, leaves_count=5, root_hash=0xABC),
            MmrProofVerified(
                batch_index=1,
                latest_mmr_block=10,
                new_leaves_count=5,
                new_mmr_root=0xABC,
                ipfs_hash="QmBatch1",
            ),
        ]

    def test_framing_element_is_stripped(self, gateway, fake_verifier):
        gateway.verify_mmr_proof([0xFF, 1, 2, 3], "QmBatch1")
        assert fake_verifier.calls == [[1, 2, 3]]

    def test_ipfs_hash_is_not_validated(self, gateway, initialized_store):
        gateway.verify_mmr_proof(make_proof(), "")
        event = initialized_store.event_log.events(MmrProofVerified)[0]
        assert event.ipfs_hash == ""

    def test_sequential_proofs(
        self, gateway, fake_verifier, initialized_store
    ):
        gateway.verify_mmr_proof(make_proof(), "QmBatch1")
        fake_verifier.accept(Journal(2, 30, 1024, 0xDEF))
        gateway.verify_mmr_proof(make_proof(), "QmBatch2")

        assert initialized_store.get_latest_mmr_block() == 30
        assert initialized_store.get_mmr_state(2).leaves_count == 1024
        assert initialized_store.get_mmr_state(1).root_hash == 0xABC


class TestVerifyMmrProofRejection:
    def test_rejected_proof(self, gateway, fake_verifier, initialized_store):
        fake_verifier.output = None

        with pytest.raises(ProofVerificationFailed, match="rejected"):
            gateway.verify_mmr_proof(make_proof(), "QmBatch1")

        assert_untouched(initialized_store)

    def test_verifier_error_becomes_verification_failure(
        self, gateway, fake_verifier, initialized_store
    ):
        fake_verifier.error = InvalidInput("proof[3] out of u256 range")

        with pytest.raises(ProofVerificationFailed) as exc_info:
            gateway.verify_mmr_proof(make_proof(), "QmBatch1")

        assert not isinstance(exc_info.value, ProofVerifierUnavailable)
        assert isinstance(exc_info.value.__cause__, InvalidInput)
        assert_untouched(initialized_store)

    def test_transport_error_is_marked_unavailable(
        self, gateway, fake_verifier, initialized_store
    ):
        fake_verifier.error = VerifierRPCException("timeout")

        with pytest.raises(ProofVerifierUnavailable):
            gateway.verify_mmr_proof(make_proof(), "QmBatch1")

        assert_untouched(initialized_store)

    def test_empty_proof(self, gateway, fake_verifier, initialized_store):
        with pytest.raises(ProofVerificationFailed, match="empty"):
            gateway.verify_mmr_proof([], "QmBatch1")
        with pytest.raises(ProofVerificationFailed, match="empty"):
            gateway.verify_mmr_proof([0x0], "QmBatch1")

        assert fake_verifier.calls == []
        assert_untouched(initialized_store)

    def test_malformed_journal(self, gateway, fake_verifier, initialized_store):
        fake_verifier.output = b"\x01\x02\x03"

        with pytest.raises(JournalDecodeFailed):
            gateway.verify_mmr_proof(make_proof(), "QmBatch1")

        assert_untouched(initialized_store)


class TestVerifyMmrProofStoreFailures:
    def test_store_interval_error_propagates(
        self, gateway, fake_verifier, initialized_store
    ):
        gateway.verify_mmr_proof(make_proof(), "QmBatch1")
        fake_verifier.accept(Journal(2, 15, 3, 0xDEF))

        with pytest.raises(IntervalTooSmall):
            gateway.verify_mmr_proof(make_proof(), "QmBatch2")

        assert initialized_store.get_latest_mmr_block() == 10
        assert initialized_store.get_mmr_state(2).leaves_count == 0
        assert len(initialized_store.event_log.events(MmrProofVerified)) == 1

    def test_gateway_not_registered_as_verifier(
        self, initialized_store, other_address, fake_verifier
    ):
        gateway = VerifierGateway(
            other_address,
            initialized_store,
            fake_verifier,
            initialized_store.event_log,
        )

        with pytest.raises(Unauthorized):
            gateway.verify_mmr_proof(make_proof(), "QmBatch1")

        assert_untouched(initialized_store)

    def test_failure_after_store_update_rolls_back(
        self, initialized_store, verifier_address, fake_verifier
    ):
        class FailingLog(EventLog):
            def emit(self, event):
                if isinstance(event, MmrProofVerified):
                    raise RuntimeError("event sink down")
                super().emit(event)

        log = FailingLog()
        store = MMRStore(initialized_store.state, log)
        gateway = VerifierGateway(verifier_address, store, fake_verifier, log)

        with pytest.raises(RuntimeError):
            gateway.verify_mmr_proof(make_proof(), "QmBatch1")

        assert store.get_latest_mmr_block() == 0
        assert store.get_mmr_state(1).leaves_count == 0
        assert len(log) == 0


class TestGatewayConstruction:
    def test_invalid_address(self, initialized_store):
        with pytest.raises(InvalidInput):
            VerifierGateway(
                "0x1234",
                initialized_store,
                FakeProofVerifier(),
                initialized_store.event_log,
            )
