from mmr_toolkit.verifier.gateway import VerifierGateway
from mmr_toolkit.verifier.interfaces import MMRStateStore, ProofVerifier
from mmr_toolkit.verifier.journal import decode_journal, encode_journal
from mmr_toolkit.verifier.submitter import MMRProofSubmitter

__all__ = [
    "VerifierGateway",
    "MMRProofSubmitter",
    "MMRStateStore",
    "ProofVerifier",
    "decode_journal",
    "encode_journal",
]
