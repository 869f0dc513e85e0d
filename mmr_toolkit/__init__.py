"""MMR Toolkit - proof-gated Merkle Mountain Range commitments to L1 history."""

__version__ = "0.1.0"

from .store import GlobalState, MMRStore
from .verifier import MMRProofSubmitter, VerifierGateway

__all__ = ["MMRStore", "GlobalState", "VerifierGateway", "MMRProofSubmitter"]
