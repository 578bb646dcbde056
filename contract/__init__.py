"""Contract testing helpers: interception/recording on the consumer side, replay on the provider side."""

from contract.pact import Interaction, PactMock
from contract.verifier import VerificationResult, load_pact, verify_pact

__all__ = ["Interaction", "PactMock", "VerificationResult", "load_pact", "verify_pact"]
