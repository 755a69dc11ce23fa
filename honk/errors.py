class CircuitError(ValueError):
    """Raised when a gate or equality assertion references invalid data."""


class PermutationError(Exception):
    """Raised when the compiled copy-constraint permutation is malformed."""


class VerificationError(Exception):
    """Raised on degenerate verifier arithmetic; the proof is rejected."""
