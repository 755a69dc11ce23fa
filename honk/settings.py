from dataclasses import dataclass


@dataclass(frozen=True)
class StandardSettings:
    """
    Parameters shared by the circuit constructor, indexer, prover and verifier.

    Attributes:
        minimum_circuit_size: Lower bound on the padded circuit size (at least
            one sumcheck round and one Gemini fold)
        transcript_label: Domain separator for the Fiat-Shamir transcript
    """

    minimum_circuit_size: int = 2
    transcript_label: str = "honk"

    def __post_init__(self):
        size = self.minimum_circuit_size
        if size < 2 or size & (size - 1):
            raise ValueError(f"minimum_circuit_size must be a power of two >= 2, got {size}")


STANDARD_SETTINGS = StandardSettings()
