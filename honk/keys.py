from dataclasses import dataclass
from typing import Optional

from honk.arithmetization import NUM_PRECOMPUTED_POLYNOMIALS


@dataclass
class Witness:
    """Wire polynomials (w_1, w_2, w_3) and the public input values they expose."""

    wires: list
    public_inputs: list


@dataclass
class ProvingKey:
    """
    Everything the prover needs.

    Attributes:
        circuit_size: n
        num_public_inputs: Number of public inputs (leading rows)
        polynomials: Precomputed polynomials in Polynomial order (13 tables of length n)
        ck: Commitment key
        witness: Witness filled in by compute_witness
    """

    circuit_size: int
    num_public_inputs: int
    polynomials: list
    ck: list
    witness: Optional[Witness] = None


@dataclass
class VerificationKey:
    """
    Everything the verifier needs.

    Attributes:
        circuit_size: n
        num_public_inputs: Number of public inputs
        commitments: Commitments to the precomputed polynomials, Polynomial order
        rk: τ·G₂
    """

    circuit_size: int
    num_public_inputs: int
    commitments: list
    rk: tuple

    def __post_init__(self):
        if len(self.commitments) != NUM_PRECOMPUTED_POLYNOMIALS:
            raise ValueError(
                f"verification key needs {NUM_PRECOMPUTED_POLYNOMIALS} commitments, got {len(self.commitments)}"
            )


@dataclass
class Proof:
    """Serialized transcript of the prover's messages."""

    proof_data: bytes

    def __len__(self):
        return len(self.proof_data)
