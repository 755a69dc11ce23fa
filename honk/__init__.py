"""
Standard Honk: width-3 PLONK arithmetization proven with sumcheck over the
boolean hypercube and opened with Gemini, Shplonk and KZG on BN254.

Typical use:

    circuit = CircuitConstructor()
    ...  # add variables, gates and equality assertions
    pk, vk = compile(circuit)
    compute_witness(circuit, pk)
    assert verify(vk, prove(pk))
"""

from honk.circuit import CircuitConstructor
from honk.errors import CircuitError, PermutationError, VerificationError
from honk.indexer import Indexer
from honk.keys import Proof, ProvingKey, VerificationKey, Witness
from honk.prover import Prover
from honk.settings import STANDARD_SETTINGS, StandardSettings
from honk.verifier import Verifier, batch_verify


def compile(circuit, tau=None, settings=STANDARD_SETTINGS):
    """Compile a circuit into (ProvingKey, VerificationKey)."""
    return Indexer(settings).preprocess(circuit, tau)


def compute_witness(circuit, proving_key, settings=STANDARD_SETTINGS):
    """Fill the proving key's witness from the circuit's variable values."""
    return Indexer(settings).compute_witness(circuit, proving_key)


def prove(proving_key, witness=None, settings=STANDARD_SETTINGS):
    return Prover(settings).prove(proving_key, witness)


def verify(verification_key, proof, settings=STANDARD_SETTINGS):
    return Verifier(verification_key, settings).verify_proof(proof)


__all__ = [
    "CircuitConstructor",
    "CircuitError",
    "Indexer",
    "PermutationError",
    "Proof",
    "Prover",
    "ProvingKey",
    "STANDARD_SETTINGS",
    "StandardSettings",
    "VerificationError",
    "VerificationKey",
    "Verifier",
    "Witness",
    "batch_verify",
    "compile",
    "compute_witness",
    "prove",
    "verify",
]
