#!/usr/bin/env python3
"""
Honk-SNARK Demo: KZG Commitments and Standard Honk
"""

import logging

import honk
from field import Fr
from kzg import KZG, OpeningClaim, OpeningPair
from transcript import ProverTranscript, VerifierTranscript


def demo_kzg():
    print("=== KZG Polynomial Commitment Demo ===")

    # Initialize and setup
    kzg = KZG()
    ck, rk = kzg.setup(max_degree=10)

    # Commit to 1 + 2X + 3X²
    poly = Fr([1, 2, 3])
    commitment = kzg.commit(ck, [poly])[0]

    # Open at z = 7 through a transcript
    z = Fr(7)
    evaluation, _ = kzg.open(ck, poly, z)
    prover_transcript = ProverTranscript("kzg-demo", Fr)
    kzg.reduce_prove(ck, OpeningPair(z, evaluation), poly, prover_transcript)

    # Verify
    verifier_transcript = VerifierTranscript("kzg-demo", Fr, prover_transcript.export_proof())
    claim = OpeningClaim(OpeningPair(z, evaluation), commitment)
    accumulator = kzg.reduce_verify(claim, verifier_transcript)
    result = kzg.verify(rk, accumulator)
    print(f"KZG verification: {'PASS' if result else 'FAIL'}\n")


def build_demo_circuit():
    """
    Two gates over one public input x:
        a + b - c = 0  with a = 1, b = 1, c = 2
        c · c - d = 0  with d = 4
    and d bound to the public input.
    """
    circuit = honk.CircuitConstructor()
    x = circuit.add_public_variable(4)
    a = circuit.add_variable(1)
    b = circuit.add_variable(1)
    c = circuit.add_variable(2)
    d = circuit.add_variable(4)
    circuit.create_add_gate(a, b, c, 1, 1, -1, 0)
    circuit.create_mul_gate(c, c, d, 1, -1, 0)
    circuit.assert_equal(x, d)
    return circuit


def demo_honk():
    print("=== Standard Honk SNARK Demo ===")

    circuit = build_demo_circuit()
    print(f"Circuit satisfied: {circuit.check_circuit()}")

    # Setup
    pk, vk = honk.compile(circuit)
    honk.compute_witness(circuit, pk)

    # Prove
    proof = honk.prove(pk)
    print(f"Proof size: {len(proof)} bytes")

    # Verify
    result = honk.verify(vk, proof)
    print(f"Honk verification: {'PASS' if result else 'FAIL'}\n")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("Running Honk-SNARK demonstrations...\n")

    try:
        demo_kzg()
    except Exception as e:
        print(f"KZG demo failed: {e}\n")

    try:
        demo_honk()
    except Exception as e:
        print(f"Honk demo failed: {e}\n")

    print("Demo complete!")
