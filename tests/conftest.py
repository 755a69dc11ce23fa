"""
Pytest configuration for the honk-snark tests.
"""

import sys
from pathlib import Path

import pytest

# Make the top-level modules (field, kzg, transcript, main) importable
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from field import Fr  # noqa: E402

# Fixed SRS secret so that keys are reproducible between tests
TEST_TAU = Fr(0x1234567890ABCDEF)


@pytest.fixture(scope="session")
def tau():
    return TEST_TAU


def _build_polynomial_tables(circuit, beta, gamma):
    from honk.encoder import Encoder, compute_public_input_delta
    from honk.polynomials import shifted
    from honk.prover import compute_grand_product_polynomial

    encoder = Encoder()
    encoder.update_state(circuit)
    selectors = encoder.encode_selectors()
    sigmas, ids = encoder.encode_permutation()
    L_first, L_last = encoder.encode_lagrange()
    wires = encoder.encode_witness()
    z_perm = compute_grand_product_polynomial(wires, sigmas, ids, beta, gamma)

    tables = selectors + sigmas + ids + [L_first, L_last] + wires + [z_perm, shifted(z_perm)]
    delta = compute_public_input_delta(circuit.get_public_inputs(), beta, gamma, encoder.n)
    return tables, delta


@pytest.fixture
def polynomial_tables():
    """Factory: (circuit, beta, gamma) -> (18 tables in Polynomial order, public_input_delta)."""
    return _build_polynomial_tables


def _public_input_circuit():
    """
    x (public) = a, a + b - c = 0, b · b - d = 0 with a = 3, b = 5, c = 8, d = 25.
    """
    from honk import CircuitConstructor

    circuit = CircuitConstructor()
    x = circuit.add_public_variable(3)
    a = circuit.add_variable(3)
    b = circuit.add_variable(5)
    c = circuit.add_variable(8)
    d = circuit.add_variable(25)
    circuit.create_add_gate(a, b, c, 1, 1, -1, 0)
    circuit.create_mul_gate(b, b, d, 1, -1, 0)
    circuit.assert_equal(x, a)
    return circuit


@pytest.fixture
def public_input_circuit():
    return _public_input_circuit()
