"""End-to-end tests: compile, prove and verify."""

import pytest

import honk
from field import Fr
from honk import CircuitConstructor, Proof, Verifier, batch_verify
from honk.arithmetization import NUM_SELECTORS, PROGRAM_WIDTH


def _add_gate_circuit(a_value):
    circuit = CircuitConstructor()
    a = circuit.add_variable(a_value)
    b = circuit.add_variable(1)
    c = circuit.add_variable(2)
    circuit.create_add_gate(a, b, c, 1, 1, -1, 0)
    return circuit


def _compile_and_prove(circuit, tau):
    pk, vk = honk.compile(circuit, tau=tau)
    honk.compute_witness(circuit, pk)
    return pk, vk, honk.prove(pk)


@pytest.fixture(scope="module")
def satisfied(tau):
    """1 + 1 - 2 = 0."""
    return _compile_and_prove(_add_gate_circuit(1), tau)


@pytest.fixture(scope="module")
def public_input(tau):
    """One public variable bound to a gate wire, a second gate reusing it."""
    circuit = CircuitConstructor()
    x = circuit.add_public_variable(3)
    a = circuit.add_variable(3)
    b = circuit.add_variable(5)
    c = circuit.add_variable(8)
    d = circuit.add_variable(25)
    circuit.create_add_gate(a, b, c, 1, 1, -1, 0)
    circuit.create_mul_gate(b, b, d, 1, -1, 0)
    circuit.assert_equal(x, a)
    return _compile_and_prove(circuit, tau)


class TestEndToEnd:
    """Scenarios from compiling a circuit to checking its proof."""

    def test_satisfied_circuit_verifies(self, satisfied) -> None:
        """A single add gate with a satisfying witness is accepted."""
        _, vk, proof = satisfied
        assert vk.circuit_size == 2
        assert honk.verify(vk, proof)

    def test_unsatisfied_circuit_rejected(self, tau) -> None:
        """0 + 1 - 2 != 0 is rejected."""
        _, vk, proof = _compile_and_prove(_add_gate_circuit(0), tau)
        assert not honk.verify(vk, proof)

    def test_verification_key_size(self, public_input) -> None:
        """The key holds #selectors + 2·width + 2 commitments."""
        _, vk, _ = public_input
        assert len(vk.commitments) == NUM_SELECTORS + 2 * PROGRAM_WIDTH + 2 == 13
        assert vk.num_public_inputs == 1
        assert vk.circuit_size == 4

    def test_public_input_circuit_verifies(self, public_input) -> None:
        """Public inputs and copy constraints are proven."""
        _, vk, proof = public_input
        assert honk.verify(vk, proof)

    def test_failed_assertion_rejected(self, tau) -> None:
        """A failed equality assertion with a public input leaves an unprovable circuit."""
        circuit = CircuitConstructor()
        x = circuit.add_public_variable(4)
        a = circuit.add_variable(3)
        b = circuit.add_variable(5)
        c = circuit.add_variable(8)
        circuit.create_add_gate(a, b, c, 1, 1, -1, 0)
        circuit.assert_equal(x, a)
        assert circuit.failed

        _, vk, proof = _compile_and_prove(circuit, tau)
        assert not honk.verify(vk, proof)

    @pytest.mark.parametrize("position", [0, 3, 7, 40, 150, 500, -40, -1])
    def test_tampered_byte_rejected(self, satisfied, position) -> None:
        """Flipping bits of any single byte makes verification fail."""
        _, vk, proof = satisfied
        data = bytearray(proof.proof_data)
        data[position] ^= 0x5A
        assert not honk.verify(vk, Proof(bytes(data)))

    def test_truncated_proof_rejected(self, satisfied) -> None:
        """A proof missing its last bytes is rejected."""
        _, vk, proof = satisfied
        assert not honk.verify(vk, Proof(proof.proof_data[:-1]))

    def test_extended_proof_rejected(self, satisfied) -> None:
        """Trailing bytes are rejected."""
        _, vk, proof = satisfied
        assert not honk.verify(vk, Proof(proof.proof_data + b"\x00"))

    def test_wrong_verification_key(self, satisfied, public_input) -> None:
        """A proof does not verify against another circuit's key."""
        _, _, proof = satisfied
        _, other_vk, _ = public_input
        assert not honk.verify(other_vk, proof)

    def test_proof_layout(self, satisfied) -> None:
        """Proof size follows from the circuit size."""
        _, vk, proof = satisfied
        d = 1
        expected = (
            4 + 4                     # sizes
            + 3 * 64 + 64             # wires, grand product
            + d * 6 * 32 + 18 * 32    # sumcheck rounds, evaluations
            + (d - 1) * 64 + d * 32   # Gemini folds and evaluations
            + 64 + 64                 # Shplonk Q, KZG W
        )
        assert len(proof) == expected

    def test_prove_requires_witness(self, tau) -> None:
        """Proving before compute_witness fails."""
        pk, _ = honk.compile(_add_gate_circuit(1), tau=tau)
        with pytest.raises(ValueError):
            honk.prove(pk)

    def test_compute_witness_checks_circuit(self, tau) -> None:
        """A witness from a differently sized circuit is refused."""
        pk, _ = honk.compile(_add_gate_circuit(1), tau=tau)
        other = _add_gate_circuit(1)
        other.add_public_variable(1)
        other.create_bool_gate(other.add_variable(1))
        with pytest.raises(ValueError):
            honk.compute_witness(other, pk)


class TestBatchVerification:
    """Deferred pairing checks over several proofs."""

    def test_reduce_returns_accumulator(self, satisfied) -> None:
        """reduce stops before the pairing."""
        _, vk, proof = satisfied
        assert Verifier(vk).reduce(proof) is not None

    def test_batch_verify(self, satisfied, tau) -> None:
        """Two proofs for the same key verify together."""
        pk, vk, proof = satisfied
        second = honk.prove(pk)
        assert second.proof_data == proof.proof_data
        assert batch_verify(vk, [proof, second])

    def test_batch_verify_rejects_bad_proof(self, satisfied, tau) -> None:
        """One bad proof fails the batch."""
        _, vk, proof = satisfied
        bad = bytearray(proof.proof_data)
        bad[-1] ^= 1
        assert not batch_verify(vk, [proof, Proof(bytes(bad))])

    def test_public_inputs_read_from_proof(self, public_input) -> None:
        """Public inputs sit right after the two size fields."""
        _, _, proof = public_input
        assert Fr(int.from_bytes(proof.proof_data[8:40], "big")) == Fr(3)
