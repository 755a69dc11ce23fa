"""Unit tests for the circuit constructor."""

import pytest

from field import Fr
from honk import CircuitConstructor, CircuitError


class TestCircuitConstructor:
    """Tests for variables, gates and equality assertions."""

    def test_variables_are_indexed(self) -> None:
        """Variables get consecutive indices."""
        circuit = CircuitConstructor()
        assert circuit.add_variable(5) == 0
        assert circuit.add_public_variable(6) == 1
        assert circuit.num_public_inputs == 1
        assert circuit.get_public_inputs() == [Fr(6)]

    def test_negative_values_reduced(self) -> None:
        """Negative integers map into the field."""
        circuit = CircuitConstructor()
        index = circuit.add_variable(-1)
        assert circuit.get_variable(index) + Fr(1) == Fr(0)

    def test_add_gate(self) -> None:
        """1 + 1 - 2 = 0 is satisfied."""
        circuit = CircuitConstructor()
        a, b, c = (circuit.add_variable(v) for v in (1, 1, 2))
        circuit.create_add_gate(a, b, c, 1, 1, -1, 0)
        assert circuit.num_gates == 1
        assert circuit.check_circuit()

    def test_unsatisfied_add_gate(self) -> None:
        """0 + 1 - 2 != 0."""
        circuit = CircuitConstructor()
        a, b, c = (circuit.add_variable(v) for v in (0, 1, 2))
        circuit.create_add_gate(a, b, c, 1, 1, -1, 0)
        assert not circuit.check_circuit()

    def test_mul_gate(self) -> None:
        """3 · 4 - 12 = 0."""
        circuit = CircuitConstructor()
        a, b, c = (circuit.add_variable(v) for v in (3, 4, 12))
        circuit.create_mul_gate(a, b, c, 1, -1, 0)
        assert circuit.check_circuit()

    def test_bool_gate(self) -> None:
        """Only 0 and 1 satisfy the boolean gate."""
        for value, expected in ((0, True), (1, True), (2, False)):
            circuit = CircuitConstructor()
            circuit.create_bool_gate(circuit.add_variable(value))
            assert circuit.check_circuit() == expected

    def test_constant_variable_reused(self) -> None:
        """A constant is materialized once, fixed by one gate."""
        circuit = CircuitConstructor()
        first = circuit.put_constant_variable(9)
        second = circuit.put_constant_variable(9)
        assert first == second
        assert circuit.num_gates == 1
        assert circuit.get_variable(first) == Fr(9)
        assert circuit.check_circuit()

    def test_invalid_index(self) -> None:
        """Gates must reference existing variables."""
        circuit = CircuitConstructor()
        a = circuit.add_variable(1)
        with pytest.raises(CircuitError):
            circuit.create_add_gate(a, a, 5, 1, 1, -1, 0)

    def test_selector_count(self) -> None:
        """Gates take exactly five selector values."""
        circuit = CircuitConstructor()
        a = circuit.add_variable(1)
        with pytest.raises(CircuitError):
            circuit.create_gate((a, a, a), (1, 2, 3))

    def test_assert_equal_merges(self) -> None:
        """Equal variables share a representative."""
        circuit = CircuitConstructor()
        a = circuit.add_variable(4)
        b = circuit.add_variable(4)
        c = circuit.add_variable(4)
        circuit.assert_equal(a, b)
        circuit.assert_equal(c, b)
        assert circuit.real_variable_index(a) == circuit.real_variable_index(c)
        assert not circuit.failed

    def test_assert_equal_mismatch(self) -> None:
        """Asserting different values marks the circuit as failed."""
        circuit = CircuitConstructor()
        a = circuit.add_variable(1)
        b = circuit.add_variable(2)
        circuit.create_add_gate(a, b, b, 0, 0, 0, 0)
        circuit.assert_equal(a, b, "a != b")
        assert circuit.failed
        assert circuit.err == "a != b"
        assert not circuit.check_circuit()
