"""Smoke tests for the demo script."""

import main


class TestDemo:
    """The demos print PASS for honest runs."""

    def test_demo_kzg(self, capsys) -> None:
        main.demo_kzg()
        assert "KZG verification: PASS" in capsys.readouterr().out

    def test_demo_circuit_is_satisfied(self) -> None:
        assert main.build_demo_circuit().check_circuit()

    def test_demo_honk(self, capsys) -> None:
        main.demo_honk()
        out = capsys.readouterr().out
        assert "Circuit satisfied: True" in out
        assert "Honk verification: PASS" in out
