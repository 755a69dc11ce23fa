"""Tests for the Gemini -> Shplonk -> KZG opening reduction."""

import pytest
from py_ecc.optimized_bn128 import eq

from field import Fr
from honk import gemini, shplonk
from honk.errors import VerificationError
from honk.polynomials import evaluate, evaluate_mle, quotient_by_linear, shifted
from kzg import KZG, OpeningClaim, OpeningPair
from transcript import ProverTranscript, VerifierTranscript


@pytest.fixture(scope="module")
def kzg():
    return KZG()


@pytest.fixture(scope="module")
def srs(kzg, tau):
    return kzg.setup(max_degree=8, tau=tau)


def _random_inputs(n, d):
    F = Fr.Random(n)
    G = Fr.Random(n)
    G[0] = 0
    u = [Fr.Random() for _ in range(d)]
    return F, G, u


class TestFoldAlgebra:
    """Tests for the Gemini fold identities."""

    def test_last_fold_is_mle(self) -> None:
        """Folding A_0 = F + G/X d times gives the multilinear evaluation."""
        F, G, u = _random_inputs(8, 3)
        folds = gemini.compute_fold_polynomials(u, F, G)
        assert [len(fold) for fold in folds] == [8, 4, 2, 1]
        assert folds[-1][0] == evaluate_mle(F, u) + evaluate_mle(shifted(G), u)

    def test_positive_evaluation_reconstruction(self) -> None:
        """A_0(r) is recovered from the values at -r^(2^l)."""
        F, G, u = _random_inputs(8, 3)
        folds = gemini.compute_fold_polynomials(u, F, G)
        r = Fr.Random()
        r_squares = [r, r * r, r ** 4]
        fold_evaluations = [evaluate(folds[l], -r_squares[l]) for l in range(3)]

        result = gemini.compute_positive_evaluation(u, folds[-1][0], fold_evaluations, r_squares)
        assert result == evaluate(folds[0], r)

    def test_degenerate_denominator(self) -> None:
        """r_l·(1 - u_l) + u_l = 0 is rejected."""
        u = [Fr(2)]
        r = Fr(2)  # 2·(1 - 2) + 2 = 0
        with pytest.raises(VerificationError):
            gemini.compute_positive_evaluation(u, Fr(1), [Fr(1)], [r])

    def test_powers_of_rho(self) -> None:
        """[1, ρ, ρ²]."""
        assert gemini.powers_of_rho(Fr(3), 3) == [Fr(1), Fr(3), Fr(9)]

    def test_quotient_by_linear(self) -> None:
        """(p(X) - p(x))/(X - x) times (X - x) gives back p - p(x)."""
        p = Fr([5, 0, 3, 1])
        x = Fr(4)
        q = quotient_by_linear(p, x)
        y = Fr(10)
        assert evaluate(q, y) * (y - x) == evaluate(p, y) - evaluate(p, x)


class TestOpeningReduction:
    """End-to-end runs of the univariate opening reductions."""

    def test_shplonk_kzg(self, kzg, srs) -> None:
        """Claims at distinct points batch into one passing pairing check."""
        ck, rk = srs
        witnesses = [Fr([1, 2, 3, 4]), Fr([7, 0, 5]), Fr([9, 9])]
        points = [Fr(2), Fr(3), -Fr(2)]

        pairs = [OpeningPair(x, evaluate(f, x)) for f, x in zip(witnesses, points)]
        commitments = kzg.commit(ck, witnesses)

        prover = ProverTranscript("opening-test", Fr)
        pair, batched = shplonk.reduce_prove(kzg, ck, pairs, witnesses, prover)
        assert evaluate(batched, pair.challenge) == Fr(0)
        kzg.reduce_prove(ck, pair, batched, prover)

        verifier = VerifierTranscript("opening-test", Fr, prover.export_proof())
        claims = [OpeningClaim(p, c) for p, c in zip(pairs, commitments)]
        claim = shplonk.reduce_verify(claims, verifier)
        assert eq(claim.commitment, kzg.commit(ck, [batched])[0])
        accumulator = kzg.reduce_verify(claim, verifier)
        verifier.assert_consumed()
        assert kzg.verify(rk, accumulator)

    def test_gemini_shplonk_kzg(self, kzg, srs) -> None:
        """A batched multilinear claim is proven through all three reductions."""
        ck, rk = srs
        F, G, u = _random_inputs(8, 3)
        batched_evaluation = evaluate_mle(F, u) + evaluate_mle(shifted(G), u)
        C_F, C_G = kzg.commit(ck, [F, G])

        prover = ProverTranscript("opening-test", Fr)
        pairs, witnesses = gemini.reduce_prove(kzg, ck, u, F, G, prover)
        assert len(pairs) == 4
        for pair, witness in zip(pairs, witnesses):
            assert evaluate(witness, pair.challenge) == pair.evaluation
        pair, batched = shplonk.reduce_prove(kzg, ck, pairs, witnesses, prover)
        kzg.reduce_prove(ck, pair, batched, prover)

        verifier = VerifierTranscript("opening-test", Fr, prover.export_proof())
        claims = gemini.reduce_verify(u, batched_evaluation, C_F, C_G, verifier)
        assert len(claims) == 4
        assert all(c.opening_pair.evaluation == p.evaluation for c, p in zip(claims, pairs))
        claim = shplonk.reduce_verify(claims, verifier)
        accumulator = kzg.reduce_verify(claim, verifier)
        verifier.assert_consumed()
        assert kzg.verify(rk, accumulator)

    def test_wrong_batched_evaluation(self, kzg, srs) -> None:
        """A wrong multilinear evaluation fails the final pairing."""
        ck, rk = srs
        F, G, u = _random_inputs(4, 2)
        batched_evaluation = evaluate_mle(F, u) + evaluate_mle(shifted(G), u)
        C_F, C_G = kzg.commit(ck, [F, G])

        prover = ProverTranscript("opening-test", Fr)
        pairs, witnesses = gemini.reduce_prove(kzg, ck, u, F, G, prover)
        pair, batched = shplonk.reduce_prove(kzg, ck, pairs, witnesses, prover)
        kzg.reduce_prove(ck, pair, batched, prover)

        verifier = VerifierTranscript("opening-test", Fr, prover.export_proof())
        claims = gemini.reduce_verify(u, batched_evaluation + Fr(1), C_F, C_G, verifier)
        accumulator = kzg.reduce_verify(shplonk.reduce_verify(claims, verifier), verifier)
        assert not kzg.verify(rk, accumulator)
