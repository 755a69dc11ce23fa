"""
Gemini: reduce a multilinear evaluation claim to univariate opening claims.

A multilinear table p over {0,1}^d, read as the coefficient vector of a
univariate A_0(X), satisfies MLE(p)(u) = A_d where

    A_{l+1}[i] = (1 - u_l)·A_l[2i] + u_l·A_l[2i+1].

In univariate form the fold reads

    A_{l+1}(X²) = (1 - u_l)·(A_l(X) + A_l(-X))/2 + u_l·(A_l(X) - A_l(-X))/(2X),

so given the values a_l = A_l(-r^(2^l)) the verifier walks back from A_d to
A_0(r) and only the d+1 univariate openings remain to be checked.

The unshifted batch F and the to-be-shifted batch G enter as
A_0 = F + G/X (G has zero constant term). Since the verifier only knows [G],
the opening of A_0 at r is split into (F + r⁻¹G)(r) and the one at -r into
(F - r⁻¹G)(-r).
"""

import logging

from py_ecc.optimized_bn128 import add, multiply, neg

from field import Fr, fr
from honk.errors import VerificationError
from honk.polynomials import evaluate, fold, shifted
from kzg import OpeningClaim, OpeningPair
from transcript import FIELD, POINT

logger = logging.getLogger(__name__)


def powers_of_rho(rho, count):
    """
    Batching scalars [1, ρ, ρ², ..., ρ^(count-1)] as a plain list.

    Shared by the prover and verifier so both batch in the Polynomial order.
    """
    result = [Fr(1)]
    for _ in range(1, count):
        result.append(result[-1] * rho)
    return result


def compute_fold_polynomials(multilinear_challenge, batched_unshifted, batched_to_be_shifted):
    """
    Compute A_0 = F + G/X and its successive folds.

    Args:
        multilinear_challenge: Sumcheck point u (length d)
        batched_unshifted: F as a coefficient vector of length n
        batched_to_be_shifted: G as a coefficient vector of length n, G[0] = 0

    Returns:
        List [A_0, A_1, ..., A_d]; A_d has a single coefficient
    """
    folds = [batched_unshifted + shifted(batched_to_be_shifted)]
    for u in multilinear_challenge:
        folds.append(fold(folds[-1], u))
    return folds


def reduce_prove(kzg, ck, multilinear_challenge, batched_unshifted, batched_to_be_shifted, transcript):
    """
    Prover side of Gemini.

    Args:
        kzg: KZG instance used to commit to the folds
        ck: Commitment key
        multilinear_challenge: Sumcheck point u
        batched_unshifted: F = Σ ρⁱ·pᵢ over the unshifted polynomials
        batched_to_be_shifted: G = ρ^k·z_perm
        transcript: ProverTranscript

    Returns:
        tuple: (opening pairs, witness polynomials), d+1 of each, in the order
        (F + r⁻¹G at r), (F - r⁻¹G at -r), (A_l at -r^(2^l)) for l = 1..d-1
    """
    num_variables = len(multilinear_challenge)
    folds = compute_fold_polynomials(multilinear_challenge, batched_unshifted, batched_to_be_shifted)

    # The last fold is a constant (the batched evaluation) and is never committed
    fold_commitments = kzg.commit(ck, folds[1:num_variables])
    for l, commitment in enumerate(fold_commitments, start=1):
        transcript.send_to_verifier(f"Gemini:FOLD_{l}", commitment, POINT)

    r = transcript.get_challenge("Gemini:r")
    r_inv = Fr(1) / r

    r_squares = [r]
    for _ in range(1, num_variables):
        r_squares.append(r_squares[-1] * r_squares[-1])

    fold_evaluations = []
    for l in range(num_variables):
        a_l = evaluate(folds[l], -r_squares[l])
        fold_evaluations.append(a_l)
        transcript.send_to_verifier(f"Gemini:a_{l}", a_l, FIELD)

    A_0_pos = batched_unshifted + r_inv * batched_to_be_shifted
    A_0_neg = batched_unshifted - r_inv * batched_to_be_shifted

    opening_pairs = [
        OpeningPair(r, evaluate(A_0_pos, r)),
        OpeningPair(-r, fold_evaluations[0]),
    ]
    witnesses = [A_0_pos, A_0_neg]
    for l in range(1, num_variables):
        opening_pairs.append(OpeningPair(-r_squares[l], fold_evaluations[l]))
        witnesses.append(folds[l])

    logger.debug("Gemini prover committed to %d folds", len(fold_commitments))
    return opening_pairs, witnesses


def reduce_verify(multilinear_challenge, batched_evaluation, batched_f_commitment, batched_g_commitment, transcript):
    """
    Verifier side of Gemini.

    Args:
        multilinear_challenge: Sumcheck point u
        batched_evaluation: Σ ρⁱ·vᵢ over all claimed evaluations (shifted included)
        batched_f_commitment: [F]
        batched_g_commitment: [G]
        transcript: VerifierTranscript

    Returns:
        List of d+1 OpeningClaim, in the prover's order

    Raises:
        VerificationError: if r = 0 or a reconstruction denominator vanishes
    """
    num_variables = len(multilinear_challenge)

    fold_commitments = [
        transcript.receive_from_prover(f"Gemini:FOLD_{l}", POINT) for l in range(1, num_variables)
    ]

    r = transcript.get_challenge("Gemini:r")
    if r == fr(0):
        raise VerificationError("Gemini challenge r is zero")

    r_squares = [r]
    for _ in range(1, num_variables):
        r_squares.append(r_squares[-1] * r_squares[-1])

    fold_evaluations = [transcript.receive_from_prover(f"Gemini:a_{l}", FIELD) for l in range(num_variables)]

    A_0_pos_evaluation = compute_positive_evaluation(
        multilinear_challenge, batched_evaluation, fold_evaluations, r_squares
    )

    # [F] ± r⁻¹[G]
    r_inv = int(Fr(1) / r)
    scaled_g = multiply(batched_g_commitment, r_inv)
    C_pos = add(batched_f_commitment, scaled_g)
    C_neg = add(batched_f_commitment, neg(scaled_g))

    claims = [
        OpeningClaim(OpeningPair(r, A_0_pos_evaluation), C_pos),
        OpeningClaim(OpeningPair(-r, fold_evaluations[0]), C_neg),
    ]
    for l in range(1, num_variables):
        claims.append(OpeningClaim(OpeningPair(-r_squares[l], fold_evaluations[l]), fold_commitments[l - 1]))
    return claims


def compute_positive_evaluation(multilinear_challenge, batched_evaluation, fold_evaluations, r_squares):
    """
    Recover A_0(r) from A_d = batched_evaluation and a_l = A_l(-r^(2^l)).

        A_l(r_l) = (2·r_l·A_{l+1}(r_l²) - a_l·(r_l·(1 - u_l) - u_l)) / (r_l·(1 - u_l) + u_l)
    """
    evaluation = batched_evaluation
    one = Fr(1)
    two = Fr(2)
    for l in range(len(multilinear_challenge) - 1, -1, -1):
        u = multilinear_challenge[l]
        r_l = r_squares[l]
        denominator = r_l * (one - u) + u
        if denominator == fr(0):
            raise VerificationError(f"Gemini reconstruction denominator vanishes at level {l}")
        numerator = two * r_l * evaluation - fold_evaluations[l] * (r_l * (one - u) - u)
        evaluation = numerator / denominator
    return evaluation
