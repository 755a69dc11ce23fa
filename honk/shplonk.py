"""
Shplonk: batch univariate opening claims at distinct points into a single claim.

For claims (f_j, x_j, v_j) and a challenge ν the prover commits to

    Q(X) = Σⱼ νʲ·(f_j(X) - v_j)/(X - x_j).

At a second challenge z the polynomial

    G(X) = Q(X) - Σⱼ νʲ·(f_j(X) - v_j)/(z - x_j)

vanishes, and the verifier can build [G] from [Q] and the [f_j] alone.
"""

from py_ecc.optimized_bn128 import G1, add, multiply, neg

from field import Fr, fr
from honk.errors import VerificationError
from honk.polynomials import quotient_by_linear
from kzg import OpeningClaim, OpeningPair
from transcript import POINT


def reduce_prove(kzg, ck, opening_pairs, witnesses, transcript):
    """
    Prover side of Shplonk.

    Args:
        kzg: KZG instance
        ck: Commitment key
        opening_pairs: List of OpeningPair (x_j, v_j)
        witnesses: Matching coefficient vectors f_j (lengths may differ)
        transcript: ProverTranscript

    Returns:
        tuple: (OpeningPair (z, 0), coefficient vector of G)
    """
    size = max(len(witness) for witness in witnesses)
    padded = []
    for witness in witnesses:
        vector = Fr.Zeros(size)
        vector[:len(witness)] = witness
        padded.append(vector)

    nu = transcript.get_challenge("Shplonk:nu")

    Q = Fr.Zeros(size)
    nu_power = Fr(1)
    for pair, witness in zip(opening_pairs, padded):
        Q = Q + nu_power * quotient_by_linear(witness, pair.challenge)
        nu_power = nu_power * nu

    Q_commitment = kzg.commit(ck, [Q])[0]
    transcript.send_to_verifier("Shplonk:Q", Q_commitment, POINT)

    z = transcript.get_challenge("Shplonk:z")

    G = Q.copy()
    nu_power = Fr(1)
    for pair, witness in zip(opening_pairs, padded):
        scaling = nu_power / (z - pair.challenge)
        G = G - scaling * witness
        G[0] = G[0] + scaling * pair.evaluation
        nu_power = nu_power * nu

    return OpeningPair(z, Fr(0)), G


def reduce_verify(claims, transcript):
    """
    Verifier side of Shplonk.

        [G] = [Q] - Σⱼ sⱼ·[f_j] + (Σⱼ sⱼ·v_j)·[1],   sⱼ = νʲ/(z - x_j)

    Args:
        claims: List of OpeningClaim
        transcript: VerifierTranscript

    Returns:
        OpeningClaim that [G] opens to 0 at z

    Raises:
        VerificationError: if z coincides with one of the opening points
    """
    nu = transcript.get_challenge("Shplonk:nu")
    Q_commitment = transcript.receive_from_prover("Shplonk:Q", POINT)
    z = transcript.get_challenge("Shplonk:z")

    commitment = Q_commitment
    constant = Fr(0)
    nu_power = Fr(1)
    for claim in claims:
        denominator = z - claim.opening_pair.challenge
        if denominator == fr(0):
            raise VerificationError("Shplonk challenge z collides with an opening point")
        scaling = nu_power / denominator
        commitment = add(commitment, neg(multiply(claim.commitment, int(scaling))))
        constant = constant + scaling * claim.opening_pair.evaluation
        nu_power = nu_power * nu

    commitment = add(commitment, multiply(G1, int(constant)))
    return OpeningClaim(OpeningPair(z, Fr(0)), commitment)
