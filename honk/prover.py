import logging

from field import Fr
from honk import gemini, shplonk
from honk.arithmetization import IDS, NUM_POLYNOMIALS, NUM_UNSHIFTED_POLYNOMIALS, SIGMAS, Polynomial
from honk.encoder import compute_public_input_delta
from honk.keys import Proof
from honk.polynomials import shifted
from honk.relations import RelationParameters
from honk.settings import STANDARD_SETTINGS
from honk.sumcheck import Sumcheck
from kzg import KZG
from transcript import FIELD, POINT, UINT32, ProverTranscript

logger = logging.getLogger(__name__)


class Prover:
    """
    Honk prover implementation.

    The prover commits to the wire polynomials and the permutation grand
    product, runs sumcheck on the batched relation identity and then proves
    the resulting multilinear evaluations with Gemini, Shplonk and KZG. Every
    message goes through the transcript, whose bytes form the proof.
    """

    def __init__(self, settings=STANDARD_SETTINGS):
        """
        Initialize the prover with a KZG polynomial commitment scheme.

        Args:
            settings: StandardSettings
        """
        self.settings = settings
        self.kzg = KZG()

    def prove(self, pk, witness=None):
        """
        Generate a proof for the circuit the proving key was compiled from.

        Args:
            pk: ProvingKey
            witness: Witness (defaults to the one stored in pk)

        Returns:
            Proof
        """
        if witness is None:
            witness = pk.witness
        if witness is None:
            raise ValueError("No witness: call compute_witness first")

        n = pk.circuit_size
        ck = pk.ck
        precomputed = pk.polynomials

        # Create a transcript for the Fiat-Shamir transform
        transcript = ProverTranscript(self.settings.transcript_label, Fr)

        # ----- Preamble: sizes and public inputs -----
        transcript.send_to_verifier("circuit_size", n, UINT32)
        transcript.send_to_verifier("public_input_size", len(witness.public_inputs), UINT32)
        for i, value in enumerate(witness.public_inputs):
            transcript.send_to_verifier(f"public_inputs_{i}", value, FIELD)

        # ----- Round 1: Wire polynomials -----
        wire_commitments = self.kzg.commit(ck, witness.wires)
        for j, commitment in enumerate(wire_commitments, start=1):
            transcript.send_to_verifier(f"W_{j}", commitment, POINT)

        # ----- Round 2: Permutation grand product -----
        beta, gamma = transcript.get_challenges("beta", "gamma")
        public_input_delta = compute_public_input_delta(witness.public_inputs, beta, gamma, n)

        sigmas = [precomputed[index] for index in SIGMAS]
        ids = [precomputed[index] for index in IDS]
        z_perm = compute_grand_product_polynomial(witness.wires, sigmas, ids, beta, gamma)

        z_perm_commitment = self.kzg.commit(ck, [z_perm])[0]
        transcript.send_to_verifier("Z_PERM", z_perm_commitment, POINT)

        # ----- Round 3: Sumcheck -----
        relation_parameters = RelationParameters(beta=beta, gamma=gamma, public_input_delta=public_input_delta)
        polynomials = list(precomputed) + list(witness.wires) + [z_perm, shifted(z_perm)]

        sumcheck = Sumcheck(n, relation_parameters)
        sumcheck_output = sumcheck.execute_prover(polynomials, transcript)

        # ----- Round 4: Batch the opening claims -----
        rho = transcript.get_challenge("rho")
        rhos = gemini.powers_of_rho(rho, NUM_POLYNOMIALS)

        batched_unshifted = Fr.Zeros(n)
        for i in range(NUM_UNSHIFTED_POLYNOMIALS):
            batched_unshifted = batched_unshifted + rhos[i] * polynomials[i]
        batched_to_be_shifted = rhos[Polynomial.Z_PERM_SHIFT] * z_perm

        # ----- Round 5: Opening proof -----
        opening_pairs, witnesses = gemini.reduce_prove(
            self.kzg, ck, sumcheck_output.challenges, batched_unshifted, batched_to_be_shifted, transcript
        )
        opening_pair, batched_witness = shplonk.reduce_prove(self.kzg, ck, opening_pairs, witnesses, transcript)
        self.kzg.reduce_prove(ck, opening_pair, batched_witness, transcript)

        proof = Proof(transcript.export_proof())
        logger.debug("Proof generated: %d bytes", len(proof))
        return proof


def compute_grand_product_polynomial(wires, sigmas, ids, beta, gamma):
    """
    Compute the permutation grand product in its shiftable form.

        z_perm[0] = 0,   z_perm[i] = ∏_{k<i} ∏ⱼ(wⱼ[k] + β·idⱼ[k] + γ) / ∏ⱼ(wⱼ[k] + β·σⱼ[k] + γ)

    Args:
        wires: Wire polynomials (w_1, w_2, w_3)
        sigmas: Sigma polynomials
        ids: Identity polynomials
        beta, gamma: Permutation challenges

    Returns:
        z_perm as a table of length n

    Raises:
        ValueError: if some denominator is zero
    """
    n = len(wires[0])
    numerator = Fr.Ones(n)
    denominator = Fr.Ones(n)
    for wire, identity, sigma in zip(wires, ids, sigmas):
        numerator = numerator * (wire + beta * identity + gamma)
        denominator = denominator * (wire + beta * sigma + gamma)

    if (denominator == Fr(0)).any():
        raise ValueError("Denominator is zero in permutation polynomial calculation")

    ratios = numerator / denominator
    z_perm = Fr.Zeros(n)
    running_product = Fr(1)
    for i in range(1, n):
        running_product = running_product * ratios[i - 1]
        z_perm[i] = running_product
    return z_perm
