import logging

from py_ecc.optimized_bn128 import Z1, add, multiply

from field import Fr
from honk import gemini, shplonk
from honk.arithmetization import NUM_POLYNOMIALS, Polynomial
from honk.encoder import compute_public_input_delta
from honk.errors import VerificationError
from honk.relations import RelationParameters
from honk.settings import STANDARD_SETTINGS
from honk.sumcheck import Sumcheck
from kzg import KZG
from transcript import FIELD, POINT, UINT32, TranscriptError, VerifierTranscript

logger = logging.getLogger(__name__)


class Verifier:
    """
    Honk verifier implementation.

    Replays the prover's transcript and fails closed at every step:
    1. Sizes must match the verification key
    2. Public inputs and wire commitments are read, beta and gamma derived
    3. The grand product commitment is read and the relation parameters assembled
    4. Sumcheck must accept
    5. The batched multilinear claim is reduced by Gemini and Shplonk to one KZG opening
    6. The final pairing check must pass
    """

    def __init__(self, vk, settings=STANDARD_SETTINGS):
        """
        Args:
            vk: VerificationKey
            settings: StandardSettings (transcript label)
        """
        self.vk = vk
        self.settings = settings
        self.kzg = KZG()

    def verify_proof(self, proof):
        """
        Verify a proof against the verification key.

        Args:
            proof: Proof

        Returns:
            bool: True if the proof is accepted
        """
        accumulator = self.reduce(proof)
        if accumulator is None:
            return False
        if not self.kzg.verify(self.vk.rk, accumulator):
            logger.info("Proof rejected: pairing check failed")
            return False
        return True

    def reduce(self, proof):
        """
        Run every verifier step except the final pairing.

        Args:
            proof: Proof

        Returns:
            PairingAccumulator, or None if the proof is rejected before the pairing
        """
        try:
            return self._reduce(proof)
        except (TranscriptError, VerificationError) as e:
            logger.info("Proof rejected: %s", e)
            return None

    def _reduce(self, proof):
        vk = self.vk
        transcript = VerifierTranscript(self.settings.transcript_label, Fr, proof.proof_data)

        # 1. Sizes
        circuit_size = transcript.receive_from_prover("circuit_size", UINT32)
        public_input_size = transcript.receive_from_prover("public_input_size", UINT32)
        if circuit_size != vk.circuit_size:
            logger.info("Proof rejected: circuit size %d, expected %d", circuit_size, vk.circuit_size)
            return None
        if public_input_size != vk.num_public_inputs:
            logger.info(
                "Proof rejected: %d public inputs, expected %d", public_input_size, vk.num_public_inputs
            )
            return None

        # 2. Public inputs and wire commitments
        public_inputs = [
            transcript.receive_from_prover(f"public_inputs_{i}", FIELD) for i in range(public_input_size)
        ]
        wire_commitments = [transcript.receive_from_prover(f"W_{j}", POINT) for j in range(1, 4)]

        # 3. Permutation challenges and the grand product commitment
        beta, gamma = transcript.get_challenges("beta", "gamma")
        public_input_delta = compute_public_input_delta(public_inputs, beta, gamma, circuit_size)
        z_perm_commitment = transcript.receive_from_prover("Z_PERM", POINT)

        relation_parameters = RelationParameters(beta=beta, gamma=gamma, public_input_delta=public_input_delta)

        # 4. Sumcheck
        sumcheck = Sumcheck(circuit_size, relation_parameters)
        sumcheck_output = sumcheck.execute_verifier(transcript)
        if sumcheck_output is None:
            logger.info("Proof rejected: sumcheck failed")
            return None

        # 5. Batch commitments and evaluations with powers of rho
        rho = transcript.get_challenge("rho")
        rhos = gemini.powers_of_rho(rho, NUM_POLYNOMIALS)

        evaluations = sumcheck_output.evaluations
        batched_evaluation = Fr(0)
        for i in range(NUM_POLYNOMIALS):
            batched_evaluation = batched_evaluation + rhos[i] * evaluations[i]

        # Precomputed commitments come from the key, the rest from the proof
        commitments = list(vk.commitments) + wire_commitments + [z_perm_commitment]

        batched_f_commitment = Z1
        for i, commitment in enumerate(commitments):
            batched_f_commitment = add(batched_f_commitment, multiply(commitment, int(rhos[i])))
        batched_g_commitment = multiply(z_perm_commitment, int(rhos[Polynomial.Z_PERM_SHIFT]))

        # 6. Gemini -> Shplonk -> KZG
        claims = gemini.reduce_verify(
            sumcheck_output.challenges, batched_evaluation, batched_f_commitment, batched_g_commitment, transcript
        )
        batched_claim = shplonk.reduce_verify(claims, transcript)
        accumulator = self.kzg.reduce_verify(batched_claim, transcript)

        transcript.assert_consumed()
        logger.debug("Verifier reduced %d opening claims to one pairing check", len(claims))
        return accumulator


def batch_verify(vk, proofs, settings=STANDARD_SETTINGS):
    """
    Verify several proofs for the same circuit with a single pairing equation.

    Args:
        vk: VerificationKey
        proofs: List of Proof

    Returns:
        bool: True if every proof is accepted
    """
    verifier = Verifier(vk, settings)
    accumulators = []
    for proof in proofs:
        accumulator = verifier.reduce(proof)
        if accumulator is None:
            return False
        accumulators.append(accumulator)
    return verifier.kzg.batch_check(vk.rk, accumulators)
