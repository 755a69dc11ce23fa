import logging
from dataclasses import dataclass, replace

from field import Fr, fr, powers
from honk.arithmetization import NUM_POLYNOMIALS
from honk.polynomials import Univariate, fold
from honk.relations import STANDARD_RELATIONS, evaluate_batched_relations
from transcript import FieldVector

logger = logging.getLogger(__name__)


@dataclass
class SumcheckOutput:
    """Opening point u = (u_0, ..., u_{d-1}) and every polynomial's evaluation at u."""

    challenges: list
    evaluations: object


class SumcheckRound:
    """
    Per-round logic shared by the sumcheck prover and verifier.

    The claim being reduced is

        Σ_{x ∈ {0,1}^d} pow_ζ(x) · Σₖ αᵏ·Rₖ(x) = 0,

    where pow_ζ(x) = ∏ₗ (1 - xₗ + xₗ·ζ^(2^l)) weights row i by ζ^i, so that the
    sum vanishes only if every row does (with overwhelming probability).
    """

    def __init__(self, relations):
        self.relations = relations
        # pow_ζ raises the degree of the batched relation by one
        self.univariate_length = max(relation.degree for relation in relations) + 2
        self.target_total_sum = Fr(0)

    def compute_univariate(self, tables, pow_table, relation_parameters):
        """
        Prover: Sᵢ(X) = Σ over the remaining hypercube of pow_ζ · batched relation,
        with the current variable replaced by X ∈ {0, ..., length-1}.

        Args:
            tables: Partially evaluated polynomial tables (one per Polynomial)
            pow_table: Partially evaluated pow_ζ table

        Returns:
            Univariate round polynomial
        """
        evaluations = Fr.Zeros(self.univariate_length)
        even_tables = [table[0::2] for table in tables]
        deltas = [table[1::2] - table[0::2] for table in tables]
        pow_even = pow_table[0::2]
        pow_delta = pow_table[1::2] - pow_table[0::2]

        for point in range(self.univariate_length):
            x = fr(point)
            # Linear extension of every table along the current variable
            extended = [even + x * delta for even, delta in zip(even_tables, deltas)]
            relation_values = evaluate_batched_relations(self.relations, extended, relation_parameters)
            weighted = relation_values * (pow_even + x * pow_delta)
            evaluations[point] = weighted.sum()

        return Univariate(evaluations)

    def check_sum(self, univariate):
        """Verifier: S(0) + S(1) must equal the running target."""
        return univariate[0] + univariate[1] == self.target_total_sum

    def compute_next_target_sum(self, univariate, round_challenge):
        self.target_total_sum = univariate.evaluate(round_challenge)

    def compute_full_relation_purported_value(self, evaluations, relation_parameters, pow_evaluation):
        """
        Verifier: value of the batched relation at u, built from the claimed
        evaluations of the polynomials.
        """
        values = [evaluations[i] for i in range(NUM_POLYNOMIALS)]
        return pow_evaluation * evaluate_batched_relations(self.relations, values, relation_parameters)


class Sumcheck:
    """
    Reduces the relation identity over the boolean hypercube {0,1}^d (d = log2 n)
    to a claim about the evaluations of all polynomials at one random point.

    Rounds run Round(0) → ... → Round(d-1) → finished, binding the lowest
    variable first. Challenges alpha and zeta are drawn at the start of the
    protocol and stored in the relation parameters.
    """

    def __init__(self, circuit_size, relation_parameters, relations=STANDARD_RELATIONS):
        """
        Args:
            circuit_size: n, a power of two
            relation_parameters: RelationParameters with beta, gamma and public_input_delta
            relations: Relations to batch
        """
        self.circuit_size = circuit_size
        self.num_rounds = circuit_size.bit_length() - 1
        self.relation_parameters = relation_parameters
        self.relations = relations
        self.round = SumcheckRound(relations)
        self.round_index = 0

    def execute_prover(self, polynomials, transcript):
        """
        Run the prover side of the protocol.

        Args:
            polynomials: List of NUM_POLYNOMIALS tables of length n, indexed by Polynomial
            transcript: ProverTranscript

        Returns:
            SumcheckOutput
        """
        self._draw_batching_challenges(transcript)
        zeta = self.relation_parameters.zeta

        tables = list(polynomials)
        pow_table = powers(zeta, self.circuit_size)

        challenges = []
        for round_index in range(self.num_rounds):
            self.round_index = round_index
            univariate = self.round.compute_univariate(tables, pow_table, self.relation_parameters)
            transcript.send_to_verifier(
                f"Sumcheck:univariate_{round_index}",
                univariate.evaluations,
                FieldVector(self.round.univariate_length),
            )
            u = transcript.get_challenge(f"Sumcheck:u_{round_index}")
            challenges.append(u)
            tables = [fold(table, u) for table in tables]
            pow_table = fold(pow_table, u)
            logger.debug("Sumcheck prover finished round %d", round_index)
        self.round_index = self.num_rounds

        evaluations = Fr.Zeros(NUM_POLYNOMIALS)
        for i, table in enumerate(tables):
            evaluations[i] = table[0]
        transcript.send_to_verifier("multivariate_evaluations", evaluations, FieldVector(NUM_POLYNOMIALS))

        return SumcheckOutput(challenges=challenges, evaluations=evaluations)

    def execute_verifier(self, transcript):
        """
        Run the verifier side of the protocol.

        Args:
            transcript: VerifierTranscript

        Returns:
            SumcheckOutput, or None if any round check or the final relation check fails
        """
        self._draw_batching_challenges(transcript)
        zeta = self.relation_parameters.zeta

        self.round.target_total_sum = Fr(0)
        pow_evaluation = Fr(1)
        zeta_power = zeta  # ζ^(2^l)

        challenges = []
        for round_index in range(self.num_rounds):
            self.round_index = round_index
            univariate = Univariate(
                transcript.receive_from_prover(
                    f"Sumcheck:univariate_{round_index}", FieldVector(self.round.univariate_length)
                )
            )
            if not self.round.check_sum(univariate):
                logger.info("Sumcheck round %d: S(0) + S(1) does not match the target", round_index)
                return None

            u = transcript.get_challenge(f"Sumcheck:u_{round_index}")
            challenges.append(u)
            self.round.compute_next_target_sum(univariate, u)

            pow_evaluation = pow_evaluation * (Fr(1) - u + u * zeta_power)
            zeta_power = zeta_power * zeta_power
        self.round_index = self.num_rounds

        evaluations = transcript.receive_from_prover("multivariate_evaluations", FieldVector(NUM_POLYNOMIALS))

        full_honk_relation_purported_value = self.round.compute_full_relation_purported_value(
            evaluations, self.relation_parameters, pow_evaluation
        )
        if full_honk_relation_purported_value != self.round.target_total_sum:
            logger.info("Sumcheck: final relation evaluation does not match the folded claim")
            return None

        return SumcheckOutput(challenges=challenges, evaluations=evaluations)

    def _draw_batching_challenges(self, transcript):
        alpha, zeta = transcript.get_challenges("Sumcheck:alpha", "Sumcheck:zeta")
        self.relation_parameters = replace(self.relation_parameters, alpha=alpha, zeta=zeta)
