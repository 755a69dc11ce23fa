from dataclasses import dataclass

import galois
from py_ecc.optimized_bn128 import G1, G2, Z1, add, curve_order, eq, multiply, neg, pairing

from field import Fr, random_element
from transcript import POINT


@dataclass
class OpeningPair:
    """A point and the value a polynomial is claimed to take there."""

    challenge: object
    evaluation: object


@dataclass
class OpeningClaim:
    """Claim that the polynomial committed to by `commitment` opens to the pair."""

    opening_pair: OpeningPair
    commitment: tuple


@dataclass
class PairingAccumulator:
    """
    Deferred pairing check e(lhs, [1]_2) == e(rhs, [x]_2).

    Accumulators produced by independent proofs can be aggregated with
    KZG.batch_check so that only two pairings are computed in total.
    """

    lhs: tuple
    rhs: tuple


class KZG:
    """
    Kate-Zaverucha-Goldberg polynomial commitment scheme over BN254.

    This class implements the univariate opening scheme used at the end of the
    Honk verifier:
    1. Committing to polynomials (coefficient vectors) with a single group element
    2. Proving that a committed polynomial evaluates to v at z with a quotient commitment
    3. Reducing the verifier's work to one deferred pairing check
    4. Batching several deferred checks into a single pairing equation
    """

    def __init__(self):
        """
        Initialize the KZG polynomial commitment scheme with the BN254 curve operations.
        """
        # Store curve operations
        self.G1 = G1
        self.G2 = G2
        self.Z1 = Z1  # Zero point in G1
        self.multiply = multiply
        self.add = add
        self.neg = neg
        self.pairing = pairing
        self.eq = eq
        self.curve_order = curve_order

        # Scalar field shared with the rest of the proof system
        self.Fq = Fr

    def setup(self, max_degree, tau=None):
        """
        Generate KZG structured reference string (commitment and verification keys).

        Args:
            max_degree: Maximum polynomial degree supported by this setup
            tau: Optional fixed secret (tests only); sampled at random when omitted

        Returns:
            tuple: (commitment_key, verification_key)
        """
        # Sample a random secret tau ∈ Fq
        if tau is None:
            tau = random_element()
        tau = int(tau)

        # Generate commitment key: [G₁, τG₁, τ²G₁, ..., τᵈG₁]
        powers_of_tau_G1 = [self.G1]
        tau_power = 1
        for _ in range(1, max_degree + 1):
            tau_power = tau_power * tau % self.curve_order
            powers_of_tau_G1.append(self.multiply(self.G1, tau_power))

        # Generate verification key: τG₂
        tau_G2 = self.multiply(self.G2, tau)

        return (powers_of_tau_G1, tau_G2)

    def commit(self, ck, polynomials):
        """
        Commit to a list of polynomials using the KZG scheme.

        Args:
            ck: Commitment key (powers of tau in G1)
            polynomials: List of coefficient vectors (ascending order) or galois.Poly

        Returns:
            List of KZG commitments (G1 points)
        """
        commitments = []

        for poly in polynomials:
            coeffs = self._coefficients(poly)
            if len(coeffs) > len(ck):
                raise ValueError(
                    f"Polynomial with {len(coeffs)} coefficients exceeds commitment key size {len(ck)}"
                )

            # Compute the commitment: p(τ)·G₁ = Σᵢ pᵢ·(τⁱG₁)
            commitment = self.Z1
            for i in range(len(coeffs)):
                coeff = int(coeffs[i])
                if coeff == 0:
                    continue
                term = self.multiply(ck[i], coeff)
                commitment = self.add(commitment, term)

            commitments.append(commitment)

        return commitments

    def open(self, ck, polynomial, z):
        """
        Create an evaluation proof for a polynomial at a point.

        Args:
            ck: Commitment key
            polynomial: Coefficient vector or galois.Poly
            z: Evaluation point

        Returns:
            tuple: (evaluation p(z), proof commitment [W] with W(X) = (p(X) - p(z))/(X - z))
        """
        poly = galois.Poly(self._coefficients(polynomial), field=self.Fq, order="asc")
        z = self.Fq(int(z))
        evaluation = poly(z)

        # Compute witness polynomial w(X) = (p(X) - p(z))/(X - z)
        numerator = poly - galois.Poly([int(evaluation)], field=self.Fq)
        divisor = galois.Poly([1, int(-z)], field=self.Fq)
        witness_poly = numerator // divisor

        proof = self.commit(ck, [witness_poly])[0]
        return evaluation, proof

    def reduce_prove(self, ck, opening_pair, polynomial, transcript):
        """
        Send the quotient commitment for the final univariate claim.

        Args:
            ck: Commitment key
            opening_pair: OpeningPair the polynomial satisfies
            polynomial: Witness polynomial of the claim
            transcript: ProverTranscript
        """
        _, proof = self.open(ck, polynomial, opening_pair.challenge)
        transcript.send_to_verifier("KZG:W", proof, POINT)

    def reduce_verify(self, claim, transcript):
        """
        Turn an opening claim into a deferred pairing check.

        Args:
            claim: OpeningClaim ([C], z, v)
            transcript: VerifierTranscript

        Returns:
            PairingAccumulator for e(C - v·G₁ + z·W, G₂) == e(W, τG₂)
        """
        proof = transcript.receive_from_prover("KZG:W", POINT)
        z = int(claim.opening_pair.challenge)
        v = int(claim.opening_pair.evaluation)

        # Compute C - v·G₁ + z·W
        lhs = self.add(claim.commitment, self.neg(self.multiply(self.G1, v)))
        lhs = self.add(lhs, self.multiply(proof, z))

        return PairingAccumulator(lhs=lhs, rhs=proof)

    def verify(self, rk, accumulator):
        """
        Perform the pairing check of a single accumulator.

        Args:
            rk: Verification key (τG₂)
            accumulator: PairingAccumulator

        Returns:
            bool: True if the pairing equation holds
        """
        left_pairing = self.pairing(self.G2, accumulator.lhs)
        right_pairing = self.pairing(rk, accumulator.rhs)
        return left_pairing == right_pairing

    def batch_check(self, rk, accumulators, r=None):
        """
        Batch verify several deferred pairing checks with a single pairing equation.

        This optimization reduces verification cost from 2n pairings to just 2 pairings
        regardless of the number of accumulated claims.

        Args:
            rk: Verification key (must be the same for all accumulators)
            accumulators: List of PairingAccumulator
            r: Optional random field element for batching (if not provided, a new one is sampled)

        Returns:
            bool: True if all checks pass, False otherwise
        """
        if r is None:
            r = random_element()

        left_acc = self.Z1
        right_acc = self.Z1
        r_power = self.Fq(1)

        for accumulator in accumulators:
            # Apply random power r^(i+1) to this instance
            r_power = r_power * r
            scalar = int(r_power)
            left_acc = self.add(left_acc, self.multiply(accumulator.lhs, scalar))
            right_acc = self.add(right_acc, self.multiply(accumulator.rhs, scalar))

        # e(∑ rⁱ·lhsᵢ, G₂) = e(∑ rⁱ·rhsᵢ, τG₂)
        return self.verify(rk, PairingAccumulator(lhs=left_acc, rhs=right_acc))

    def _coefficients(self, polynomial):
        # galois stores coefficients in descending order
        if isinstance(polynomial, galois.Poly):
            return polynomial.coeffs[::-1]
        return polynomial


if __name__ == "__main__":
    print("Testing KZG Polynomial Commitment Scheme")
    print("=" * 60)

    kzg = KZG()
    ck, rk = kzg.setup(max_degree=5)
    F = kzg.Fq

    poly = F([1, 2, 3, 0, 5])
    commitment = kzg.commit(ck, [poly])[0]

    z = F.Random()
    evaluation, proof = kzg.open(ck, poly, z)

    lhs = kzg.add(commitment, kzg.neg(kzg.multiply(kzg.G1, int(evaluation))))
    lhs = kzg.add(lhs, kzg.multiply(proof, int(z)))
    result = kzg.verify(rk, PairingAccumulator(lhs=lhs, rhs=proof))
    print(f"{'✅' if result else '❌'} Opening verification: {result}")

    wrong = kzg.add(commitment, kzg.neg(kzg.multiply(kzg.G1, int(evaluation + F(1)))))
    wrong = kzg.add(wrong, kzg.multiply(proof, int(z)))
    result = kzg.verify(rk, PairingAccumulator(lhs=wrong, rhs=proof))
    print(f"{'✅' if not result else '❌'} Wrong evaluation rejected: {not result}")
