import logging

from honk.encoder import Encoder
from honk.keys import ProvingKey, VerificationKey, Witness
from honk.settings import STANDARD_SETTINGS
from kzg import KZG

logger = logging.getLogger(__name__)


class Indexer:
    """
    Honk indexer implementation.

    The indexer performs the preprocessing phase of the protocol to create:
    1. Proving Key (pk) - Used by the prover to generate proofs
    2. Verification Key (vk) - Used by the verifier to check proofs

    This preprocessing encodes the circuit description into selector,
    permutation, identity and Lagrange polynomials over the boolean hypercube
    and commits to each of them.
    """

    def __init__(self, settings=STANDARD_SETTINGS):
        """
        Initialize the indexer with a KZG polynomial commitment scheme.

        Args:
            settings: StandardSettings
        """
        self.settings = settings
        self.kzg = KZG()
        self.encoder = Encoder(settings)

    def preprocess(self, circuit, tau=None):
        """
        Preprocess a circuit to produce the proving and verification keys.

        Args:
            circuit: CircuitConstructor holding gates, public inputs and copy constraints
            tau: Optional fixed SRS secret (tests only)

        Returns:
            tuple: (pk, vk)

        Raises:
            PermutationError: if the copy constraints do not compile to a valid permutation
        """
        # Update encoder state with circuit description
        self.encoder.update_state(circuit)
        n = self.encoder.n

        # Encode circuit into polynomials
        selector_polys = self.encoder.encode_selectors()
        sigma_polys, id_polys = self.encoder.encode_permutation()
        L_first, L_last = self.encoder.encode_lagrange()

        # Ordered as Polynomial.Q_M ... Polynomial.LAGRANGE_LAST
        precomputed_polys = selector_polys + sigma_polys + id_polys + [L_first, L_last]

        # Setup KZG commitment scheme; tables are committed as coefficient vectors
        ck, rk = self.kzg.setup(n, tau)

        # Commit to the precomputed polynomials
        commitments = self.kzg.commit(ck, precomputed_polys)

        pk = ProvingKey(
            circuit_size=n,
            num_public_inputs=self.encoder.num_public_inputs,
            polynomials=precomputed_polys,
            ck=ck,
        )
        vk = VerificationKey(
            circuit_size=n,
            num_public_inputs=self.encoder.num_public_inputs,
            commitments=commitments,
            rk=rk,
        )

        logger.info(
            "Compiled circuit: %d gates, %d public inputs, circuit size %d",
            self.encoder.num_gates,
            self.encoder.num_public_inputs,
            n,
        )
        return pk, vk

    def compute_witness(self, circuit, pk):
        """
        Fill the wire polynomials from the circuit's variable values and store
        them in the proving key.

        Args:
            circuit: The CircuitConstructor the proving key was compiled from
            pk: ProvingKey

        Returns:
            Witness
        """
        self.encoder.update_state(circuit)
        if self.encoder.n != pk.circuit_size or self.encoder.num_public_inputs != pk.num_public_inputs:
            raise ValueError("Circuit does not match the proving key")

        witness = Witness(wires=self.encoder.encode_witness(), public_inputs=circuit.get_public_inputs())
        pk.witness = witness
        return witness
