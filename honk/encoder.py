from field import MODULUS, Fr, fr
from honk.arithmetization import PROGRAM_WIDTH, SELECTOR_NAMES
from honk.errors import PermutationError
from honk.settings import STANDARD_SETTINGS


class Encoder:
    """
    Compiles a finished circuit description into the precomputed polynomials
    of the standard arithmetization.

    All polynomials are vectors of length n indexed by the rows of the circuit
    (equivalently, by the points of the boolean hypercube {0,1}^log2(n)). Wire
    slot (row i, column j) is flattened to j·n + i.
    """

    def __init__(self, settings=STANDARD_SETTINGS):
        """
        Args:
            settings: StandardSettings (minimum circuit size)
        """
        self.settings = settings

    def find_subgroup_size(self, n):
        """
        Find the smallest power of 2 that's greater than or equal to n.

        Args:
            n: The minimum required size

        Returns:
            Power of 2 that is >= n, and at least the configured minimum
        """
        return max(2 ** ((n - 1).bit_length()), self.settings.minimum_circuit_size)

    def update_state(self, circuit):
        """
        Update the encoder state with the circuit description.

        Args:
            circuit: CircuitConstructor
        """
        self.circuit = circuit
        self.num_public_inputs = circuit.num_public_inputs
        self.num_gates = circuit.num_gates
        self.n = self.find_subgroup_size(self.num_public_inputs + self.num_gates)

    def encode_selectors(self):
        """
        Lay out selector values over the circuit rows. Public-input rows and
        padding rows carry zero selectors.

        Returns:
            List of selector polynomials in (q_m, q_1, q_2, q_3, q_c) order
        """
        self._require_state()
        offset = self.num_public_inputs

        selector_polys = []
        for name in SELECTOR_NAMES:
            values = self.circuit.selectors[name]
            poly = Fr.Zeros(self.n)
            for i in range(self.num_gates):
                poly[offset + i] = values[i]
            selector_polys.append(poly)
        return selector_polys

    def compute_wire_copy_cycles(self):
        """
        Collect, for each equivalence class of variables, the wire slots that
        reference it.

        Public input i contributes (i, 0) and (i, 1) as adjacent entries, ahead
        of any gate slot; gate slots follow in row-major order.

        Returns:
            List of cycles, each a list of (row, column) slots
        """
        self._require_state()
        circuit = self.circuit
        offset = self.num_public_inputs

        cycles = {}
        for i, variable in enumerate(circuit.public_inputs):
            root = circuit.real_variable_index(variable)
            cycles.setdefault(root, []).extend([(i, 0), (i, 1)])

        for gate in range(self.num_gates):
            for column in range(PROGRAM_WIDTH):
                root = circuit.real_variable_index(circuit.wires[column][gate])
                cycles.setdefault(root, []).append((offset + gate, column))

        return list(cycles.values())

    def encode_permutation(self):
        """
        Encode the copy-constraint cycles into sigma and identity polynomials.

        sigma_j[i] holds the flattened index of the next slot in the cycle of
        (i, j); slots outside any cycle point to themselves. For public input
        rows, sigma_1[i] is replaced by -(i+1): the grand product then picks up
        exactly the factor that public_input_delta compensates for.

        Returns:
            tuple: (sigma polynomials, identity polynomials)

        Raises:
            PermutationError: if the cycles do not form a valid permutation
        """
        self._require_state()
        n = self.n
        total = PROGRAM_WIDTH * n

        cycles = self.compute_wire_copy_cycles()

        next_slot = list(range(total))
        for cycle in cycles:
            for k, (row, column) in enumerate(cycle):
                next_row, next_column = cycle[(k + 1) % len(cycle)]
                next_slot[column * n + row] = next_column * n + next_row

        self._check_cycles(cycles, next_slot)

        sigma_values = list(next_slot)
        for i in range(self.num_public_inputs):
            sigma_values[i] = -(i + 1)

        self._check_bijection(sigma_values)

        sigma_polys = []
        id_polys = []
        for j in range(PROGRAM_WIDTH):
            column = sigma_values[j * n:(j + 1) * n]
            sigma_polys.append(Fr([value % MODULUS for value in column]))
            id_polys.append(Fr(list(range(j * n, (j + 1) * n))))

        return sigma_polys, id_polys

    def encode_lagrange(self):
        """
        Returns:
            tuple: (L_first, L_last) boundary indicators of the first and last row
        """
        self._require_state()
        L_first = Fr.Zeros(self.n)
        L_last = Fr.Zeros(self.n)
        L_first[0] = 1
        L_last[self.n - 1] = 1
        return L_first, L_last

    def encode_witness(self):
        """
        Fill the wire polynomials from the circuit's variable values.

        Public input i sits in row i of wires 1 and 2 (wire 3 is zero there),
        gate g sits in row num_public_inputs + g, padding rows are zero.

        Returns:
            List of wire polynomials (w_1, w_2, w_3)
        """
        self._require_state()
        circuit = self.circuit
        offset = self.num_public_inputs

        wire_polys = [Fr.Zeros(self.n) for _ in range(PROGRAM_WIDTH)]
        for i, value in enumerate(circuit.get_public_inputs()):
            wire_polys[0][i] = value
            wire_polys[1][i] = value

        for gate in range(self.num_gates):
            for column in range(PROGRAM_WIDTH):
                wire_polys[column][offset + gate] = circuit.get_variable(circuit.wires[column][gate])

        return wire_polys

    def _check_cycles(self, cycles, next_slot):
        # Walking a cycle must return to its start after exactly |cycle| steps
        total = len(next_slot)
        n = self.n
        for cycle in cycles:
            row, column = cycle[0]
            start = column * n + row
            slot = next_slot[start]
            steps = 1
            while slot != start:
                slot = next_slot[slot]
                steps += 1
                if steps > total:
                    raise PermutationError(f"copy cycle starting at slot {start} does not close")
            if steps != len(cycle):
                raise PermutationError(
                    f"copy cycle starting at slot {start} has length {steps}, expected {len(cycle)}"
                )

    def _check_bijection(self, sigma_values):
        # Outside the public-input override slots, sigma together with the
        # compensated targets {n + i} must be exactly the identity multiset
        n = self.n
        m = self.num_public_inputs
        values = sigma_values[m:] + [n + i for i in range(m)]
        if sorted(values) != list(range(len(sigma_values))):
            raise PermutationError("sigma is not a bijection outside the public-input rows")

    def _require_state(self):
        if not hasattr(self, "n"):
            raise ValueError("Call update_state before encoding")


def compute_public_input_delta(public_inputs, beta, gamma, circuit_size):
    """
    Compute the correction factor of the permutation grand product.

    Because sigma_1 maps public-input slot (i, 0) to -(i+1) instead of to
    its cycle successor n+i, the full grand product equals

        Δ = ∏ᵢ (xᵢ + γ + β·(n+i)) / ∏ᵢ (xᵢ + γ - β·(i+1))

    rather than 1. Prover and verifier both call this function.

    Args:
        public_inputs: Public input values, in order
        beta, gamma: Permutation challenges
        circuit_size: n

    Returns:
        Δ as a field element
    """
    numerator = Fr(1)
    denominator = Fr(1)
    numerator_acc = gamma + beta * fr(circuit_size)
    denominator_acc = gamma - beta
    for x in public_inputs:
        numerator = numerator * (numerator_acc + x)      # γ + xᵢ + β(n+i)
        denominator = denominator * (denominator_acc + x)  # γ + xᵢ - β(1+i)
        numerator_acc = numerator_acc + beta
        denominator_acc = denominator_acc - beta
    return numerator / denominator
