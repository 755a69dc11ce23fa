import logging

from field import fr
from honk.arithmetization import NUM_SELECTORS, PROGRAM_WIDTH, SELECTOR_NAMES
from honk.errors import CircuitError

logger = logging.getLogger(__name__)


class CircuitConstructor:
    """
    Records variables, gates and equality assertions of a standard PLONK circuit.

    Variables live in a flat list of field elements and are referenced by index.
    Equality assertions never delete a variable: they merge the two variables'
    equivalence classes in a disjoint-set forest, so that every wire slot bound
    to either of them ends up in one copy-constraint cycle when the circuit is
    compiled.

    Gates and public inputs are append-only. Public inputs occupy the first
    rows of the compiled circuit, followed by the gates in creation order.
    """

    def __init__(self):
        self.variables = []
        self.public_inputs = []
        self.wires = [[] for _ in range(PROGRAM_WIDTH)]
        self.selectors = {name: [] for name in SELECTOR_NAMES}
        self.constant_variable_indices = {}

        # Disjoint-set forest over variable indices
        self._parent = []
        self._class_size = []

        self.failed = False
        self.err = ""

    @property
    def num_gates(self):
        return len(self.wires[0])

    @property
    def num_public_inputs(self):
        return len(self.public_inputs)

    def add_variable(self, value):
        """
        Add a witness variable.

        Args:
            value: Field element or integer

        Returns:
            int: Index of the new variable
        """
        index = len(self.variables)
        self.variables.append(fr(value))
        self._parent.append(index)
        self._class_size.append(1)
        return index

    def add_public_variable(self, value):
        """
        Add a variable whose value is a public input. Public inputs are
        ordered by the time they were added.

        Returns:
            int: Index of the new variable
        """
        index = self.add_variable(value)
        self.public_inputs.append(index)
        return index

    def put_constant_variable(self, value):
        """
        Return a variable fixed to a constant by a gate `1·x - value = 0`.

        The variable is created once per distinct constant and reused afterwards.
        """
        key = int(fr(value))
        if key in self.constant_variable_indices:
            return self.constant_variable_indices[key]
        index = self.add_variable(value)
        zero = fr(0)
        self.create_gate((index, index, index), (zero, fr(1), zero, zero, -fr(value)))
        self.constant_variable_indices[key] = index
        return index

    def real_variable_index(self, index):
        """
        Representative of the equivalence class containing `index`.

        Uses path halving, so repeated lookups stay close to O(1).
        """
        self._check_index(index)
        parent = self._parent
        while parent[index] != index:
            parent[index] = parent[parent[index]]
            index = parent[index]
        return index

    def get_variable(self, index):
        """Value of a variable, read through its equivalence class."""
        return self.variables[self.real_variable_index(index)]

    def get_public_inputs(self):
        """Values of the public inputs, in order."""
        return [self.get_variable(index) for index in self.public_inputs]

    def create_gate(self, wires, selectors):
        """
        Append a gate q_m·a·b + q_1·a + q_2·b + q_3·c + q_c = 0.

        Args:
            wires: Variable indices (a, b, c)
            selectors: Selector values (q_m, q_1, q_2, q_3, q_c)
        """
        if len(wires) != PROGRAM_WIDTH:
            raise CircuitError(f"gate needs {PROGRAM_WIDTH} wires, got {len(wires)}")
        if len(selectors) != NUM_SELECTORS:
            raise CircuitError(f"gate needs {NUM_SELECTORS} selector values, got {len(selectors)}")
        for index in wires:
            self._check_index(index)

        for column, index in zip(self.wires, wires):
            column.append(index)
        for name, value in zip(SELECTOR_NAMES, selectors):
            self.selectors[name].append(fr(value))

    def create_add_gate(self, a, b, c, a_scaling, b_scaling, c_scaling, const_scaling):
        """Gate a_scaling·a + b_scaling·b + c_scaling·c + const_scaling = 0."""
        self.create_gate((a, b, c), (0, a_scaling, b_scaling, c_scaling, const_scaling))

    def create_mul_gate(self, a, b, c, mul_scaling, c_scaling, const_scaling):
        """Gate mul_scaling·a·b + c_scaling·c + const_scaling = 0."""
        self.create_gate((a, b, c), (mul_scaling, 0, 0, c_scaling, const_scaling))

    def create_bool_gate(self, a):
        """Gate a² - a = 0, forcing the variable to be 0 or 1."""
        self.create_gate((a, a, a), (1, -1, 0, 0, 0))

    def assert_equal(self, a, b, msg=""):
        """
        Constrain two variables to be equal by merging their copy cycles.

        A value mismatch marks the circuit as failed (the merge still happens,
        the resulting witness will simply not satisfy the permutation).

        Args:
            a: First variable index
            b: Second variable index
            msg: Message recorded if the values differ
        """
        root_a = self.real_variable_index(a)
        root_b = self.real_variable_index(b)
        if self.variables[root_a] != self.variables[root_b] and not self.failed:
            self.failed = True
            self.err = msg or f"assert_equal: variables {a} and {b} differ"
            logger.warning("Circuit failure: %s", self.err)
        if root_a == root_b:
            return

        value = self.variables[root_a]
        if self._class_size[root_a] < self._class_size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._class_size[root_a] += self._class_size[root_b]
        # The merged class keeps the value of `a`
        self.variables[root_a] = value

    def check_circuit(self):
        """
        Evaluate every gate on the current variable values.

        Returns:
            bool: True if all gates are satisfied and no assertion failed
        """
        if self.failed:
            return False
        q_m, q_1, q_2, q_3, q_c = (self.selectors[name] for name in SELECTOR_NAMES)
        zero = fr(0)
        for i in range(self.num_gates):
            a, b, c = (self.get_variable(column[i]) for column in self.wires)
            if q_m[i] * a * b + q_1[i] * a + q_2[i] * b + q_3[i] * c + q_c[i] != zero:
                return False
        return True

    def _check_index(self, index):
        if not 0 <= index < len(self.variables):
            raise CircuitError(f"variable index {index} out of range")
