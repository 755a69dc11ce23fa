"""
Static layout of the standard (width-3) arithmetization.

Every polynomial role has a fixed index. Multivariate evaluations produced by
sumcheck, the powers of the batching challenge rho and the verification key
commitments all follow this ordering: precomputed polynomials first, then the
prover's witness polynomials, then the shifted grand product.
"""

from enum import IntEnum

PROGRAM_WIDTH = 3

SELECTOR_NAMES = ("q_m", "q_1", "q_2", "q_3", "q_c")


class Polynomial(IntEnum):
    Q_M = 0
    Q_1 = 1
    Q_2 = 2
    Q_3 = 3
    Q_C = 4
    SIGMA_1 = 5
    SIGMA_2 = 6
    SIGMA_3 = 7
    ID_1 = 8
    ID_2 = 9
    ID_3 = 10
    LAGRANGE_FIRST = 11
    LAGRANGE_LAST = 12
    W_1 = 13
    W_2 = 14
    W_3 = 15
    Z_PERM = 16
    Z_PERM_SHIFT = 17


NUM_SELECTORS = len(SELECTOR_NAMES)
NUM_PRECOMPUTED_POLYNOMIALS = int(Polynomial.W_1)
NUM_UNSHIFTED_POLYNOMIALS = int(Polynomial.Z_PERM_SHIFT)
NUM_POLYNOMIALS = len(Polynomial)

SIGMAS = (Polynomial.SIGMA_1, Polynomial.SIGMA_2, Polynomial.SIGMA_3)
IDS = (Polynomial.ID_1, Polynomial.ID_2, Polynomial.ID_3)
WIRES = (Polynomial.W_1, Polynomial.W_2, Polynomial.W_3)
