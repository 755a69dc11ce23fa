"""
Algebraic relations of the standard arithmetization.

Each relation is a pure function that adds its contribution, scaled by a
factor, to an accumulator:

    accumulate(accumulator, values, params, scaling_factor) -> accumulator

`values` is indexed by `Polynomial` and holds the evaluations of every
polynomial at one row. The entries can equally be whole columns (Fr vectors),
in which case the relation is evaluated on all rows at once. For a satisfying
witness every relation vanishes at every row of the hypercube.
"""

from dataclasses import dataclass
from typing import Callable

from field import Fr
from honk.arithmetization import IDS, SIGMAS, WIRES, Polynomial


@dataclass(frozen=True)
class RelationParameters:
    """Fiat-Shamir scalars shared by all relations."""

    alpha: object = None
    beta: object = None
    gamma: object = None
    zeta: object = None
    public_input_delta: object = None


@dataclass(frozen=True)
class Relation:
    name: str
    degree: int
    accumulate: Callable


def accumulate_arithmetic(accumulator, values, params, scaling_factor):
    # q_m·w_1·w_2 + q_1·w_1 + q_2·w_2 + q_3·w_3 + q_c
    w_1 = values[Polynomial.W_1]
    w_2 = values[Polynomial.W_2]
    w_3 = values[Polynomial.W_3]
    evaluation = (
        values[Polynomial.Q_M] * w_1 * w_2
        + values[Polynomial.Q_1] * w_1
        + values[Polynomial.Q_2] * w_2
        + values[Polynomial.Q_3] * w_3
        + values[Polynomial.Q_C]
    )
    return accumulator + evaluation * scaling_factor


def accumulate_grand_product_computation(accumulator, values, params, scaling_factor):
    """
    Row-to-row consistency of the permutation grand product:

        (z_perm + L_first)·∏ⱼ(wⱼ + β·idⱼ + γ) - (z_perm_shift + Δ·L_last)·∏ⱼ(wⱼ + β·σⱼ + γ)

    The L_first term supplies the starting value 1 of the product, the
    L_last term closes it against the public input correction Δ.
    """
    beta = params.beta
    gamma = params.gamma

    numerator = values[Polynomial.Z_PERM] + values[Polynomial.LAGRANGE_FIRST]
    denominator = (
        values[Polynomial.Z_PERM_SHIFT]
        + params.public_input_delta * values[Polynomial.LAGRANGE_LAST]
    )
    for wire, identity, sigma in zip(WIRES, IDS, SIGMAS):
        numerator = numerator * (values[wire] + beta * values[identity] + gamma)
        denominator = denominator * (values[wire] + beta * values[sigma] + gamma)

    return accumulator + (numerator - denominator) * scaling_factor


def accumulate_grand_product_initialization(accumulator, values, params, scaling_factor):
    """
    Boundary of the grand product: L_first·z_perm + L_last·z_perm_shift.

    z_perm is stored with a zero first entry, so (z_perm + L_first) starts at
    exactly 1; the shifted product must vanish past the last row.
    """
    evaluation = (
        values[Polynomial.LAGRANGE_FIRST] * values[Polynomial.Z_PERM]
        + values[Polynomial.LAGRANGE_LAST] * values[Polynomial.Z_PERM_SHIFT]
    )
    return accumulator + evaluation * scaling_factor


ARITHMETIC = Relation("arithmetic", 3, accumulate_arithmetic)
GRAND_PRODUCT_COMPUTATION = Relation("grand_product_computation", 4, accumulate_grand_product_computation)
GRAND_PRODUCT_INITIALIZATION = Relation(
    "grand_product_initialization", 2, accumulate_grand_product_initialization
)

STANDARD_RELATIONS = (ARITHMETIC, GRAND_PRODUCT_COMPUTATION, GRAND_PRODUCT_INITIALIZATION)


def evaluate_batched_relations(relations, values, params):
    """
    Σₖ αᵏ·Rₖ(values), the relation identity checked by sumcheck.

    Args:
        relations: Sequence of Relation
        values: Per-polynomial evaluations (scalars or columns)
        params: RelationParameters with alpha set

    Returns:
        Batched evaluation (same shape as the entries of values)
    """
    result = Fr(0)
    running_challenge = Fr(1)
    for relation in relations:
        result = relation.accumulate(result, values, params, running_challenge)
        running_challenge = running_challenge * params.alpha
    return result
