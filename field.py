"""
BN254 scalar field arithmetic using the galois library.

This module provides a thin wrapper around galois for the scalar field Fr of
the BN254 curve (the group order of py_ecc's optimized_bn128 G1). Every field
element handled by the proof system is an element (or a vector of elements)
of ``Fr``.
"""

import galois
from py_ecc.optimized_bn128 import curve_order

MODULUS = curve_order

# 5 generates Fr*; passing it avoids factoring MODULUS - 1 on import
Fr = galois.GF(MODULUS, primitive_element=5, verify=False)

FIELD_SIZE_BYTES = 32


def fr(value):
    """
    Map an integer (possibly negative or larger than the modulus) into Fr.

    Args:
        value: Python int or an element of Fr

    Returns:
        0-dimensional Fr array
    """
    if isinstance(value, Fr):
        return value
    return Fr(int(value) % MODULUS)


def random_element():
    """Sample a uniformly random element of Fr."""
    return Fr.Random()


def powers(x, count):
    """
    Compute [1, x, x^2, ..., x^(count-1)] as an Fr vector.

    Args:
        x: Base element
        count: Number of powers

    Returns:
        Fr array of length count
    """
    result = Fr.Ones(count)
    for i in range(1, count):
        result[i] = result[i - 1] * x
    return result


def to_bytes(x):
    """Encode a field element as 32 big-endian bytes."""
    return int(x).to_bytes(FIELD_SIZE_BYTES, byteorder="big")


def from_bytes(data):
    """
    Decode 32 big-endian bytes into a field element.

    Raises:
        ValueError: if the encoding is not canonical (value >= MODULUS)
    """
    value = int.from_bytes(data, byteorder="big")
    if value >= MODULUS:
        raise ValueError("non-canonical field element encoding")
    return Fr(value)
