import random

import pytest

from zkgadgets.common.bits import bits_to_int, field_elements_to_bits, int_to_bits, random_bits
from zkgadgets.common.field import BN254_PRIME, FieldElement, PrimeField


def test_arithmetic_wraps_modulo_prime(small_field):
    a = small_field.element(45)
    b = small_field.element(67)
    assert (a + b).value == 15
    assert (a - b).value == 75
    assert (a * b).value == 3015 % 97
    assert (-a).value == 52
    assert (3 - a).value == (3 - 45) % 97


def test_equality_with_ints_and_elements(small_field):
    assert small_field.element(100) == 3
    assert small_field.element(3) == small_field.element(3)
    assert small_field.element(3) != PrimeField(101).element(3)
    assert small_field.zero().is_zero()
    assert small_field.one().is_one()


def test_size_in_bits_and_capacity():
    assert PrimeField(97).size_in_bits == 7
    assert PrimeField(97).capacity == 6
    assert PrimeField(BN254_PRIME).size_in_bits == 254
    assert PrimeField(BN254_PRIME).capacity == 253


def test_invalid_prime_rejected():
    with pytest.raises(ValueError):
        PrimeField(1)


def test_raw_arithmetic(small_field):
    assert small_field.add(90, 10) == 3
    assert small_field.sub(3, 10) == 90
    assert small_field.mul(10, 10) == 3
    assert small_field.neg(0) == 0
    assert int(FieldElement(200, small_field)) == 6


def test_bit_helpers_round_trip():
    assert int_to_bits(6, 4) == [0, 1, 1, 0]
    assert bits_to_int([0, 1, 1, 0]) == 6
    assert field_elements_to_bits([1, 2], 3) == [1, 0, 0, 0, 1, 0]


def test_bit_helpers_reject_bad_input():
    with pytest.raises(ValueError):
        int_to_bits(8, 3)
    with pytest.raises(ValueError):
        int_to_bits(-1, 3)
    with pytest.raises(ValueError):
        bits_to_int([0, 2])


def test_random_bits_is_reproducible(rng):
    bits = random_bits(64, rng)
    assert len(bits) == 64
    assert set(bits) <= {0, 1}
    assert random_bits(64, random.Random(1234)) == bits
