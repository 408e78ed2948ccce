"""
Pytest configuration for zkgadgets tests.

The BN254 knapsack parameters are sampled once per session and shared, the
same way one circuit shares one set of public hash parameters.
"""

import random
import sys
from pathlib import Path

import pytest

# Make the package importable from a plain checkout (tests/ sits beside zkgadgets/)
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from zkgadgets.common.field import PrimeField, bn254_field
from zkgadgets.gadgets import KnapsackCRH


@pytest.fixture(scope="session")
def bn254():
    return bn254_field()


@pytest.fixture(scope="session")
def crh(bn254):
    knapsack = KnapsackCRH(bn254)
    knapsack.sample_randomness(knapsack.get_block_len())
    return knapsack


@pytest.fixture
def small_field():
    return PrimeField(97)


@pytest.fixture
def small_crh(small_field):
    knapsack = KnapsackCRH(small_field)
    knapsack.sample_randomness(knapsack.get_block_len())
    return knapsack


@pytest.fixture
def rng():
    return random.Random(1234)
