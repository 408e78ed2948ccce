"""
zkgadgets
=========

R1CS gadgets for zero-knowledge proof systems, centred on the memory-load
gadget: an in-circuit check that a leaf digest is stored at a given
address of a Merkle tree with a given root.

Modules:
    - common: Field arithmetic and bit-vector helpers
    - relations: Variables, linear combinations, constraints, protoboard
    - gadgets: Digest, packing, knapsack hash, selector and memory-load gadgets
    - config: Circuit-shape configuration

Quick Start:
    >>> from zkgadgets import CircuitConfig
    >>> config = CircuitConfig(tree_depth=8)
    >>> print(config.summary())
"""

__version__ = "0.1.0"

from . import common
from . import relations
from . import gadgets
from .config import CircuitConfig

__all__ = [
    "common",
    "relations",
    "gadgets",
    "CircuitConfig",
]
