"""
Circuit gadgets.

Key Components:
    - VariableArray, PackingGadget: bit runs and bit <-> element packing
    - DigestVariable, BlockVariable: hash outputs and hash input blocks
    - KnapsackCRH and its gadgets: the collision-resistant hash
    - DigestSelectorGadget: route a known digest to the left or right slot
    - MemoryLoadGadget: Merkle authentication path check for a memory address
    - MerkleTree and path helpers: off-circuit values for the gadgets

Usage:
    >>> from zkgadgets.relations import Protoboard
    >>> from zkgadgets.gadgets import (KnapsackCRH, DigestVariable, VariableArray,
    ...                                MemoryLoadGadget, random_authentication_path)
    >>>
    >>> crh = KnapsackCRH()
    >>> crh.sample_randomness(crh.get_block_len())
    >>> pb = Protoboard()
    >>> address_bits = VariableArray.allocate(pb, 3, "address")
    >>> leaf = DigestVariable(pb, crh.get_digest_len(), "leaf")
    >>> root = DigestVariable(pb, crh.get_digest_len(), "root")
    >>> load = MemoryLoadGadget(pb, 3, address_bits, leaf, root, crh, "load")
    >>> load.generate_r1cs_constraints()
    >>>
    >>> leaf_bits = [0] * crh.get_digest_len()
    >>> path, root_bits = random_authentication_path(crh, leaf_bits, 3)
    >>> load.generate_r1cs_witness(leaf_bits, root_bits, path)
    >>> pb.is_satisfied()
    True
"""

from .base import Gadget, generate_boolean_r1cs_constraint
from .basic import VariableArray, PackingGadget
from .digest import DigestVariable, BlockVariable
from .knapsack import (
    CRHFunction,
    KnapsackCRH,
    KnapsackCRHWithFieldOutGadget,
    KnapsackCRHWithBitOutGadget,
)
from .selector import DigestSelectorGadget
from .merkle import (
    AuthenticationNode,
    AuthenticationPath,
    MerkleTree,
    address_from_path,
    address_to_bits,
    bits_to_address,
    compute_root,
    hash_pair,
    random_authentication_path,
)
from .memory_load import MemoryLoadGadget

__all__ = [
    "Gadget",
    "generate_boolean_r1cs_constraint",
    "VariableArray",
    "PackingGadget",
    "DigestVariable",
    "BlockVariable",
    "CRHFunction",
    "KnapsackCRH",
    "KnapsackCRHWithFieldOutGadget",
    "KnapsackCRHWithBitOutGadget",
    "DigestSelectorGadget",
    "AuthenticationNode",
    "AuthenticationPath",
    "MerkleTree",
    "address_from_path",
    "address_to_bits",
    "bits_to_address",
    "compute_root",
    "hash_pair",
    "random_authentication_path",
    "MemoryLoadGadget",
]
