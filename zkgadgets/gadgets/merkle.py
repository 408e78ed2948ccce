"""
Off-circuit Merkle Tree Helpers.

The memory-load gadget proves membership of a leaf under a root; the
values it needs (sibling digests, sides, root) are computed here in plain
Python with the same CRH the circuit uses.

Conventions shared with the gadget:
    - An authentication path has one AuthenticationNode per level, and
      path[i] belongs to level i, where level 0 is the level just below
      the root and level depth-1 is the leaf level
    - computed_is_right says whether the digest computed so far (the leaf,
      then each intermediate parent) is the RIGHT child at that level
    - The address encoded by a path has bit (depth-1-i) equal to
      path[i].computed_is_right, so address bit 0 is the leaf-level side

Example for depth 2, address 2 (binary 10):

                root
               /    \\
             N0      N1          level 0: N1 is right, aux = N0
            /  \\    /  \\
           A    B  C    D        level 1: C is left,  aux = D
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import random

from ..common.bits import bits_to_int, int_to_bits, random_bits
from .knapsack import CRHFunction


@dataclass
class AuthenticationNode:
    """
    One level of an authentication path.

    Attributes:
        computed_is_right: The already-computed digest is the right child
        aux_digest: The sibling digest at this level
    """
    computed_is_right: bool
    aux_digest: List[int]


AuthenticationPath = List[AuthenticationNode]


def hash_pair(crh: CRHFunction, left: Sequence[int], right: Sequence[int]) -> List[int]:
    """Parent digest of two children."""
    return crh.get_hash(list(left) + list(right))


def compute_root(crh: CRHFunction, leaf: Sequence[int], path: AuthenticationPath) -> List[int]:
    """Fold an authentication path from the leaf up to the root."""
    current = list(leaf)
    for node in reversed(path):
        if node.computed_is_right:
            current = hash_pair(crh, node.aux_digest, current)
        else:
            current = hash_pair(crh, current, node.aux_digest)
    return current


def address_to_bits(address: int, depth: int) -> List[int]:
    """Address bits as the memory-load gadget expects them (bit 0 first)."""
    return int_to_bits(address, depth)


def bits_to_address(bits: Sequence[int]) -> int:
    return bits_to_int(bits)


def address_from_path(path: AuthenticationPath) -> int:
    """Integer address whose bits match the sides recorded in the path."""
    depth = len(path)
    return sum(1 << (depth - 1 - level) for level, node in enumerate(path) if node.computed_is_right)


def random_authentication_path(crh: CRHFunction, leaf: Sequence[int], depth: int,
                               rng: Optional[random.Random] = None
                               ) -> Tuple[AuthenticationPath, List[int]]:
    """
    Build a random path bottom-up from a leaf.

    Each level gets a random sibling and a random side; the running digest
    is hashed with the sibling in that order.

    Args:
        crh: Hash with randomness sampled for 2 * digest_len inputs
        leaf: Leaf digest
        depth: Number of levels
        rng: Random source (default: a fresh unseeded generator)

    Returns:
        Tuple of (path, root)
    """
    if depth < 1:
        raise ValueError(f"depth must be at least 1, got {depth}")
    rng = rng if rng is not None else random.Random()
    digest_len = crh.get_digest_len()
    path: List[Optional[AuthenticationNode]] = [None] * depth
    current = list(leaf)
    for level in range(depth - 1, -1, -1):
        node = AuthenticationNode(bool(rng.getrandbits(1)), random_bits(digest_len, rng))
        path[level] = node
        if node.computed_is_right:
            current = hash_pair(crh, node.aux_digest, current)
        else:
            current = hash_pair(crh, current, node.aux_digest)
    return path, current


class MerkleTree:
    """
    Sparse binary Merkle tree over 2**depth digest leaves.

    Unset leaves are all-zero digests. Only nodes on the paths of set
    leaves are stored; every other node is the precomputed empty-subtree
    digest for its height.

    Attributes:
        crh: Hash used for every internal node
        depth: Number of levels between leaves and root
    """

    def __init__(self, crh: CRHFunction, depth: int, leaves: Optional[Sequence[Sequence[int]]] = None):
        """
        Args:
            crh: Hash with randomness sampled for 2 * digest_len inputs
            depth: Tree depth (at least 1)
            leaves: Optional initial leaves, placed at addresses 0, 1, ...
        """
        if depth < 1:
            raise ValueError(f"depth must be at least 1, got {depth}")
        self.crh = crh
        self.depth = depth
        self.digest_len = crh.get_digest_len()

        self._empty: List[List[int]] = [[0] * self.digest_len]
        for _ in range(depth):
            self._empty.append(hash_pair(crh, self._empty[-1], self._empty[-1]))
        # height 0 holds leaves, height depth holds the root
        self._nodes: List[Dict[int, List[int]]] = [{} for _ in range(depth + 1)]

        for address, leaf in enumerate(leaves or []):
            self.set_leaf(address, leaf)

    def __repr__(self) -> str:
        return f"MerkleTree(depth={self.depth}, leaves_set={len(self._nodes[0])})"

    @property
    def num_leaves(self) -> int:
        return 1 << self.depth

    def _check_address(self, address: int) -> None:
        if not 0 <= address < self.num_leaves:
            raise IndexError(f"Address {address} out of range for depth {self.depth}")

    def _node(self, height: int, index: int) -> List[int]:
        return self._nodes[height].get(index, self._empty[height])

    def set_leaf(self, address: int, leaf: Sequence[int]) -> None:
        """Write a leaf and rehash its path to the root."""
        self._check_address(address)
        if len(leaf) != self.digest_len:
            raise ValueError(f"Leaf holds {len(leaf)} bits, expected {self.digest_len}")
        self._nodes[0][address] = list(leaf)
        index = address
        for height in range(1, self.depth + 1):
            index //= 2
            self._nodes[height][index] = hash_pair(self.crh, self._node(height - 1, 2 * index),
                                                   self._node(height - 1, 2 * index + 1))

    def leaf(self, address: int) -> List[int]:
        self._check_address(address)
        return list(self._node(0, address))

    def root(self) -> List[int]:
        return list(self._node(self.depth, 0))

    def authentication_path(self, address: int) -> AuthenticationPath:
        """Path for the leaf at address, ordered root-side first."""
        self._check_address(address)
        path: List[Optional[AuthenticationNode]] = [None] * self.depth
        index = address
        for height in range(self.depth):
            sibling = self._node(height, index ^ 1)
            path[self.depth - 1 - height] = AuthenticationNode(bool(index & 1), list(sibling))
            index //= 2
        return path
