"""
Memory-Load Gadget: Merkle authentication path check.

Proves that a leaf digest sits at the position given by address_bits in a
Merkle tree with the given root. Memory is modelled as the leaves of the
tree, so "load address a" means "the leaf at address a has this value".

Per level i (0 = just below the root, tree_depth-1 = leaf level):

        parent_i  =  H( left_i || right_i )
        child_i  --selector(address_bits[tree_depth-1-i])-->  left_i or right_i

    parent_0 is the root; parent_i is internal_output[i-1] otherwise.
    child_{tree_depth-1} is the leaf; child_i is internal_output[i] otherwise.

The selector pins the child into the side chosen by its address bit and
leaves the other side free for the sibling, so the proof does not reveal
which side the path took.

Constraint families per level:
    - bitness of left_i and right_i      2 * digest_len
    - hash, input bitness disabled       crh.expected_constraints(block_len)
    - selector                           digest_len

Phases:
    1. __init__                    allocate digests, build hashers and selectors
    2. generate_r1cs_constraints  emit all three families, once
    3. generate_r1cs_witness      per instance, leaf to root
"""

from __future__ import annotations
from typing import List, Sequence, TYPE_CHECKING
import logging

from ..relations.r1cs import Variable
from .base import Gadget
from .digest import BlockVariable, DigestVariable
from .knapsack import CRHFunction
from .merkle import AuthenticationPath
from .selector import DigestSelectorGadget

if TYPE_CHECKING:
    from ..relations.protoboard import Protoboard

logger = logging.getLogger(__name__)


class MemoryLoadGadget(Gadget):
    """
    Check that leaf is stored at address_bits under root.

    Attributes:
        tree_depth: Number of hash levels
        digest_size: Bits per digest (the CRH output width)
        internal_left, internal_right: Per-level hash input halves
        internal_output: Intermediate parents, levels 1 .. tree_depth-1
        hashers: One CRH gadget per level
        selectors: One digest selector per level

    Example:
        >>> crh = KnapsackCRH()
        >>> crh.sample_randomness(crh.get_block_len())
        >>> pb = Protoboard()
        >>> address_bits = VariableArray.allocate(pb, 4, "address")
        >>> leaf = DigestVariable(pb, crh.get_digest_len(), "leaf")
        >>> root = DigestVariable(pb, crh.get_digest_len(), "root")
        >>> load = MemoryLoadGadget(pb, 4, address_bits, leaf, root, crh, "load")
        >>> load.generate_r1cs_constraints()
        >>> pb.num_constraints() == MemoryLoadGadget.expected_constraints(4, crh)
        True
    """

    def __init__(self, pb: 'Protoboard', tree_depth: int, address_bits: Sequence[Variable],
                 leaf: DigestVariable, root: DigestVariable, crh: CRHFunction,
                 annotation_prefix: str = ""):
        """
        Allocate the per-level digests and wire up hashers and selectors.

        Args:
            pb: Protoboard to build on
            tree_depth: Number of levels (at least 1)
            address_bits: tree_depth address bits, least significant first
            leaf: Leaf digest (not owned)
            root: Root digest (not owned)
            crh: Shared hash parameters, sampled for 2 * digest_len inputs

        Raises:
            ValueError: On a zero depth, an address of the wrong length,
                digests of the wrong width, or unsampled hash randomness
        """
        super().__init__(pb, annotation_prefix)
        if tree_depth <= 0:
            raise ValueError(f"tree_depth must be positive, got {tree_depth}")
        if len(address_bits) != tree_depth:
            raise ValueError(f"Expected {tree_depth} address bits, got {len(address_bits)}")

        self.digest_size = crh.get_digest_len()
        for name, digest in (("leaf", leaf), ("root", root)):
            if digest.digest_size != self.digest_size:
                raise ValueError(f"{name} digest holds {digest.digest_size} bits, "
                                 f"hash produces {self.digest_size}")
        if not crh.has_randomness(2 * self.digest_size):
            raise ValueError(f"Hash randomness must be sampled for {2 * self.digest_size}-bit "
                             f"inputs before building a memory-load gadget")

        self.tree_depth = tree_depth
        self.address_bits = list(address_bits)
        self.leaf = leaf
        self.root = root
        self.crh = crh

        self.internal_left = [DigestVariable(pb, self.digest_size, self.annotate(f"internal_left_{i}"))
                              for i in range(tree_depth)]
        self.internal_right = [DigestVariable(pb, self.digest_size, self.annotate(f"internal_right_{i}"))
                               for i in range(tree_depth)]
        self.internal_output = [DigestVariable(pb, self.digest_size, self.annotate(f"internal_output_{i}"))
                                for i in range(tree_depth - 1)]

        self.blocks: List[BlockVariable] = []
        self.hashers: List[Gadget] = []
        self.selectors: List[DigestSelectorGadget] = []
        for i in range(tree_depth):
            block = BlockVariable(pb, [self.internal_left[i], self.internal_right[i]],
                                  self.annotate(f"block_{i}"))
            self.blocks.append(block)
            self.hashers.append(crh.gadget(pb, block, self._parent_digest(i),
                                           self.annotate(f"hasher_{i}")))
            self.selectors.append(DigestSelectorGadget(
                pb, self.digest_size, self._child_digest(i), self.address_bits[tree_depth - 1 - i],
                self.internal_left[i], self.internal_right[i], self.annotate(f"selector_{i}")))

    def __repr__(self) -> str:
        return f"MemoryLoadGadget('{self.annotation_prefix}', depth={self.tree_depth})"

    def _parent_digest(self, level: int) -> DigestVariable:
        """Digest the level's hash writes into."""
        return self.root if level == 0 else self.internal_output[level - 1]

    def _child_digest(self, level: int) -> DigestVariable:
        """Already-known digest the level's selector routes."""
        return self.leaf if level == self.tree_depth - 1 else self.internal_output[level]

    def generate_r1cs_constraints(self) -> None:
        """
        Emit bitness, hash and selector constraints for every level.

        Leaf, root and address bits are not bit-checked here; they belong to
        the caller (typically as primary input).
        """
        start = self.pb.num_constraints()
        for i in range(self.tree_depth):
            self.internal_left[i].generate_r1cs_constraints()
            self.internal_right[i].generate_r1cs_constraints()
            self.hashers[i].generate_r1cs_constraints(False)
            self.selectors[i].generate_r1cs_constraints()

        emitted = self.pb.num_constraints() - start
        expected = self.expected_constraints(self.tree_depth, self.crh)
        assert emitted == expected, f"memory load emitted {emitted} constraints, expected {expected}"
        logger.debug("%s: %d constraints for depth %d", self.annotation_prefix or "memory_load",
                     emitted, self.tree_depth)

    def generate_r1cs_witness(self, leaf: Sequence[int], root: Sequence[int],
                              path: AuthenticationPath) -> None:
        """
        Fill every internal variable for one instance.

        Sets the address bits from the path, fills the leaf, then walks
        from the leaf level up to the root: sibling into the free side,
        selector propagates the known side, hasher computes the parent.

        The root argument is only compared with the computed root; the
        caller assigns the public root separately.

        Args:
            leaf: Leaf digest bits
            root: Expected root digest bits
            path: tree_depth AuthenticationNodes, path[i] for level i

        Raises:
            ValueError: On any length mismatch (checked before writing)
        """
        if len(path) != self.tree_depth:
            raise ValueError(f"Authentication path has {len(path)} levels, expected {self.tree_depth}")
        if len(root) != self.digest_size:
            raise ValueError(f"Root holds {len(root)} bits, expected {self.digest_size}")
        if len(leaf) != self.digest_size:
            raise ValueError(f"Leaf holds {len(leaf)} bits, expected {self.digest_size}")
        for i, node in enumerate(path):
            if len(node.aux_digest) != self.digest_size:
                raise ValueError(f"Sibling at level {i} holds {len(node.aux_digest)} bits, "
                                 f"expected {self.digest_size}")

        self.leaf.generate_r1cs_witness(leaf)

        for i in range(self.tree_depth - 1, -1, -1):
            node = path[i]
            address_bit = self.address_bits[self.tree_depth - 1 - i]
            if node.computed_is_right:
                self.pb.set_val(address_bit, 1)
                self.internal_left[i].generate_r1cs_witness(node.aux_digest)
            else:
                self.pb.set_val(address_bit, 0)
                self.internal_right[i].generate_r1cs_witness(node.aux_digest)

            self.selectors[i].generate_r1cs_witness()
            self.hashers[i].generate_r1cs_witness()

        if self.root.get_digest() != list(root):
            logger.warning("%s: computed root differs from the supplied root; the circuit "
                           "will not be satisfied once the public root is assigned",
                           self.annotation_prefix or "memory_load")

    @staticmethod
    def expected_constraints(tree_depth: int, crh: CRHFunction) -> int:
        """
        Closed-form constraint count of generate_r1cs_constraints().

        Args:
            tree_depth: Number of levels
            crh: Hash whose gadget is used at every level
        """
        digest_len = crh.get_digest_len()
        hasher_constraints = tree_depth * crh.expected_constraints(2 * digest_len, False)
        propagator_constraints = tree_depth * DigestSelectorGadget.expected_constraints(digest_len)
        authentication_path_constraints = 2 * tree_depth * digest_len
        return hasher_constraints + propagator_constraints + authentication_path_constraints
