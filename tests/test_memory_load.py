import logging

import pytest

from zkgadgets.common.bits import random_bits
from zkgadgets.gadgets import (
    DigestVariable,
    KnapsackCRH,
    MemoryLoadGadget,
    MerkleTree,
    VariableArray,
    address_from_path,
    address_to_bits,
    random_authentication_path,
)
from zkgadgets.relations import Protoboard


class LoadCircuit:
    """Address bits, leaf and root as primary input, then the gadget."""

    def __init__(self, crh, depth):
        digest_len = crh.get_digest_len()
        self.pb = Protoboard(crh.field)
        self.address_bits = VariableArray.allocate(self.pb, depth, "address")
        self.leaf = DigestVariable(self.pb, digest_len, "leaf")
        self.root = DigestVariable(self.pb, digest_len, "root")
        self.pb.set_input_sizes(depth + 2 * digest_len)
        self.gadget = MemoryLoadGadget(self.pb, depth, self.address_bits, self.leaf,
                                       self.root, crh, "load")
        self.gadget.generate_r1cs_constraints()

    def prove(self, leaf_bits, root_bits, path):
        """Witness the gadget, then assign the public input the way a verifier sees it."""
        self.gadget.generate_r1cs_witness(leaf_bits, root_bits, path)
        self.address_bits.fill_with_bits(self.pb, address_to_bits(address_from_path(path),
                                                                   len(path)))
        self.leaf.generate_r1cs_witness(leaf_bits)
        self.root.generate_r1cs_witness(root_bits)
        return self.pb.is_satisfied()


def random_instance(crh, depth, rng):
    leaf = random_bits(crh.get_digest_len(), rng)
    path, root = random_authentication_path(crh, leaf, depth, rng)
    return leaf, root, path


@pytest.mark.parametrize("depth", [1, 2, 3, 5])
def test_well_formed_path_satisfies(crh, rng, depth):
    circuit = LoadCircuit(crh, depth)
    leaf, root, path = random_instance(crh, depth, rng)
    assert circuit.prove(leaf, root, path)


@pytest.mark.parametrize("depth", [1, 2, 4, 7])
def test_constraint_count_matches_formula(crh, depth):
    circuit = LoadCircuit(crh, depth)
    assert circuit.pb.num_constraints() == MemoryLoadGadget.expected_constraints(depth, crh)


def test_constraint_formula_closed_form(crh):
    digest_len = crh.get_digest_len()
    per_hash = 1 + 1 + digest_len
    assert MemoryLoadGadget.expected_constraints(3, crh) == 3 * per_hash + 3 * digest_len \
        + 2 * 3 * digest_len


def test_depth_sixteen_scenario(crh, rng):
    depth = 16
    circuit = LoadCircuit(crh, depth)
    assert circuit.pb.num_constraints() == MemoryLoadGadget.expected_constraints(depth, crh)

    leaf, root, path = random_instance(crh, depth, rng)
    assert circuit.prove(leaf, root, path)
    assert [circuit.pb.val(bit).value for bit in circuit.address_bits] == \
        address_to_bits(address_from_path(path), depth)


def test_depth_one_has_no_intermediate_outputs(crh, rng):
    circuit = LoadCircuit(crh, 1)
    assert circuit.gadget.internal_output == []
    assert circuit.gadget.selectors[0].input is circuit.leaf
    assert circuit.gadget.hashers[0].output_digest is circuit.root
    leaf, root, path = random_instance(crh, 1, rng)
    assert circuit.prove(leaf, root, path)


def test_level_wiring(crh):
    circuit = LoadCircuit(crh, 3)
    gadget = circuit.gadget
    assert gadget.hashers[0].output_digest is circuit.root
    assert gadget.hashers[1].output_digest is gadget.internal_output[0]
    assert gadget.hashers[2].output_digest is gadget.internal_output[1]
    assert gadget.selectors[0].input is gadget.internal_output[0]
    assert gadget.selectors[2].input is circuit.leaf
    assert gadget.selectors[0].is_right == circuit.address_bits[2]
    assert gadget.selectors[2].is_right == circuit.address_bits[0]


def test_path_from_merkle_tree(crh, rng):
    depth = 4
    tree = MerkleTree(crh, depth)
    for address in (3, 9, 14):
        tree.set_leaf(address, random_bits(crh.get_digest_len(), rng))
    circuit = LoadCircuit(crh, depth)
    assert circuit.prove(tree.leaf(9), tree.root(), tree.authentication_path(9))
    assert [circuit.pb.val(bit).value for bit in circuit.address_bits] == address_to_bits(9, depth)


def test_root_bit_flip_is_unsatisfiable(crh, rng):
    circuit = LoadCircuit(crh, 3)
    leaf, root, path = random_instance(crh, 3, rng)
    assert circuit.prove(leaf, root, path)
    bad_root = list(root)
    bad_root[11] ^= 1
    circuit.root.generate_r1cs_witness(bad_root)
    assert not circuit.pb.is_satisfied()


def test_leaf_bit_flip_is_unsatisfiable(crh, rng):
    circuit = LoadCircuit(crh, 3)
    leaf, root, path = random_instance(crh, 3, rng)
    assert circuit.prove(leaf, root, path)
    bad_leaf = list(leaf)
    bad_leaf[0] ^= 1
    circuit.leaf.generate_r1cs_witness(bad_leaf)
    assert not circuit.pb.is_satisfied()


@pytest.mark.parametrize("level", [0, 1, 2])
def test_sibling_bit_flip_is_unsatisfiable(crh, rng, level, caplog):
    circuit = LoadCircuit(crh, 3)
    leaf, root, path = random_instance(crh, 3, rng)
    path[level].aux_digest[5] ^= 1
    with caplog.at_level(logging.WARNING, logger="zkgadgets.gadgets.memory_load"):
        assert not circuit.prove(leaf, root, path)
    assert "computed root differs" in caplog.text


@pytest.mark.parametrize("bit", [0, 1, 2])
def test_address_bit_flip_is_unsatisfiable(crh, rng, bit):
    circuit = LoadCircuit(crh, 3)
    leaf, root, path = random_instance(crh, 3, rng)
    assert circuit.prove(leaf, root, path)
    var = circuit.address_bits[bit]
    circuit.pb.set_val(var, 1 - circuit.pb.val(var).value)
    assert not circuit.pb.is_satisfied()


def test_witness_generation_is_idempotent(crh, rng):
    circuit = LoadCircuit(crh, 4)
    leaf, root, path = random_instance(crh, 4, rng)
    assert circuit.prove(leaf, root, path)
    first = list(circuit.pb.values)
    assert circuit.prove(leaf, root, path)
    assert circuit.pb.values == first


def test_witness_can_be_reused_for_another_instance(crh, rng):
    circuit = LoadCircuit(crh, 3)
    for _ in range(3):
        leaf, root, path = random_instance(crh, 3, rng)
        assert circuit.prove(leaf, root, path)


def test_construction_contract_violations(crh):
    pb = Protoboard(crh.field)
    digest_len = crh.get_digest_len()
    leaf = DigestVariable(pb, digest_len)
    root = DigestVariable(pb, digest_len)
    with pytest.raises(ValueError):
        MemoryLoadGadget(pb, 0, [], leaf, root, crh)
    with pytest.raises(ValueError):
        MemoryLoadGadget(pb, 3, VariableArray.allocate(pb, 2), leaf, root, crh)
    with pytest.raises(ValueError):
        MemoryLoadGadget(pb, 1, VariableArray.allocate(pb, 1), DigestVariable(pb, 8), root, crh)


def test_construction_requires_sampled_randomness(bn254):
    unsampled = KnapsackCRH(bn254)
    pb = Protoboard(bn254)
    leaf = DigestVariable(pb, unsampled.get_digest_len())
    root = DigestVariable(pb, unsampled.get_digest_len())
    with pytest.raises(ValueError):
        MemoryLoadGadget(pb, 1, VariableArray.allocate(pb, 1), leaf, root, unsampled)


def test_witness_contract_violations(crh, rng):
    circuit = LoadCircuit(crh, 2)
    leaf, root, path = random_instance(crh, 2, rng)
    with pytest.raises(ValueError):
        circuit.gadget.generate_r1cs_witness(leaf, root, path[:1])
    with pytest.raises(ValueError):
        circuit.gadget.generate_r1cs_witness(leaf[:-1], root, path)
    with pytest.raises(ValueError):
        circuit.gadget.generate_r1cs_witness(leaf, root + [0], path)
    path[1].aux_digest.append(0)
    with pytest.raises(ValueError):
        circuit.gadget.generate_r1cs_witness(leaf, root, path)
    assert all(value == 0 for value in circuit.pb.values[1:])
