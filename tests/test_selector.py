import pytest

from zkgadgets.gadgets import DigestSelectorGadget, DigestVariable
from zkgadgets.relations import Protoboard


SIZE = 6


def build_selector(field):
    pb = Protoboard(field)
    known = DigestVariable(pb, SIZE, "known")
    is_right = pb.allocate("is_right")
    left = DigestVariable(pb, SIZE, "left")
    right = DigestVariable(pb, SIZE, "right")
    selector = DigestSelectorGadget(pb, SIZE, known, is_right, left, right, "selector")
    selector.generate_r1cs_constraints()
    return pb, known, is_right, left, right, selector


def test_one_constraint_per_bit(small_field):
    pb, *_ = build_selector(small_field)
    assert pb.num_constraints() == DigestSelectorGadget.expected_constraints(SIZE) == SIZE


@pytest.mark.parametrize("is_right_value", [0, 1])
def test_known_digest_lands_on_selected_side(small_field, is_right_value):
    pb, known, is_right, left, right, selector = build_selector(small_field)
    known_bits = [1, 0, 1, 1, 0, 0]
    sibling_bits = [0, 1, 1, 0, 1, 0]
    known.fill_with_bits(known_bits)
    pb.set_val(is_right, is_right_value)
    free_side, selected_side = (left, right) if is_right_value else (right, left)
    free_side.fill_with_bits(sibling_bits)

    selector.generate_r1cs_witness()

    assert selected_side.get_digest() == known_bits
    assert free_side.get_digest() == sibling_bits
    assert pb.is_satisfied()


def test_free_side_is_unconstrained(small_field):
    pb, known, is_right, left, right, selector = build_selector(small_field)
    known.fill_with_bits([1] * SIZE)
    pb.set_val(is_right, 0)
    selector.generate_r1cs_witness()
    for sibling in ([0] * SIZE, [1, 0] * 3, [1] * SIZE):
        right.fill_with_bits(sibling)
        assert pb.is_satisfied()


def test_flipping_control_bit_breaks_selection(small_field):
    pb, known, is_right, left, right, selector = build_selector(small_field)
    known.fill_with_bits([1, 1, 1, 0, 0, 0])
    right.fill_with_bits([0, 0, 0, 1, 1, 1])
    pb.set_val(is_right, 0)
    selector.generate_r1cs_witness()
    assert pb.is_satisfied()

    pb.set_val(is_right, 1)
    assert not pb.is_satisfied()


def test_mismatched_digest_sizes_rejected(small_field):
    pb = Protoboard(small_field)
    known = DigestVariable(pb, SIZE)
    with pytest.raises(ValueError):
        DigestSelectorGadget(pb, SIZE, known, pb.allocate(),
                             DigestVariable(pb, SIZE), DigestVariable(pb, SIZE - 1))
