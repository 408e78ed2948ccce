import logging

import pytest

from zkgadgets.relations import ONE, LinearCombination, Protoboard, R1CSConstraint, Variable


def test_constant_one_is_preassigned(small_field):
    pb = Protoboard(small_field)
    assert pb.val(ONE).is_one()
    assert pb.num_variables() == 0
    with pytest.raises(ValueError):
        pb.set_val(ONE, 5)


def test_allocation_is_sequential():
    pb = Protoboard()
    x = pb.allocate("x")
    y = pb.allocate("y")
    assert (x.index, y.index) == (1, 2)
    assert pb.annotations[1] == "x"
    assert pb.val(y).is_zero()


def test_unallocated_variable_rejected():
    pb = Protoboard()
    with pytest.raises(IndexError):
        pb.set_val(Variable(3), 1)


def test_linear_combination_arithmetic(small_field):
    pb = Protoboard(small_field)
    x, y = pb.allocate(), pb.allocate()
    pb.set_val(x, 4)
    pb.set_val(y, 10)
    lc = x + 3 * y - 5
    assert lc.terms == {x.index: 1, y.index: 3, 0: -5}
    assert pb.lc_val(lc) == 29
    assert pb.lc_val(1 - x) == small_field.element(-3)
    assert pb.lc_val(LinearCombination.sum_of([x, y, 2])) == 16
    assert pb.lc_val(-(x - y)) == 6


def test_weighted_requires_matching_lengths():
    with pytest.raises(ValueError):
        LinearCombination.weighted([Variable(1)], [1, 2])


def test_satisfiability_tracks_assignment(small_field):
    pb = Protoboard(small_field)
    x, y, z = pb.allocate(), pb.allocate(), pb.allocate()
    pb.add_r1cs_constraint(R1CSConstraint(x, y, z), "x * y = z")
    pb.add_r1cs_constraint(R1CSConstraint(x, 1 - x, 0), "x is a bit")
    pb.set_val(x, 1)
    pb.set_val(y, 7)
    pb.set_val(z, 7)
    assert pb.is_satisfied()
    assert pb.unsatisfied_constraints() == []

    pb.set_val(z, 8)
    assert not pb.is_satisfied()
    assert pb.unsatisfied_constraints() == [0]


def test_first_violation_is_logged(caplog):
    pb = Protoboard()
    x = pb.allocate()
    pb.add_r1cs_constraint(R1CSConstraint(x, 1, 5), "x equals five")
    with caplog.at_level(logging.DEBUG, logger="zkgadgets.relations.protoboard"):
        assert not pb.is_satisfied()
    assert "x equals five" in caplog.text


def test_input_sizes_split_assignment():
    pb = Protoboard()
    public = [pb.allocate() for _ in range(2)]
    private = pb.allocate()
    for i, var in enumerate(public + [private]):
        pb.set_val(var, i + 10)
    pb.set_input_sizes(2)
    assert pb.num_inputs() == 2
    assert [e.value for e in pb.primary_input()] == [10, 11]
    assert [e.value for e in pb.auxiliary_input()] == [12]
    assert len(pb.full_variable_assignment()) == 3
    with pytest.raises(ValueError):
        pb.set_input_sizes(4)


def test_protoboards_are_independent():
    first, second = Protoboard(), Protoboard()
    x = first.allocate()
    first.set_val(x, 1)
    first.add_r1cs_constraint(R1CSConstraint(x, 1, 1))
    assert second.num_variables() == 0
    assert second.num_constraints() == 0
