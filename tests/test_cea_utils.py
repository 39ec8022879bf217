# tests/test_cea_utils.py
import numpy as np
import pytest

from utils.cea_utils import (
    cost_weights,
    discount_factors,
    discounted_total,
    make_cea,
    utility_weights,
)
from utils.exceptions import DimensionMismatchError
from utils.wxyz_params import get_values


@pytest.mark.parametrize("T", [1, 5, 40])
def test_constant_trace_undiscounted(T):
    trace = np.tile([1.0, 0, 0, 0, 0, 0], (T, 1))
    weights = np.array([100.0, 0, 0, 0, 0, 0])
    assert discounted_total(trace, weights, np.ones(T)) == 100.0 * T


def test_discount_factors():
    np.testing.assert_allclose(discount_factors(0.03, 3), [1, 1 / 1.03, 1 / 1.03 ** 2])
    np.testing.assert_allclose(discount_factors(0.03, 3, cycle_length=0.5),
                               [1, 1.03 ** -0.5, 1 / 1.03])
    np.testing.assert_array_equal(discount_factors(0.0, 4), np.ones(4))
    assert discount_factors(0.05, 0).shape == (0,)
    with pytest.raises(ValueError):
        discount_factors(-1.0, 3)


def test_weights(base_values):
    p = get_values(base_values)
    np.testing.assert_array_equal(utility_weights(p), [0.9, 0.7, 0.4, 0.4, 0, 0])
    np.testing.assert_array_equal(cost_weights(p), [500, 2000, 15000, 5000, 10000, 0])
    np.testing.assert_array_equal(cost_weights(p, treated=True),
                                  [500, 3200, 15000, 5000, 10000, 0])


def test_make_cea_charges_treatment_while_in_x(base_values):
    p = get_values(base_values)
    trace = np.tile([0, 1.0, 0, 0, 0, 0], (2, 1))
    disc = np.array([1.0, 0.5])
    df = make_cea(p, trace, trace, disc, disc)

    assert list(df["Strategy"]) == ["no treatment", "treatment"]
    assert df["Cost"].tolist() == pytest.approx([2000 * 1.5, 3200 * 1.5])
    assert df["Effect"].tolist() == pytest.approx([0.7 * 1.5, 0.7 * 1.5])


def test_separate_discount_vectors_for_costs_and_outcomes(base_values):
    p = get_values(base_values)
    trace = np.tile([1.0, 0, 0, 0, 0, 0], (3, 1))
    df = make_cea(p, trace, trace, disc_o=np.ones(3), disc_c=np.zeros(3))
    assert df["Cost"].tolist() == [0.0, 0.0]
    assert df["Effect"].tolist() == pytest.approx([2.7, 2.7])


def test_dead_states_carry_no_utility(base_values):
    p = get_values(base_values)
    trace = np.tile([0, 0, 0, 0, 0, 1.0], (4, 1))
    df = make_cea(p, trace, trace, np.ones(4), np.ones(4))
    assert df["Effect"].tolist() == [0.0, 0.0]
    assert df["Cost"].tolist() == [0.0, 0.0]


def test_dimension_mismatch():
    trace = np.tile([1.0, 0, 0, 0, 0, 0], (3, 1))
    w = np.ones(6)
    with pytest.raises(DimensionMismatchError):
        discounted_total(trace, np.ones(5), np.ones(3))
    with pytest.raises(DimensionMismatchError):
        discounted_total(trace[:, :5], np.ones(5), np.ones(3))
    with pytest.raises(DimensionMismatchError):
        discounted_total(trace, w, np.ones(4))
    with pytest.raises(DimensionMismatchError):
        discounted_total(trace[0], w, np.ones(1))
