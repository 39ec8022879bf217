# tests/test_distributions.py
import math

import pytest

from utils.distributions import fit_beta, fit_gamma
from utils.exceptions import ConfigurationError


def test_fit_beta_method_of_moments():
    alpha, beta = fit_beta(0.3, 0.05)
    v = 0.3 * 0.7 / 0.05 ** 2 - 1
    assert alpha == pytest.approx(0.3 * v)
    assert beta == pytest.approx(0.7 * v)
    # moments of the fitted Beta reproduce the inputs
    mean = alpha / (alpha + beta)
    var = alpha * beta / ((alpha + beta) ** 2 * (alpha + beta + 1))
    assert mean == pytest.approx(0.3)
    assert math.sqrt(var) == pytest.approx(0.05)


@pytest.mark.parametrize("mean, sd", [(0.5, 0.5), (0.5, 0.6), (0.1, 0.3), (0.3, 0.0)])
def test_fit_beta_rejects_impossible_moments(mean, sd):
    """sd² ≥ mean·(1−mean) (or sd = 0) is a configuration error."""
    with pytest.raises(ConfigurationError):
        fit_beta(mean, sd)


@pytest.mark.parametrize("mean", [0.1, 0.25, 0.5, 0.7, 0.9])
def test_fit_beta_rejects_variance_at_the_boundary(mean):
    """sd² equal to mean·(1−mean) up to round-off has no Beta fit."""
    with pytest.raises(ConfigurationError, match="must be <"):
        fit_beta(mean, math.sqrt(mean * (1.0 - mean)))


def test_fit_beta_rejects_mean_outside_unit_interval():
    with pytest.raises(ConfigurationError):
        fit_beta(1.2, 0.1)


def test_fit_gamma_method_of_moments():
    shape, scale = fit_gamma(2000.0, 400.0)
    assert shape == pytest.approx(25.0)
    assert scale == pytest.approx(80.0)
    assert shape * scale == pytest.approx(2000.0)
    assert math.sqrt(shape) * scale == pytest.approx(400.0)


@pytest.mark.parametrize("mean, sd", [(0.0, 1.0), (-5.0, 1.0), (10.0, 0.0)])
def test_fit_gamma_rejects_degenerate_input(mean, sd):
    with pytest.raises(ConfigurationError):
        fit_gamma(mean, sd)
