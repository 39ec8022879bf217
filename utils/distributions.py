# utils/distributions.py
# Method-of-moments fits used by the parameter sampler.

from __future__ import annotations

import math
from typing import Tuple

from utils.exceptions import ConfigurationError

__all__ = ["fit_beta", "fit_gamma"]


def _require_positive(label: str, value: float, *, mean: float, sd: float) -> None:
    if not (math.isfinite(value) and value > 0.0):
        raise ConfigurationError(
            f"{label} = {value!r} is not a positive finite number "
            f"(mean={mean}, sd={sd})"
        )


def fit_beta(mean: float, sd: float) -> Tuple[float, float]:
    """
    Beta(α, β) with the given mean and standard deviation:

        v = mean·(1 − mean)/sd² − 1
        α = mean·v ,   β = (1 − mean)·v

    Raises
    ------
    ConfigurationError
        If ``sd <= 0`` or ``sd² >= mean·(1 − mean)``, i.e. when either
        shape parameter would be zero, negative or infinite.
    """
    if sd <= 0.0:
        raise ConfigurationError(f"Beta sd must be > 0; got {sd}")
    var_max = mean * (1.0 - mean)
    if sd ** 2 >= var_max or math.isclose(sd ** 2, var_max):
        raise ConfigurationError(
            f"Beta sd² = {sd ** 2} must be < mean·(1 − mean) = {var_max} "
            f"(mean={mean}, sd={sd})"
        )
    v = mean * (1.0 - mean) / sd ** 2 - 1.0
    alpha = mean * v
    beta = (1.0 - mean) * v
    _require_positive("Beta alpha", alpha, mean=mean, sd=sd)
    _require_positive("Beta beta", beta, mean=mean, sd=sd)
    return alpha, beta


def fit_gamma(mean: float, sd: float) -> Tuple[float, float]:
    """
    Gamma(shape, scale) with the given mean and standard deviation:

        shape = mean² / sd² ,   scale = sd² / mean
    """
    if sd <= 0.0:
        raise ConfigurationError(f"Gamma sd must be > 0; got {sd}")
    if mean <= 0.0:
        raise ConfigurationError(f"Gamma mean must be > 0; got {mean}")
    shape = mean ** 2 / sd ** 2
    scale = sd ** 2 / mean
    _require_positive("Gamma shape", shape, mean=mean, sd=sd)
    _require_positive("Gamma scale", scale, mean=mean, sd=sd)
    return shape, scale
