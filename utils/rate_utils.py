# utils/rate_utils.py
# Probability <-> rate conversion under a constant hazard.
#
# Relative risks act on rates, not on per-cycle probabilities, so every
# treatment effect goes  p -> r -> r·RR -> p.

from __future__ import annotations
from typing import Union

import numpy as np

__all__ = ["prob_to_rate", "rate_to_prob", "apply_relative_risk"]

ArrayLike = Union[float, np.ndarray]


def _check_cycle(t: float) -> None:
    if t <= 0:
        raise ValueError(f"cycle length must be > 0; got {t}")


def prob_to_rate(p: ArrayLike, t: float = 1.0) -> ArrayLike:
    """r = −ln(1 − p) / t"""
    _check_cycle(t)
    return -np.log1p(-p) / t


def rate_to_prob(r: ArrayLike, t: float = 1.0) -> ArrayLike:
    """p = 1 − e^(−r·t)"""
    _check_cycle(t)
    return -np.expm1(-r * t)


def apply_relative_risk(p: ArrayLike, rr: ArrayLike, t: float = 1.0) -> ArrayLike:
    """
    Scale the hazard behind probability *p* by *rr* and convert back.

    Where ``rr == 1`` *p* is returned as given; the log1p/expm1 round trip
    can otherwise move it by one ulp.
    """
    if np.ndim(rr) == 0 and np.ndim(p) == 0:
        if rr == 1.0:
            return p
        return rate_to_prob(prob_to_rate(p, t) * rr, t)
    scaled = rate_to_prob(prob_to_rate(p, t) * rr, t)
    return np.where(np.asarray(rr) == 1.0, p, scaled)
