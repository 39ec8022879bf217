# utils/cea_utils.py
# Discounted costs and QALYs from a pair of Markov traces.
from __future__ import annotations

from typing import Union

import numpy as np
import pandas as pd

from utils.exceptions import DimensionMismatchError
from utils.states import N_STATES, STRATEGIES
from utils.wxyz_params import WXYZParams

__all__ = [
    "discount_factors",
    "utility_weights",
    "cost_weights",
    "discounted_total",
    "make_cea",
]

Number = Union[int, float]


def discount_factors(rate: Number, n_cycles: int, cycle_length: float = 1.0) -> np.ndarray:
    """
    Per-cycle discount factors, cycle 0 undiscounted:

        d_t = 1 / (1 + rate)^(t · cycle_length)      t = 0 … n_cycles−1
    """
    if rate <= -1.0:
        raise ValueError(f"discount rate must be > -1; got {rate}")
    if n_cycles < 0:
        raise ValueError(f"n_cycles must be ≥ 0; got {n_cycles}")
    t = np.arange(n_cycles, dtype=float)
    return 1.0 / (1.0 + rate) ** (t * cycle_length)


def utility_weights(params: WXYZParams) -> np.ndarray:
    """[u_W, u_X, u_Y, u_Y, 0, 0]; Ytransition carries Y's utility."""
    return np.array([params.u_W, params.u_X, params.u_Y, params.u_Y, 0.0, 0.0])


def cost_weights(params: WXYZParams, treated: bool = False) -> np.ndarray:
    """[c_W, c_X (+ c_trt), c_Ytransition, c_Y, c_Ztransition, 0]"""
    c_X = params.c_X + params.c_trt if treated else params.c_X
    return np.array([params.c_W, c_X, params.c_Ytransition,
                     params.c_Y, params.c_Ztransition, 0.0])


def discounted_total(trace: np.ndarray, weights: np.ndarray, disc: np.ndarray) -> float:
    """
    Σ_t disc_t · (trace_t · weights)

    Raises
    ------
    DimensionMismatchError
        If trace width or weight length ≠ 6, or len(disc) ≠ number of
        trace rows.
    """
    trace = np.asarray(trace, dtype=float)
    weights = np.asarray(weights, dtype=float)
    disc = np.asarray(disc, dtype=float)

    if trace.ndim != 2 or trace.shape[1] != N_STATES:
        raise DimensionMismatchError(f"trace must be T×{N_STATES}; got {trace.shape}")
    if weights.shape != (N_STATES,):
        raise DimensionMismatchError(f"weight vector must have {N_STATES} entries; got {weights.shape}")
    if disc.shape != (trace.shape[0],):
        raise DimensionMismatchError(
            f"discount vector length {disc.shape} does not match horizon {trace.shape[0]}"
        )

    per_cycle = trace @ weights
    return float(per_cycle @ disc)


def make_cea(
    params: WXYZParams,
    trace_notrt: np.ndarray,
    trace_trt: np.ndarray,
    disc_o: np.ndarray,
    disc_c: np.ndarray,
) -> pd.DataFrame:
    """
    Total discounted cost and QALYs per arm.

    Parameters
    ----------
    params : WXYZParams
        Source of the state cost and utility weights.
    trace_notrt, trace_trt : ndarray (T, 6)
        Markov traces of the two arms.
    disc_o, disc_c : ndarray (T,)
        Discount factors for outcomes and for costs.

    Returns
    -------
    pandas.DataFrame
        Columns Strategy, Cost, Effect; rows "no treatment", "treatment".
    """
    v_u = utility_weights(params)

    cost = [
        discounted_total(trace_notrt, cost_weights(params, treated=False), disc_c),
        discounted_total(trace_trt,   cost_weights(params, treated=True),  disc_c),
    ]
    effect = [
        discounted_total(trace_notrt, v_u, disc_o),
        discounted_total(trace_trt,   v_u, disc_o),
    ]
    return pd.DataFrame({"Strategy": list(STRATEGIES), "Cost": cost, "Effect": effect})
