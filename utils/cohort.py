# utils/cohort.py
# Markov trace: the cohort distribution over the six states, cycle by cycle.

from __future__ import annotations

import numpy as np

from utils.exceptions import DimensionMismatchError
from utils.states import N_STATES, State
from utils.wxyz_params import WXYZParams

__all__ = ["initial_distribution", "run_cohort"]


def initial_distribution(params: WXYZParams) -> np.ndarray:
    """Cohort of size 1 split between W and X by prevalence."""
    v0 = np.zeros(N_STATES, dtype=float)
    v0[State.W] = params.p_W
    v0[State.X] = params.p_X
    return v0


def run_cohort(matrix: np.ndarray, v0: np.ndarray, n_cycles: int) -> np.ndarray:
    """
    Advance *v0* through *matrix* and record every cycle.

        trace[0] = v0
        trace[t] = trace[t−1] @ matrix        t = 1 … n_cycles−1

    Parameters
    ----------
    matrix : ndarray (6, 6)
        Row-stochastic transition matrix.
    v0 : ndarray (6,)
        Initial distribution.
    n_cycles : int
        Model horizon T; the trace has T rows (T = 0 gives an empty trace).

    Returns
    -------
    ndarray (n_cycles, 6)
    """
    if n_cycles < 0:
        raise ValueError(f"n_cycles must be ≥ 0; got {n_cycles}")
    matrix = np.asarray(matrix, dtype=float)
    v0 = np.asarray(v0, dtype=float)
    if matrix.shape != (N_STATES, N_STATES):
        raise DimensionMismatchError(f"transition matrix must be 6×6; got {matrix.shape}")
    if v0.shape != (N_STATES,):
        raise DimensionMismatchError(f"initial distribution must have 6 entries; got {v0.shape}")

    trace = np.empty((n_cycles, N_STATES), dtype=float)
    if n_cycles == 0:
        return trace
    trace[0] = v0
    for t in range(1, n_cycles):
        trace[t] = trace[t - 1] @ matrix
    return trace
