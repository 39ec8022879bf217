# utils/matrix_builder.py
# Per-iteration transition matrices for the two arms.
#
# Layout (rows = from, cols = to), every unset cell is an explicit 0:
#
#                W          X          Ytr      Y          Ztr     Z
#   W      p_Wreturn   p_WtoX
#   X      p_XtoW      p_Xreturn  p_XtoY
#   Ytr                                     p_Yreturn   p_YtoZ
#   Y                                       p_Yreturn   p_YtoZ
#   Ztr                                                          1
#   Z                                                            1
#
# The treated matrix differs only in X→X and X→Ytr.
from __future__ import annotations

import logging
from typing import Final, NamedTuple

import numpy as np
import pandas as pd

from utils.exceptions import InvariantViolationError
from utils.states import N_STATES, STATE_NAMES, State
from utils.wxyz_params import WXYZParams

__all__ = ["TransitionMatrices", "make_matrix", "check_stochastic", "as_frame", "ROW_SUM_TOL"]

ROW_SUM_TOL: Final = 1e-9


class TransitionMatrices(NamedTuple):
    notrt: np.ndarray
    trt:   np.ndarray


def check_stochastic(m: np.ndarray, label: str = "matrix") -> None:
    """
    Fail loudly unless *m* is a 6×6 row-stochastic matrix: entries in
    [0,1] and every row summing to 1 within ``ROW_SUM_TOL``.
    """
    if m.shape != (N_STATES, N_STATES):
        raise InvariantViolationError(
            f"{label}: expected shape {(N_STATES, N_STATES)}, got {m.shape}"
        )
    if not np.all(np.isfinite(m)):
        raise InvariantViolationError(f"{label}: non-finite transition probability")

    out_of_range = (m < -ROW_SUM_TOL) | (m > 1.0 + ROW_SUM_TOL)
    if out_of_range.any():
        i, j = np.argwhere(out_of_range)[0]
        raise InvariantViolationError(
            f"{label}: P({STATE_NAMES[i]}→{STATE_NAMES[j]}) = {m[i, j]:.6g} outside [0,1]"
        )

    sums = m.sum(axis=1)
    bad = np.flatnonzero(np.abs(sums - 1.0) > ROW_SUM_TOL)
    if bad.size:
        i = int(bad[0])
        raise InvariantViolationError(
            f"{label}: row {STATE_NAMES[i]} sums to {sums[i]:.12g}, not 1"
        )


def make_matrix(params: WXYZParams) -> TransitionMatrices:
    """Build and check the no-treatment and treatment matrices."""
    m_notrt = np.zeros((N_STATES, N_STATES), dtype=float)

    # from W
    m_notrt[State.W, State.W] = params.p_Wreturn
    m_notrt[State.W, State.X] = params.p_WtoX

    # from X
    m_notrt[State.X, State.W]            = params.p_XtoW
    m_notrt[State.X, State.X]            = params.p_Xreturn
    m_notrt[State.X, State.Y_TRANSITION] = params.p_XtoY

    # from Y (entry state behaves like Y for one cycle)
    m_notrt[State.Y_TRANSITION, State.Y]            = params.p_Yreturn
    m_notrt[State.Y, State.Y]                       = params.p_Yreturn
    m_notrt[State.Y_TRANSITION, State.Z_TRANSITION] = params.p_YtoZ
    m_notrt[State.Y, State.Z_TRANSITION]            = params.p_YtoZ

    # from Z
    m_notrt[State.Z_TRANSITION, State.Z] = 1.0
    m_notrt[State.Z, State.Z]            = 1.0

    m_trt = m_notrt.copy()
    m_trt[State.X, State.X]            = params.p_Xreturn_trt
    m_trt[State.X, State.Y_TRANSITION] = params.p_XtoY_trt

    check_stochastic(m_notrt, "no treatment")
    check_stochastic(m_trt, "treatment")
    logging.debug("make_matrix: X row notrt=%s trt=%s",
                  np.round(m_notrt[State.X], 4), np.round(m_trt[State.X], 4))
    return TransitionMatrices(notrt=m_notrt, trt=m_trt)


def as_frame(m: np.ndarray) -> pd.DataFrame:
    """Label a matrix (or trace) with state names for inspection."""
    if m.shape[0] == N_STATES and m.shape[1] == N_STATES:
        return pd.DataFrame(m, index=list(STATE_NAMES), columns=list(STATE_NAMES))
    return pd.DataFrame(m, columns=list(STATE_NAMES))
