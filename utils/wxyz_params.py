# utils/wxyz_params.py
"""
WXYZParams

Immutable bundle of every scalar one model run needs:

    • base per-cycle transition probabilities and prevalence
    • state costs, the per-cycle treatment cost, state utilities
    • relative risk of treatment on the X → Y hazard
    • derived "return" (stay) probabilities and the treated X row

`get_values()` builds one from a row of sampled (or deterministic) values
keyed by the names used in the parameter table.  Nothing is clamped or
range-checked here; out-of-range inputs surface when the transition
matrices are checked.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Final, Mapping

from utils.exceptions import ConfigurationError
from utils.rate_utils import apply_relative_risk

__all__ = ["WXYZParams", "get_values", "INPUT_NAMES"]

# parameter-table name → dataclass field
INPUT_NAMES: Final = {
    "P_WtoX":        "p_WtoX",
    "P_XtoW":        "p_XtoW",
    "P_XtoY":        "p_XtoY",
    "P_YtoZ":        "p_YtoZ",
    "P_W":           "p_W",
    "C_W":           "c_W",
    "C_X":           "c_X",
    "C_Ytransition": "c_Ytransition",
    "C_Y":           "c_Y",
    "C_Ztransition": "c_Ztransition",
    "C_trt":         "c_trt",
    "U_W":           "u_W",
    "U_X":           "u_X",
    "U_Y":           "u_Y",
    "RR_Treat":      "rr_treat",
}


@dataclass(slots=True, frozen=True)
class WXYZParams:
    # transition probabilities (per cycle)
    p_WtoX:        float
    p_XtoW:        float
    p_XtoY:        float
    p_YtoZ:        float
    # prevalence of W at cycle 0
    p_W:           float

    # costs
    c_W:           float
    c_X:           float
    c_Ytransition: float
    c_Y:           float
    c_Ztransition: float
    c_trt:         float     # added to c_X in the treatment arm

    # utilities
    u_W:           float
    u_X:           float
    u_Y:           float

    rr_treat:      float     # hazard ratio on X → Y

    # derived
    p_Wreturn:     float
    p_Xreturn:     float
    p_Yreturn:     float
    p_X:           float
    p_XtoY_trt:    float
    p_Xreturn_trt: float


def get_values(invals: Mapping[str, float]) -> WXYZParams:
    """
    Derive the full parameter set for one iteration.

        p_Wreturn     = 1 − p_WtoX
        p_Xreturn     = 1 − (p_XtoW + p_XtoY)
        p_Yreturn     = 1 − p_YtoZ
        p_X           = 1 − p_W
        p_XtoY_trt    = rate_to_prob(prob_to_rate(p_XtoY, 1) · RR_Treat, 1)
        p_Xreturn_trt = 1 − (p_XtoW + p_XtoY_trt)
    """
    missing = [name for name in INPUT_NAMES if name not in invals]
    if missing:
        raise ConfigurationError(f"missing model parameters: {missing}")
    raw = {field: float(invals[name]) for name, field in INPUT_NAMES.items()}

    p_XtoY_trt = float(apply_relative_risk(raw["p_XtoY"], raw["rr_treat"], 1.0))

    return WXYZParams(
        **raw,
        p_Wreturn     = 1.0 - raw["p_WtoX"],
        p_Xreturn     = 1.0 - (raw["p_XtoW"] + raw["p_XtoY"]),
        p_Yreturn     = 1.0 - raw["p_YtoZ"],
        p_X           = 1.0 - raw["p_W"],
        p_XtoY_trt    = p_XtoY_trt,
        p_Xreturn_trt = 1.0 - (raw["p_XtoW"] + p_XtoY_trt),
    )
