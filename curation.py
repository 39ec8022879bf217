# curation.py
"""
Post-processing of the long PSA table written by sim_runner.

    • tidy_dataframe() – column order & dtypes, no validation
    • incremental()    – treatment minus no-treatment, per iteration
    • icer()           – incremental cost-effectiveness ratio
    • summarise()      – one row per scenario
    • ceac()           – cost-effectiveness acceptability curve
"""
from __future__ import annotations

from typing import Final, Mapping, Sequence

import numpy as np
import pandas as pd

from utils.states import STRATEGIES

_NOTRT, _TRT = STRATEGIES

_EXPECTED_ORDER: Final = [
    "scenario_id", "test_label", "hypothesis",
    "analysis", "iteration",
    "Strategy", "Cost", "Effect",
]

_KEYS: Final = ["scenario_id", "analysis", "iteration"]


def tidy_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """
    * Re-orders columns so the parquet layout is predictable.
    * Casts 'iteration' to int64 and Cost/Effect to float64.
    * NO heavy validation – validator.PSA_SCHEMA does that.
    """
    cols = [c for c in _EXPECTED_ORDER if c in df.columns] + \
           [c for c in df.columns if c not in _EXPECTED_ORDER]
    df = df[cols].copy()
    if "iteration" in df.columns:
        df["iteration"] = df["iteration"].astype("int64")
    for col in ("Cost", "Effect"):
        if col in df.columns:
            df[col] = df[col].astype("float64")
    return df


def icer(d_cost: float | np.ndarray, d_effect: float | np.ndarray):
    """ΔC / ΔE; NaN where ΔE == 0."""
    d_cost = np.asarray(d_cost, dtype=float)
    d_effect = np.asarray(d_effect, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = np.where(d_effect != 0.0, d_cost / d_effect, np.nan)
    return float(out) if out.ndim == 0 else out


def incremental(df: pd.DataFrame) -> pd.DataFrame:
    """
    Wide table with one row per (scenario, analysis, iteration):

        cost_notrt, cost_trt, effect_notrt, effect_trt, d_cost, d_effect
    """
    wide = df.pivot_table(index=_KEYS, columns="Strategy",
                          values=["Cost", "Effect"], aggfunc="first")
    out = pd.DataFrame({
        "cost_notrt":   wide[("Cost", _NOTRT)],
        "cost_trt":     wide[("Cost", _TRT)],
        "effect_notrt": wide[("Effect", _NOTRT)],
        "effect_trt":   wide[("Effect", _TRT)],
    })
    out["d_cost"] = out["cost_trt"] - out["cost_notrt"]
    out["d_effect"] = out["effect_trt"] - out["effect_notrt"]
    return out.reset_index()


def _prob_cost_effective(inc: pd.DataFrame, wtp: float) -> float:
    """Share of iterations where treatment has the higher net monetary benefit."""
    inmb = wtp * inc["d_effect"] - inc["d_cost"]
    return float((inmb > 0).mean()) if len(inmb) else np.nan


def summarise(
    df: pd.DataFrame,
    wtp: float | Mapping[str, float] = 50_000.0,
) -> pd.DataFrame:
    """
    One row per scenario: deterministic and mean-PSA costs, effects and
    ICER, 95 % PSA intervals of the increments, and the probability that
    treatment is cost-effective at the scenario's WTP.
    """
    inc = incremental(df)
    rows = []
    for scn, sub in inc.groupby("scenario_id", sort=True):
        det = sub[sub["analysis"] == "deterministic"]
        psa = sub[sub["analysis"] == "probabilistic"]
        wtp_scn = float(wtp[scn]) if isinstance(wtp, Mapping) else float(wtp)

        row = {"scenario_id": scn, "wtp": wtp_scn, "num_iter": len(psa)}
        if len(det):
            d = det.iloc[0]
            row.update({
                "det_cost_notrt":   d["cost_notrt"],
                "det_cost_trt":     d["cost_trt"],
                "det_effect_notrt": d["effect_notrt"],
                "det_effect_trt":   d["effect_trt"],
                "det_icer":         icer(d["d_cost"], d["d_effect"]),
            })
        if len(psa):
            row.update({
                "psa_cost_notrt":   psa["cost_notrt"].mean(),
                "psa_cost_trt":     psa["cost_trt"].mean(),
                "psa_effect_notrt": psa["effect_notrt"].mean(),
                "psa_effect_trt":   psa["effect_trt"].mean(),
                "psa_d_cost_lo":    psa["d_cost"].quantile(0.025),
                "psa_d_cost_hi":    psa["d_cost"].quantile(0.975),
                "psa_d_effect_lo":  psa["d_effect"].quantile(0.025),
                "psa_d_effect_hi":  psa["d_effect"].quantile(0.975),
                "psa_icer":         icer(psa["d_cost"].mean(), psa["d_effect"].mean()),
                "p_cost_effective": _prob_cost_effective(psa, wtp_scn),
            })
        rows.append(row)
    return pd.DataFrame(rows)


def ceac(df: pd.DataFrame, wtp_grid: Sequence[float]) -> pd.DataFrame:
    """
    Cost-effectiveness acceptability curve from the probabilistic rows.

    For every WTP value λ the net monetary benefit λ·Effect − Cost is
    computed per strategy and iteration; the curve is the share of
    iterations in which each strategy has the highest NMB.

    Returns
    -------
    pandas.DataFrame
        scenario_id, wtp, Strategy, p_optimal
    """
    psa = df[df["analysis"] == "probabilistic"]
    rows = []
    for scn, sub in psa.groupby("scenario_id", sort=True):
        cost = sub.pivot(index="iteration", columns="Strategy", values="Cost")
        eff  = sub.pivot(index="iteration", columns="Strategy", values="Effect")
        cost, eff = cost[list(STRATEGIES)], eff[list(STRATEGIES)]
        for lam in wtp_grid:
            nmb = lam * eff.to_numpy() - cost.to_numpy()
            best = np.argmax(nmb, axis=1)           # ties go to "no treatment"
            for k, strategy in enumerate(STRATEGIES):
                rows.append({
                    "scenario_id": scn,
                    "wtp": float(lam),
                    "Strategy": strategy,
                    "p_optimal": float(np.mean(best == k)),
                })
    return pd.DataFrame(rows, columns=["scenario_id", "wtp", "Strategy", "p_optimal"])
