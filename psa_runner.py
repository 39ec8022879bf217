# psa_runner.py
# Probabilistic sensitivity analysis driver for the WXYZ model
#
# Key responsibilities
# 1.  Sample every parameter once, up front, from a generator seeded per
#     scenario.  Nothing below this point draws random numbers.
# 2.  For each row of sampled values run
#         get_values → make_matrix → run_cohort (×2 arms) → make_cea
#     and collect one (cost, effect) pair per strategy.
# 3.  Stay order-independent: iterations only read their own row, so they
#     can be dispatched to joblib workers and the output is identical to a
#     sequential run.
# 4.  Fail fast.  The first invalid draw aborts the run with an
#     IterationError naming the iteration; nothing is clipped or skipped.
# --------------------------------------------------------------------------

from __future__ import annotations

import hashlib
import logging
from typing import List, Mapping

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

from data_portal import load_param_table
from scenarios import ModelConfig
from utils.cea_utils import make_cea
from utils.cohort import initial_distribution, run_cohort
from utils.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    InvariantViolationError,
    IterationError,
)
from utils.matrix_builder import make_matrix
from utils.param_sampler import SampledParams, import_vars
from utils.wxyz_params import get_values

__all__ = ["run_iteration", "run_deterministic", "run_psa", "run_scenario"]

_LOG = logging.getLogger(__name__)

_MODEL_ERRORS = (ConfigurationError, InvariantViolationError, DimensionMismatchError)

# analysis labels; deterministic rows carry iteration 0
DETERMINISTIC = "deterministic"
PROBABILISTIC = "probabilistic"


def _stable_uint32(token: str | int | None, *, global_seed: int | None) -> int:
    """
    Return a **deterministic** 32-bit integer seed.

    • If *global_seed* is given, combine it with *token* via MD5 so that
      every scenario draws an **independent** stream while staying
      reproducible across Python versions / platforms.
    • Without *global_seed* we fall back to MD5 of *token* alone.
    """
    base_str = f"{global_seed}_{token}" if global_seed is not None else str(token)
    digest   = hashlib.md5(base_str.encode("utf-8")).hexdigest()      # 128-bit hex
    return int(digest[:8], 16)                                        # first 32 bits


# 1 One model evaluation
def run_iteration(
    values: Mapping[str, float],
    *,
    n_cycles: int,
    disc_o: np.ndarray,
    disc_c: np.ndarray,
) -> pd.DataFrame:
    """
    Evaluate both arms for one set of parameter values.

    Parameters
    ----------
    values : mapping
        Parameter-table name → value (one PSA row or the deterministic means).
    n_cycles : int
        Model horizon T.
    disc_o, disc_c : ndarray (T,)
        Discount factors for outcomes and costs.

    Returns
    -------
    pandas.DataFrame
        Strategy, Cost, Effect for "no treatment" and "treatment".
    """
    params = get_values(values)
    mtx = make_matrix(params)
    v0 = initial_distribution(params)

    trace_notrt = run_cohort(mtx.notrt, v0, n_cycles)
    trace_trt   = run_cohort(mtx.trt,   v0, n_cycles)

    return make_cea(params, trace_notrt, trace_trt, disc_o, disc_c)


def _run_single_iteration(
    iteration: int,
    values: Mapping[str, float],
    n_cycles: int,
    disc_o: np.ndarray,
    disc_c: np.ndarray,
) -> pd.DataFrame:
    """Worker body: tag the rows, turn model errors into IterationError."""
    try:
        df = run_iteration(values, n_cycles=n_cycles, disc_o=disc_o, disc_c=disc_c)
    except _MODEL_ERRORS as exc:
        raise IterationError(iteration, f"{type(exc).__name__}: {exc}") from exc
    df.insert(0, "iteration", iteration)
    return df


# 2 Deterministic & probabilistic analyses
def run_deterministic(sampled: SampledParams, cfg: ModelConfig) -> pd.DataFrame:
    """Base case on the table means (reported as iteration 0)."""
    return _run_single_iteration(
        0, sampled.deterministic(), cfg.n_cycles, cfg.disc_outcomes(), cfg.disc_costs()
    )


def run_psa(
    sampled: SampledParams,
    cfg: ModelConfig,
    *,
    jobs: int = 1,
    backend: str = "loky",
    progress: bool = True,
) -> pd.DataFrame:
    """
    Run every sampled iteration and stack the results.

    Parameters
    ----------
    sampled : SampledParams
        Output of `import_vars`; read-only here.
    cfg : ModelConfig
        Horizon and discount rates.
    jobs : int
        1 = sequential, -1 = all cores, n = n workers.
    backend : str
        joblib backend used when jobs != 1.

    Returns
    -------
    pandas.DataFrame
        iteration (1-based), Strategy, Cost, Effect; two rows per
        iteration in iteration order.

    Raises
    ------
    IterationError
        On the first iteration that produces an invalid matrix or input.
    """
    disc_o, disc_c = cfg.disc_outcomes(), cfg.disc_costs()
    iterations = tqdm(range(1, sampled.num_iter + 1),
                      desc=f"PSA {cfg.id}", disable=not progress)

    if jobs == 1:
        dfs: List[pd.DataFrame] = [
            _run_single_iteration(i, sampled.iteration(i - 1), cfg.n_cycles, disc_o, disc_c)
            for i in iterations
        ]
    else:
        dfs = Parallel(n_jobs=jobs, backend=backend)(
            delayed(_run_single_iteration)(
                i, sampled.iteration(i - 1), cfg.n_cycles, disc_o, disc_c
            )
            for i in iterations
        )
    return pd.concat(dfs, ignore_index=True)


# 3 Scenario wrapper used by sim_runner
def run_scenario(
    cfg: ModelConfig,
    table: pd.DataFrame | None = None,
    *,
    global_seed: int | None = None,
    jobs: int = 1,
    backend: str = "loky",
    progress: bool = True,
) -> pd.DataFrame:
    """
    Sample, run the deterministic case and the PSA, and tag the rows.

    Returns one long table with columns
    scenario_id, test_label, hypothesis, analysis, iteration,
    Strategy, Cost, Effect.
    """
    if table is None:
        table = load_param_table(cfg.param_table)

    seed = _stable_uint32(cfg.id, global_seed=global_seed)
    rng  = np.random.default_rng(seed)
    sampled = import_vars(table, cfg.num_iter, rng)
    _LOG.info("scenario %s: %d parameters × %d iterations, T=%d (seed %d)",
              cfg.id, len(sampled.varname), cfg.num_iter, cfg.n_cycles, seed)

    det = run_deterministic(sampled, cfg)
    det.insert(0, "analysis", DETERMINISTIC)

    psa = run_psa(sampled, cfg, jobs=jobs, backend=backend, progress=progress)
    psa.insert(0, "analysis", PROBABILISTIC)

    df = pd.concat([det, psa], ignore_index=True)
    df.insert(0, "hypothesis", cfg.hypothesis)
    df.insert(0, "test_label", cfg.test_label)
    df.insert(0, "scenario_id", cfg.id)

    for _, row in det.iterrows():
        _LOG.info("scenario %s  deterministic  %-12s cost=%.2f  effect=%.4f",
                  cfg.id, row["Strategy"], row["Cost"], row["Effect"])
    return df
