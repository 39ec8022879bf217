# utils/param_sampler.py
# ────────────────────────────────────────────────────────────────────────────
# Batch importer for model parameters.
#
#   • DistType       – integer type codes used in the parameter table
#   • ParamDef       – one immutable row of the table
#   • draw()         – num_iter draws for a single definition
#   • import_vars()  – deterministic values + the PSA input frame
#
# Every draw comes from an explicit numpy Generator that the caller seeds
# once per run.  Sampling happens up front, parameter by parameter in table
# order, so the iteration loop never touches the generator and iterations
# can be farmed out to joblib workers in any order.
# ────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd
from numpy.random import Generator

from utils.distributions import fit_beta, fit_gamma
from utils.exceptions import ConfigurationError

__all__ = [
    "DistType",
    "ParamDef",
    "SampledParams",
    "draw",
    "import_vars",
    "param_defs_from_frame",
]


class DistType(IntEnum):
    BETA       = 1
    NORMAL     = 2
    GAMMA      = 3
    UTILITY    = 4     # 1 − Gamma fitted on the disutility
    RATE_RATIO = 5     # exp(Normal(ln mean, sd))
    FIXED      = 9


@dataclass(slots=True, frozen=True)
class ParamDef:
    name: str
    dist: DistType
    mean: float
    sd:   float = 0.0


@dataclass(slots=True, frozen=True)
class SampledParams:
    """
    Output of :func:`import_vars`.

    varname      – parameter names in table order
    varmean      – deterministic value per name (the table's mean)
    varprob      – one array of length num_iter per name
    df_psa_input – one column per parameter, num_iter rows
    """
    varname:      List[str]
    varmean:      List[float]
    varprob:      List[np.ndarray]
    df_psa_input: pd.DataFrame

    @property
    def num_iter(self) -> int:
        return len(self.df_psa_input)

    def deterministic(self) -> Dict[str, float]:
        return dict(zip(self.varname, self.varmean))

    def iteration(self, i: int) -> Dict[str, float]:
        """Sampled values of 0-based iteration *i* as a name → value dict."""
        return {name: float(col[i]) for name, col in zip(self.varname, self.varprob)}


def param_defs_from_frame(table: pd.DataFrame) -> List[ParamDef]:
    """Turn the ``Parameter, Type, Value, Error`` table into ParamDefs."""
    defs: List[ParamDef] = []
    for row in table.itertuples(index=False):
        name = str(row.Parameter)
        try:
            dist = DistType(int(row.Type))
        except ValueError:
            raise ConfigurationError(
                f"parameter '{name}': unknown distribution type {row.Type!r}"
            ) from None
        defs.append(ParamDef(name=name, dist=dist,
                             mean=float(row.Value), sd=float(row.Error)))
    return defs


def draw(defn: ParamDef, num_iter: int, rng: Generator) -> np.ndarray:
    """
    *num_iter* independent draws for one parameter.

        Beta        Beta(α, β)             with (α, β) = fit_beta(mean, sd)
        Normal      Normal(mean, sd)
        Gamma       Gamma(shape, scale)    with fit_gamma(mean, sd)
        Utility     1 − Gamma(shape, scale) with fit_gamma(1 − mean, sd)
        Rate ratio  exp(Normal(ln mean, sd))
        Fixed       mean, repeated

    Utilities are not clipped to [0,1]; tail draws may leave that range.
    """
    m, sd = defn.mean, defn.sd
    try:
        dist = DistType(defn.dist)
    except ValueError:
        raise ConfigurationError(
            f"parameter '{defn.name}': unknown distribution type {defn.dist!r}"
        ) from None

    try:
        if dist is DistType.BETA:
            a, b = fit_beta(m, sd)
            return rng.beta(a, b, size=num_iter)

        if dist is DistType.NORMAL:
            if sd < 0:
                raise ConfigurationError(f"Normal sd must be ≥ 0; got {sd}")
            return rng.normal(m, sd, size=num_iter)

        if dist is DistType.GAMMA:
            shape, scale = fit_gamma(m, sd)
            return rng.gamma(shape, scale, size=num_iter)

        if dist is DistType.UTILITY:
            shape, scale = fit_gamma(1.0 - m, sd)
            return 1.0 - rng.gamma(shape, scale, size=num_iter)

        if dist is DistType.RATE_RATIO:
            if m <= 0:
                raise ConfigurationError(f"rate ratio mean must be > 0; got {m}")
            if sd < 0:
                raise ConfigurationError(f"rate ratio sd must be ≥ 0; got {sd}")
            return np.exp(rng.normal(np.log(m), sd, size=num_iter))

        if dist is DistType.FIXED:
            return np.full(num_iter, m, dtype=float)
    except ConfigurationError as exc:
        raise ConfigurationError(f"parameter '{defn.name}': {exc}") from exc

    raise ConfigurationError(                             # pragma: no cover
        f"parameter '{defn.name}': unsupported distribution {dist!r}"
    )


def import_vars(
    table: pd.DataFrame | Sequence[ParamDef],
    num_iter: int,
    rng: Generator,
) -> SampledParams:
    """
    Sample every parameter of *table* *num_iter* times.

    Parameters
    ----------
    table : DataFrame | sequence[ParamDef]
        Either the validated input table (columns Parameter, Type, Value,
        Error) or ready-made definitions.
    num_iter : int
        Number of PSA iterations (≥ 1).
    rng : numpy.random.Generator
        Consumed in table order; seed it once per run for reproducibility.

    Raises
    ------
    ConfigurationError
        Bad iteration count, duplicate names, unknown type codes or
        moments that cannot be fitted.  Raised before any iteration runs.
    """
    if int(num_iter) != num_iter or num_iter < 1:
        raise ConfigurationError(f"num_iter must be a positive integer; got {num_iter}")
    num_iter = int(num_iter)

    defs = param_defs_from_frame(table) if isinstance(table, pd.DataFrame) else list(table)

    counts = Counter(d.name for d in defs)
    dupes = sorted(name for name, n in counts.items() if n > 1)
    if dupes:
        raise ConfigurationError(f"duplicate parameter names: {dupes}")

    varname: List[str] = []
    varmean: List[float] = []
    varprob: List[np.ndarray] = []
    for defn in defs:
        samples = draw(defn, num_iter, rng)
        varname.append(defn.name)
        varmean.append(defn.mean)           # rate ratios: raw mean, no log
        varprob.append(samples)
        logging.debug("import_vars: %-14s %-10s mean=%.4g  sample mean=%.4g",
                      defn.name, DistType(defn.dist).name, defn.mean, float(samples.mean()))

    df_psa_input = pd.DataFrame(dict(zip(varname, varprob)), columns=varname)
    return SampledParams(varname=varname, varmean=varmean,
                         varprob=varprob, df_psa_input=df_psa_input)
