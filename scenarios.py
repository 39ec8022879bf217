# scenarios.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import yaml

from utils.cea_utils import discount_factors

__all__ = ["ModelConfig", "load_scenarios"]

DEFAULT_PARAM_TABLE = "data/wxyz_params.csv"


# data-class consumed by psa_runner & sim_runner
@dataclass(frozen=True, slots=True)
class ModelConfig:
    id: str

    # PSA size & model horizon
    num_iter:     int
    n_cycles:     int
    cycle_length: float = 1.0

    # annual discount rates
    disc_rate_outcomes: float = 0.015
    disc_rate_costs:    float = 0.015

    # CSV with columns Parameter, Type, Value, Error
    param_table: str = DEFAULT_PARAM_TABLE

    # willingness-to-pay per QALY used in the summary tables
    wtp_threshold: float = 50_000.0

    test_label: str = ""
    hypothesis: str = ""

    def __post_init__(self) -> None:        # lightweight validation
        if int(self.num_iter) != self.num_iter or self.num_iter < 1:
            raise ValueError(f"{self.id}: num_iter must be a positive integer")
        if int(self.n_cycles) != self.n_cycles or self.n_cycles < 0:
            raise ValueError(f"{self.id}: n_cycles must be a non-negative integer")
        if self.cycle_length <= 0:
            raise ValueError(f"{self.id}: cycle_length must be > 0")
        if self.disc_rate_outcomes <= -1 or self.disc_rate_costs <= -1:
            raise ValueError(f"{self.id}: discount rates must be > -1")
        if self.wtp_threshold < 0:
            raise ValueError(f"{self.id}: wtp_threshold must be ≥ 0")

    def disc_outcomes(self) -> np.ndarray:
        return discount_factors(self.disc_rate_outcomes, self.n_cycles, self.cycle_length)

    def disc_costs(self) -> np.ndarray:
        return discount_factors(self.disc_rate_costs, self.n_cycles, self.cycle_length)


def _subset_kwargs(cls, cfg_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Return the sub-mapping whose keys match dataclass *cls* fields."""
    allowed = set(cls.__dataclass_fields__)           # type: ignore[attr-defined]
    return {k: v for k, v in cfg_dict.items() if k in allowed}


# public API
def load_scenarios(yaml_path: str | Path = "scenarios.yaml") -> List[ModelConfig]:
    """
    Parse `scenarios.yaml` and return one ModelConfig per entry of
    `scenarios:`, each merged over the global `defaults:` block.  A relative
    `param_table` is resolved against the YAML file's directory.
    """
    yaml_path = Path(yaml_path)
    data: Dict[str, Any] = yaml.safe_load(yaml_path.read_text()) or {}
    defaults = data.get("defaults", {})
    rows = data.get("scenarios") or [{"id": "base_case"}]

    out: List[ModelConfig] = []
    for row in rows:
        if "id" not in row:
            raise ValueError(f"scenario without 'id' in {yaml_path}: {row}")
        merged = {**defaults, **row}

        table = Path(merged.get("param_table", DEFAULT_PARAM_TABLE))
        if not table.is_absolute():
            table = yaml_path.parent / table
        merged["param_table"] = str(table)

        out.append(ModelConfig(**_subset_kwargs(ModelConfig, merged)))

    ids = [cfg.id for cfg in out]
    if len(set(ids)) != len(ids):
        raise ValueError(f"duplicate scenario ids in {yaml_path}: {ids}")
    return out


"""
1. What the file does

load_scenarios() opens scenarios.yaml, merges every entry of scenarios:
over the defaults: block and returns a list of frozen ModelConfig objects.
Keys that are not ModelConfig fields are ignored, so the YAML may carry
comments-as-data (paths, notes) without breaking the loader.

2. Knobs available through YAML

num_iter              PSA iterations per scenario
n_cycles              model horizon T (number of trace rows)
cycle_length          years per cycle; scales the discount exponent
disc_rate_outcomes    annual discount rate applied to QALYs
disc_rate_costs       annual discount rate applied to costs
param_table           CSV with Parameter, Type, Value, Error
wtp_threshold         willingness to pay per QALY for the summary tables
test_label/hypothesis free text copied into the output

3. How to use it

from scenarios import load_scenarios
for cfg in load_scenarios("scenarios.yaml"):
    disc_o, disc_c = cfg.disc_outcomes(), cfg.disc_costs()
"""
