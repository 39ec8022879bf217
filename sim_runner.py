# sim_runner.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

import pandas as pd

import curation
import table_exporter
from psa_runner import run_scenario
from scenarios import ModelConfig, load_scenarios
from utils.exceptions import ConfigurationError, IterationError
from validator import PSA_SCHEMA


# helpers                                                                     #
def _collect(df: pd.DataFrame) -> pd.DataFrame:
    """Tidy, then enforce the output contract."""
    return PSA_SCHEMA.validate(curation.tidy_dataframe(df), lazy=True)


def _select(scenarios: List[ModelConfig], only: List[str] | None) -> List[ModelConfig]:
    if not only:
        return scenarios
    unknown = sorted(set(only) - {scn.id for scn in scenarios})
    if unknown:
        raise ConfigurationError(f"unknown scenario id(s): {unknown}")
    return [scn for scn in scenarios if scn.id in only]


# CLI                                                                         #
def main(argv: List[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Run the WXYZ deterministic + probabilistic CEA.")
    p.add_argument("--config", default="scenarios.yaml",
                   help="Path to YAML with scenario definitions")
    p.add_argument("--out", default="outputs/psa_results.parquet",
                   help="Destination Parquet file")
    p.add_argument("--tables", default="tables",
                   help="Directory for summary CSVs")
    p.add_argument("--jobs", type=int, default=-1,
                   help="Parallel workers (-1 = all cores, 1 = sequential)")
    p.add_argument("--seed", type=int, default=2025,
                   help="Global deterministic RNG seed (set another int to vary)")
    p.add_argument("--only", nargs="+", default=None, metavar="ID",
                   help="Run only these scenario ids")
    p.add_argument("--no-progress", action="store_true",
                   help="Hide the per-iteration progress bar")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(message)s")

    scenarios = _select(load_scenarios(args.config), args.only)
    scenarios.sort(key=lambda scn: scn.id)           # deterministic job order

    dfs = []
    for scn in scenarios:
        dfs.append(run_scenario(scn, global_seed=args.seed, jobs=args.jobs,
                                progress=not args.no_progress))
    final_df = _collect(pd.concat(dfs, ignore_index=True))

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    final_df.to_parquet(out, index=False)

    table_exporter.export(final_df, args.tables,
                          wtp={scn.id: scn.wtp_threshold for scn in scenarios})

    print(f"[sim_runner] wrote {len(final_df):,} rows -> {out}")
    print(f"[sim_runner] deterministic seed = {args.seed}")


def run(argv: List[str] | None = None) -> None:
    """Console entry point: model and configuration errors exit with status 1."""
    try:
        main(argv)
    except (IterationError, ConfigurationError) as err:
        print(f"ERROR: {err}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":                # entry-point
    run()

"""
1. What the script does, step by step

Parse CLI arguments (--config, --out, --tables, --jobs, --seed, --only).

Load scenarios with scenarios.load_scenarios(); each is a frozen
ModelConfig holding horizon, discount rates, PSA size and the parameter
table path.

For every scenario psa_runner.run_scenario():
  – reads and validates the parameter table (data_portal),
  – seeds a generator from (seed, scenario id) and samples every parameter
    num_iter times up front,
  – runs the deterministic case on the table means,
  – runs the PSA, sequentially (--jobs 1) or through joblib.

The rows are tidied (curation.tidy_dataframe), validated against
validator.PSA_SCHEMA and written to Parquet.  table_exporter then writes
tables/summary_metrics.csv and tables/ceac.csv.

2. Failure behaviour

The first invalid draw (a transition row that does not sum to 1 or a
negative complement probability) aborts the run with an IterationError
naming the iteration; the script prints it to stderr and exits 1.

3. How to run it

python -m sim_runner
python -m sim_runner --jobs 1 --only base_case --seed 7
"""
