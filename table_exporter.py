# table_exporter.py
"""
helper to produce summary tables from the PSA output.

• CSV written to tables/summary_metrics.csv
• CSV written to tables/ceac.csv
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np
import pandas as pd

import curation

_CUR   = Path(__file__).parent
_TDIR  = _CUR / "tables"

# WTP grid for the acceptability curve (per QALY)
_WTP_GRID: Sequence[float] = tuple(np.arange(0.0, 100_001.0, 5_000.0))


def export(
    df: pd.DataFrame,
    out_dir: str | Path = _TDIR,
    wtp: float | Mapping[str, float] = 50_000.0,
    wtp_grid: Sequence[float] = _WTP_GRID,
) -> tuple[Path, Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    summary_csv = out_dir / "summary_metrics.csv"
    ceac_csv    = out_dir / "ceac.csv"

    curation.summarise(df, wtp).to_csv(summary_csv, index=False)
    curation.ceac(df, wtp_grid).to_csv(ceac_csv, index=False)

    logging.info("[table_exporter] summary → %s", summary_csv)
    logging.info("[table_exporter] CEAC    → %s", ceac_csv)
    return summary_csv, ceac_csv


if __name__ == "__main__":
    import sys
    export(pd.read_parquet(sys.argv[1] if len(sys.argv) > 1 else "outputs/psa_results.parquet"))
