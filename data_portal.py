# data_portal.py
# Single access-point for the parameter table.
#
# The table is a CSV with columns  Parameter, Type, Value, Error  (one row
# per model input).  It is validated against validator.PARAM_SCHEMA before
# the sampler ever sees it.

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from validator import PARAM_SCHEMA

_LOG = logging.getLogger(__name__)

__all__ = ["load_param_table"]


def load_param_table(csv_path: str | Path) -> pd.DataFrame:
    """
    CSV reader + validator.

    Parameters
    ----------
    csv_path : str | pathlib.Path
        Location of the parameter table.

    Returns
    -------
    pandas.DataFrame – validated against `PARAM_SCHEMA`, rows in file order

    Raises
    ------
    FileNotFoundError
        If *csv_path* does not exist.
    pandera.errors.SchemaError
        If the table breaks the schema.
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"parameter table not found: {path}")

    df = pd.read_csv(path, skipinitialspace=True)
    df = PARAM_SCHEMA.validate(df)
    _LOG.info("Loaded %d parameters from %s", len(df), path)
    return df.reset_index(drop=True)
