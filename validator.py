from __future__ import annotations

import pandera.pandas as pa
from pandera.pandas import Column, Check

from utils.param_sampler import DistType
from utils.states import STRATEGIES

# Input parameter table

PARAM_SCHEMA = pa.DataFrameSchema(
    {
        "Parameter": Column(str, nullable=False, unique=True),
        "Type":      Column(int, Check.isin([int(d) for d in DistType])),
        "Value":     Column(float, nullable=False),
        "Error":     Column(float, Check.ge(0), nullable=False),
    },
    coerce=True,
    strict=True,
    name="ParamTable",
)

# PSA output (long format)

PSA_SCHEMA = pa.DataFrameSchema(
    {
        # identifiers
        "scenario_id": Column(str, nullable=False),
        "test_label":  Column(str, nullable=False, required=False),
        "hypothesis":  Column(str, nullable=False, required=False),
        "analysis":    Column(str, Check.isin(["deterministic", "probabilistic"])),
        "iteration":   Column(int, Check.ge(0)),

        # CEA result row
        "Strategy":    Column(str, Check.isin(list(STRATEGIES))),
        "Cost":        Column(float, Check.ge(0)),
        "Effect":      Column(float, nullable=False),
    },
    coerce=True,
    strict=False,              # allow extra diagnostic columns
    index=pa.Index(int),
)

"""
1. What the schemas do

PARAM_SCHEMA guards the parameter table before any sampling happens: every
parameter name is present exactly once, the type code is one of
1 (Beta), 2 (Normal), 3 (Gamma), 4 (utility), 5 (rate ratio) or 9 (fixed),
and the dispersion column is non-negative.  strict=True rejects stray
columns so a mis-labelled spreadsheet export fails immediately.

PSA_SCHEMA is the data contract of the simulation output.  Costs must be
non-negative; effects may be any real number because utility draws are
not clipped.  Extra columns are allowed.

2. How you use it in practice

from validator import PSA_SCHEMA
df = pd.read_parquet("outputs/psa_results.parquet")
PSA_SCHEMA.validate(df, lazy=True)   # raises if anything is wrong
"""
