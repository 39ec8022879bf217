# tests/conftest.py
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
PARAM_CSV = ROOT / "data" / "wxyz_params.csv"

# point estimates used across the model tests
BASE_VALUES = {
    "P_WtoX": 0.10,
    "P_XtoW": 0.05,
    "P_XtoY": 0.20,
    "P_YtoZ": 0.30,
    "P_W": 0.90,
    "C_W": 500.0,
    "C_X": 2000.0,
    "C_Ytransition": 15000.0,
    "C_Y": 5000.0,
    "C_Ztransition": 10000.0,
    "C_trt": 1200.0,
    "U_W": 0.90,
    "U_X": 0.70,
    "U_Y": 0.40,
    "RR_Treat": 0.50,
}


@pytest.fixture
def base_values():
    return dict(BASE_VALUES)


@pytest.fixture
def fixed_table():
    """Parameter table with every input fixed (type 9) at BASE_VALUES."""
    return pd.DataFrame({
        "Parameter": list(BASE_VALUES),
        "Type": [9] * len(BASE_VALUES),
        "Value": list(BASE_VALUES.values()),
        "Error": [0.0] * len(BASE_VALUES),
    })


@pytest.fixture
def param_csv():
    return PARAM_CSV
