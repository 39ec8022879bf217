# tests/test_data_portal.py
from pathlib import Path

import pandas as pd
import pytest
from pandera.errors import SchemaError

from data_portal import load_param_table
from validator import PSA_SCHEMA


def test_shipped_table_is_valid(param_csv):
    df = load_param_table(param_csv)
    assert list(df.columns) == ["Parameter", "Type", "Value", "Error"]
    assert df["Parameter"].is_unique
    assert set(df["Type"]) <= {1, 2, 3, 4, 5, 9}


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "params.csv"
    path.write_text(text)
    return path


def test_unknown_type_rejected(tmp_path: Path):
    path = _write(tmp_path, "Parameter,Type,Value,Error\nP_W,6,0.9,0.03\n")
    with pytest.raises(SchemaError):
        load_param_table(path)


def test_duplicate_parameter_rejected(tmp_path: Path):
    path = _write(tmp_path, "Parameter,Type,Value,Error\nP_W,1,0.9,0.03\nP_W,1,0.8,0.03\n")
    with pytest.raises(SchemaError):
        load_param_table(path)


def test_negative_error_rejected(tmp_path: Path):
    path = _write(tmp_path, "Parameter,Type,Value,Error\nC_W,3,500,-1\n")
    with pytest.raises(SchemaError):
        load_param_table(path)


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_param_table(tmp_path / "nope.csv")


def test_psa_schema_rejects_negative_cost():
    df = pd.DataFrame({
        "scenario_id": ["s", "s"],
        "analysis": ["probabilistic"] * 2,
        "iteration": [1, 1],
        "Strategy": ["no treatment", "treatment"],
        "Cost": [100.0, -1.0],
        "Effect": [1.0, 1.2],
    })
    with pytest.raises(SchemaError):
        PSA_SCHEMA.validate(df)
