# tests/test_scenarios.py
from pathlib import Path

import numpy as np
import pytest

from scenarios import ModelConfig, load_scenarios

_YAML = """
defaults:
  num_iter: 100
  n_cycles: 12
  disc_rate_outcomes: 0.015
  disc_rate_costs: 0.015
  param_table: data/params.csv
  not_a_field: ignored

scenarios:
  - id: base
  - id: steep
    disc_rate_costs: 0.035
    n_cycles: 5
    hypothesis: "heavier discounting"
"""


def test_defaults_merge(tmp_path: Path):
    cfg_path = tmp_path / "scenarios.yaml"
    cfg_path.write_text(_YAML)
    base, steep = load_scenarios(cfg_path)

    assert base.id == "base" and base.n_cycles == 12 and base.num_iter == 100
    assert steep.n_cycles == 5 and steep.disc_rate_costs == 0.035
    assert steep.disc_rate_outcomes == 0.015
    assert steep.hypothesis == "heavier discounting"
    # relative table path resolved against the YAML's directory
    assert Path(base.param_table) == tmp_path / "data" / "params.csv"


def test_discount_vectors():
    cfg = ModelConfig(id="x", num_iter=1, n_cycles=3,
                      disc_rate_outcomes=0.0, disc_rate_costs=0.1)
    np.testing.assert_array_equal(cfg.disc_outcomes(), np.ones(3))
    np.testing.assert_allclose(cfg.disc_costs(), [1, 1 / 1.1, 1 / 1.21])


@pytest.mark.parametrize("bad", [
    {"num_iter": 0},
    {"n_cycles": -1},
    {"cycle_length": 0.0},
    {"disc_rate_costs": -1.5},
    {"wtp_threshold": -10.0},
])
def test_validation(bad):
    kwargs = {"id": "bad", "num_iter": 10, "n_cycles": 5, **bad}
    with pytest.raises(ValueError):
        ModelConfig(**kwargs)


def test_duplicate_ids_rejected(tmp_path: Path):
    cfg_path = tmp_path / "dupes.yaml"
    cfg_path.write_text("defaults: {num_iter: 5, n_cycles: 5}\n"
                        "scenarios:\n  - id: a\n  - id: a\n")
    with pytest.raises(ValueError, match="duplicate"):
        load_scenarios(cfg_path)


def test_repository_config_loads():
    root = Path(__file__).resolve().parents[1]
    scenarios = load_scenarios(root / "scenarios.yaml")
    assert {s.id for s in scenarios} >= {"base_case"}
    assert all(Path(s.param_table).exists() for s in scenarios)
