"""
Unit tests for simulation configuration.
"""

from pathlib import Path

import pytest

from config import CostParams, SimulationConfig, load_config


def test_defaults_match_reference_run():
    cfg = SimulationConfig()
    assert (cfg.n_nodes, cfg.width, cfg.height) == (1000, 30.0, 40.0)
    assert cfg.cost_params == CostParams(10.0, 5000.0, 80.0, 2.0)
    assert cfg.initial_weight == 1.5
    assert cfg.learning_rate == 0.003
    assert cfg.rounds == 20000


def test_from_mapping_converts_types():
    cfg = SimulationConfig.from_mapping({"n_nodes": "50", "width": 12, "seed": 3, "rounds": 10.0})
    assert cfg.n_nodes == 50
    assert cfg.width == 12.0
    assert cfg.seed == 3
    assert cfg.rounds == 10


def test_unknown_keys_are_rejected():
    with pytest.raises(ValueError, match="nodes"):
        SimulationConfig.from_mapping({"nodes": 10})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"n_nodes": 0},
        {"width": -1.0},
        {"rounds": -5},
        {"cutoff_distance": 0.0},
        {"cost_message": -2.0},
        {"learning_rate": -0.1},
    ],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(ValueError):
        SimulationConfig(**kwargs)


def test_overrides_skip_none():
    cfg = SimulationConfig(rounds=7).with_overrides(rounds=None, seed=4)
    assert cfg.rounds == 7
    assert cfg.seed == 4


def test_load_config_reads_yaml(tmp_path: Path):
    path = tmp_path / "sim.yml"
    path.write_text(
        """
n_nodes: 25
width: 20
height: 20
rounds: 5
seed: 42
learning_rate: 0.01
"""
    )

    cfg = load_config(path)

    assert cfg.n_nodes == 25
    assert cfg.learning_rate == 0.01
    assert cfg.seed == 42
    # Untouched keys keep defaults
    assert cfg.cost_switch == 80.0


def test_empty_yaml_gives_defaults(tmp_path: Path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(path) == SimulationConfig()


def test_cost_params_follow_config_fields():
    cfg = SimulationConfig(cutoff_distance=7.5, cost_switch=0.0)
    assert cfg.cost_params == CostParams(cutoff_distance=7.5, cost_switch=0.0)
