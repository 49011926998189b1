"""
Unit tests for cost aggregation.
"""

import math
import random

import pytest

from config import CostParams
from cost_model import aggregate_cost, node_costs
from mesh_graph import build_mesh_graph, build_mesh_graph_from_positions
from relaxation_engine import GatedDijkstraEngine


def test_all_enabled_line_graph_cost():
    params = CostParams()
    g = build_mesh_graph_from_positions([(0.0, 0.0), (5.0, 0.0), (12.0, 0.0)], params)
    GatedDijkstraEngine().shortest_path_costs(g)

    cost = aggregate_cost(g, params)

    assert cost.path_cost == pytest.approx((0.0 + 55.0 + 200.0) / 3)
    assert cost.message_cost == 3 * 2.0
    assert cost.enabled == 3
    assert cost.reached == 3
    assert cost.total_cost == pytest.approx(85.0 + 6.0)


def test_unreached_node_gets_penalty():
    params = CostParams(cost_not_found=5000.0)
    g = build_mesh_graph_from_positions([(0.0, 0.0), (5.0, 0.0), (12.0, 0.0)], params)
    g.node(1).enabled = False
    GatedDijkstraEngine().shortest_path_costs(g)

    assert node_costs(g, params) == [0.0, 55.0, 5000.0]
    cost = aggregate_cost(g, params)
    assert cost.reached == 2
    assert cost.enabled == 2
    assert cost.total_cost == pytest.approx(5055.0 / 3 + 4.0)


def test_root_alone_costs_one_message():
    params = CostParams(cost_message=2.0)
    g = build_mesh_graph_from_positions([(0.0, 0.0)], params)
    GatedDijkstraEngine().shortest_path_costs(g)

    assert aggregate_cost(g, params).total_cost == 2.0


def test_total_cost_bounds_hold_for_random_snapshots():
    params = CostParams()
    n = 150
    g = build_mesh_graph(n, 30.0, 40.0, params, rng=random.Random(21))
    rng = random.Random(5)
    engine = GatedDijkstraEngine()
    for _ in range(20):
        g.reset()
        g.sample_enable(rng)
        engine.relax(g)
        for c in node_costs(g, params):
            assert c == params.cost_not_found or (math.isfinite(c) and c >= 0.0)
        total = aggregate_cost(g, params).total_cost
        assert params.cost_message <= total <= params.cost_not_found + params.cost_message * n
