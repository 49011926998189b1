"""
Aggregate a relaxed mesh into the scalar cost the learning loop optimises.
"""

from dataclasses import dataclass
from typing import List
import math

from config import CostParams
from mesh_graph import MeshGraph


@dataclass(frozen=True)
class CostBreakdown:
    path_cost: float      # mean per-node cost, penalty substituted for unreached
    message_cost: float   # cost_message * enabled relays
    enabled: int
    reached: int

    @property
    def total_cost(self) -> float:
        return self.path_cost + self.message_cost


def node_costs(graph: MeshGraph, params: CostParams) -> List[float]:
    """Per-node cost with cost_not_found in place of +inf."""
    return [
        params.cost_not_found if math.isinf(n.min_cost) else n.min_cost
        for n in graph.nodes()
    ]


def aggregate_cost(graph: MeshGraph, params: CostParams) -> CostBreakdown:
    costs = node_costs(graph, params)
    path_cost = sum(costs) / len(costs)
    enabled = graph.enabled_count()
    reached = sum(1 for n in graph.nodes() if not math.isinf(n.min_cost))
    return CostBreakdown(
        path_cost=path_cost,
        message_cost=params.cost_message * enabled,
        enabled=enabled,
        reached=reached,
    )
