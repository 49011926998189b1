"""
Learning loop for mesh pruning.

Each round resets the mesh, samples every relay's enable flag from its
weight, relaxes costs from the root, aggregates the total cost and nudges
the weights of relays that flipped by the change in total cost.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import random

from algorithms import RelaxationEngine
from config import CostParams
from cost_model import CostBreakdown, aggregate_cost
from mesh_graph import MeshGraph
from relaxation_engine import GatedDijkstraEngine


class RoundPhase(Enum):
    """Phases of one round, always executed in this order."""

    RESET = "reset"
    SAMPLE_ENABLE = "sample_enable"
    RELAX = "relax"
    AGGREGATE_COST = "aggregate_cost"
    LEARN = "learn"


@dataclass(frozen=True)
class RoundResult:
    round_index: int
    cost: CostBreakdown
    delta: float    # learning_rate * (total_cost - previous total_cost)
    flipped: int    # relays whose weight was updated

    @property
    def total_cost(self) -> float:
        return self.cost.total_cost


def evaluate_snapshot(
    graph: MeshGraph, params: CostParams, engine: RelaxationEngine
) -> CostBreakdown:
    """Reset, relax and aggregate the graph's current enable pattern."""
    graph.reset()
    engine.relax(graph)
    return aggregate_cost(graph, params)


class PruningSimulation:
    """
    Drives rounds over a single mesh.

    The only state carried between rounds is each node's weight and enable
    flag, plus the previous round's total cost.
    """

    def __init__(
        self,
        graph: MeshGraph,
        params: CostParams,
        learning_rate: float,
        rng: random.Random | None = None,
        engine: Optional[RelaxationEngine] = None,
    ) -> None:
        self.graph = graph
        self.params = params
        self.learning_rate = float(learning_rate)
        self.rng = rng or random.Random()
        self.engine = engine or GatedDijkstraEngine()

        self.previous_total_cost: Optional[float] = None
        self.rounds_run = 0
        self.last_phase: Optional[RoundPhase] = None

    def baseline(self) -> CostBreakdown:
        """
        Cost with every relay forced on. Seeds previous_total_cost; no learning.
        """
        self.graph.reset()
        self.graph.sample_enable(self.rng, force_enable=True)
        self.engine.relax(self.graph)
        cost = aggregate_cost(self.graph, self.params)
        self.previous_total_cost = cost.total_cost
        return cost

    def step(self) -> RoundResult:
        """Run one RESET -> SAMPLE_ENABLE -> RELAX -> AGGREGATE_COST -> LEARN round."""
        if self.previous_total_cost is None:
            self.baseline()
        assert self.previous_total_cost is not None

        self.last_phase = RoundPhase.RESET
        self.graph.reset()

        self.last_phase = RoundPhase.SAMPLE_ENABLE
        self.graph.sample_enable(self.rng)

        self.last_phase = RoundPhase.RELAX
        self.engine.relax(self.graph)

        self.last_phase = RoundPhase.AGGREGATE_COST
        cost = aggregate_cost(self.graph, self.params)

        self.last_phase = RoundPhase.LEARN
        # One shared delta for every flipped relay; no per-node credit.
        delta = (cost.total_cost - self.previous_total_cost) * self.learning_rate
        flipped = self.graph.update_weights(delta)
        self.previous_total_cost = cost.total_cost

        result = RoundResult(
            round_index=self.rounds_run,
            cost=cost,
            delta=delta,
            flipped=flipped,
        )
        self.rounds_run += 1
        return result

    def run(
        self,
        rounds: int,
        on_round: Optional[Callable[[RoundResult], None]] = None,
    ) -> List[RoundResult]:
        results: List[RoundResult] = []
        for _ in range(rounds):
            res = self.step()
            results.append(res)
            if on_round is not None:
                on_round(res)
        return results
