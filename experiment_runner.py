"""
CLI to run a mesh pruning simulation.

Reads an optional YAML config, builds a seeded mesh, runs a force-enabled
baseline round followed by the learning rounds, and reports per-round costs,
per-node dumps after the baseline and after learning, and (optionally) the greedy relay baseline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence
import argparse
import csv
import random
import time

from config import SimulationConfig, load_config
from cost_model import CostBreakdown
from greedy import apply_greedy_selection
from mesh_graph import (
    MeshGraph,
    build_mesh_graph,
    build_mesh_graph_from_positions,
    format_dump,
)
from relaxation_engine import GatedDijkstraEngine
from simulation import PruningSimulation, RoundResult, evaluate_snapshot


@dataclass
class SimulationResult:
    config: SimulationConfig
    graph: MeshGraph
    baseline: CostBreakdown
    baseline_dump: List[Dict[str, object]] = field(default_factory=list)
    rounds: List[RoundResult] = field(default_factory=list)
    greedy: Optional[CostBreakdown] = None
    duration_sec: float = 0.0


def run_simulation(
    config: SimulationConfig,
    on_round: Optional[Callable[[RoundResult], None]] = None,
    greedy: bool = False,
) -> SimulationResult:
    """
    Build the mesh from config and run config.rounds learning rounds.

    Placement and enable sampling share one random.Random seeded from
    config.seed, so equal seeds give equal trajectories.
    """
    start = time.time()
    rng = random.Random(config.seed)
    params = config.cost_params
    graph = build_mesh_graph(
        config.n_nodes,
        config.width,
        config.height,
        params=params,
        rng=rng,
        initial_weight=config.initial_weight,
    )
    engine = GatedDijkstraEngine()
    sim = PruningSimulation(graph, params, config.learning_rate, rng=rng, engine=engine)

    baseline = sim.baseline()
    baseline_dump = graph.dump()
    rounds = sim.run(config.rounds, on_round=on_round)
    result = SimulationResult(
        config=config,
        graph=graph,
        baseline=baseline,
        baseline_dump=baseline_dump,
        rounds=rounds,
    )

    if greedy:
        # Evaluate on a separate mesh so the learned flags stay untouched.
        greedy_graph = _clone_layout(graph, config)
        apply_greedy_selection(greedy_graph)
        result.greedy = evaluate_snapshot(greedy_graph, params, engine)

    result.duration_sec = time.time() - start
    return result


def _clone_layout(graph: MeshGraph, config: SimulationConfig) -> MeshGraph:
    positions = [(n.x, n.y) for n in graph.nodes()]
    return build_mesh_graph_from_positions(
        positions, config.cost_params, initial_weight=config.initial_weight
    )


def summarize(result: SimulationResult, tail_fraction: float = 0.1) -> Dict[str, float]:
    """
    Headline metrics: baseline cost, mean cost and enabled count over the last
    tail_fraction of rounds, and the greedy cost when it was evaluated.
    """
    rounds = result.rounds
    tail = rounds[-max(1, int(len(rounds) * tail_fraction)):] if rounds else []
    n = len(tail)
    summary: Dict[str, float] = {
        "nodes": float(len(result.graph)),
        "edges": float(result.graph.edge_count),
        "rounds": float(len(rounds)),
        "baseline_cost": result.baseline.total_cost,
        "tail_mean_cost": sum(r.total_cost for r in tail) / n if n else result.baseline.total_cost,
        "tail_mean_enabled": sum(r.cost.enabled for r in tail) / n if n else float(result.baseline.enabled),
        "duration_sec": result.duration_sec,
    }
    if result.greedy is not None:
        summary["greedy_cost"] = result.greedy.total_cost
        summary["greedy_enabled"] = float(result.greedy.enabled)
    return summary


def write_rounds_csv(rounds: Iterable[RoundResult], path: Path) -> None:
    """
    Write per-round costs to CSV for downstream analysis.
    """
    fieldnames = [
        "round",
        "total_cost",
        "path_cost",
        "message_cost",
        "enabled",
        "reached",
        "delta",
        "flipped",
    ]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for res in rounds:
            writer.writerow(
                {
                    "round": res.round_index,
                    "total_cost": res.total_cost,
                    "path_cost": res.cost.path_cost,
                    "message_cost": res.cost.message_cost,
                    "enabled": res.cost.enabled,
                    "reached": res.cost.reached,
                    "delta": res.delta,
                    "flipped": res.flipped,
                }
            )


def load_rounds_csv(path: Path) -> List[Dict[str, float]]:
    if not path.exists():
        return []
    with path.open() as f:
        reader = csv.DictReader(f)
        rows: List[Dict[str, float]] = []
        for row in reader:
            parsed: Dict[str, float] = {}
            for key, value in row.items():
                if key in ("round", "enabled", "reached", "flipped"):
                    parsed[key] = int(value)
                else:
                    parsed[key] = float(value)
            rows.append(parsed)
        return rows


def _print_round(res: RoundResult) -> None:
    print(f"[round] {res.round_index} cost: {res.total_cost:.2f} enabled={res.cost.enabled}")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meshprune",
        description="Learn which mesh relays can be switched off while keeping delivery cost low.",
    )
    parser.add_argument("--config", type=Path, help="YAML file with simulation parameters")
    parser.add_argument("--rounds", type=int, help="number of learning rounds")
    parser.add_argument("--nodes", type=int, dest="n_nodes", help="node count including the root")
    parser.add_argument("--seed", type=int, help="random seed for placement and sampling")
    parser.add_argument("--learning-rate", type=float, dest="learning_rate")
    parser.add_argument("--csv", type=Path, help="write per-round costs to this CSV file")
    parser.add_argument("--greedy", action="store_true", help="also evaluate the greedy relay selection")
    parser.add_argument("--quiet", action="store_true", help="suppress per-round output")
    parser.add_argument("--dump", action="store_true", help="print the per-node state after the baseline and after learning")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    config = load_config(args.config) if args.config else SimulationConfig()
    config = config.with_overrides(
        rounds=args.rounds,
        n_nodes=args.n_nodes,
        seed=args.seed,
        learning_rate=args.learning_rate,
    )
    print(
        f"[run] nodes={config.n_nodes} field={config.width:g}x{config.height:g} "
        f"rounds={config.rounds} seed={config.seed}"
    )

    on_round = None if args.quiet else _print_round
    result = run_simulation(config, on_round=on_round, greedy=args.greedy)

    if args.dump:
        print(format_dump(result.baseline_dump))
    print(f"[run] initial cost: {result.baseline.total_cost:.2f}")
    summary = summarize(result)
    print(
        f"[run] tail mean cost: {summary['tail_mean_cost']:.2f} "
        f"tail mean enabled: {summary['tail_mean_enabled']:.1f}/{config.n_nodes}"
    )
    if result.greedy is not None:
        print(
            f"[run] greedy cost: {result.greedy.total_cost:.2f} "
            f"greedy enabled: {result.greedy.enabled}/{config.n_nodes}"
        )
    if args.csv:
        write_rounds_csv(result.rounds, args.csv)
        print(f"[run] wrote rounds to {args.csv}")
    if args.dump:
        print(format_dump(result.graph.dump()))
    print(f"[run] completed {len(result.rounds)} rounds in {result.duration_sec:.2f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
