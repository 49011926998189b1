"""
Concrete mesh graph and its spatial builder.

The graph owns its relay nodes, their fixed edge tuples and the priority
queue used by the relaxation engine. Edges are derived from pairwise
Euclidean distance: any two nodes closer than the cutoff are linked in both
directions with the same cost.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import math
import random

from config import CostParams
from errors import ResourceExhaustedError
from graph import Graph
from nodes import ROOT_ID, Edge, MeshNode, Node
from priority_queue import IndexedMinHeap


class MeshGraph(Graph):
    """
    Fixed-size relay mesh rooted at node 0.

    Only per-round node state (enable flags, min_cost, visited, queue
    membership) changes after construction.
    """

    def __init__(self, nodes: Sequence[MeshNode]) -> None:
        if not nodes:
            raise ValueError("a mesh graph needs at least the root node")
        for idx, node in enumerate(nodes):
            if node.id != idx:
                raise ValueError(f"node at index {idx} has id {node.id}")
        self._nodes: List[MeshNode] = list(nodes)
        # Created on first use by the relaxation engine, cleared every round.
        self._queue: Optional[IndexedMinHeap[MeshNode]] = None

    # --- Graph interface -----------------------------------------------------

    def nodes(self) -> Iterable[MeshNode]:
        return self._nodes

    def node(self, node_id: int) -> MeshNode:
        return self._nodes[node_id]

    def outgoing(self, node: Node) -> Mapping[MeshNode, float]:
        mesh_node = self._nodes[node.id]
        return {self._nodes[e.target]: e.cost for e in mesh_node.edges}

    # --- Mesh API ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def root(self) -> MeshNode:
        return self._nodes[ROOT_ID]

    @property
    def edge_count(self) -> int:
        return sum(len(n.edges) for n in self._nodes)

    def queue(self) -> IndexedMinHeap[MeshNode]:
        """Return the graph's priority queue, emptied."""
        if self._queue is None:
            try:
                self._queue = IndexedMinHeap(key=lambda n: n.min_cost)
            except MemoryError as exc:
                raise ResourceExhaustedError("cannot allocate priority queue") from exc
        else:
            self._queue.clear()
        return self._queue

    def reset(self) -> None:
        """Clear per-round cost state; root cost becomes 0, others +inf."""
        for node in self._nodes:
            node.reset()
        if self._queue is not None:
            self._queue.clear()

    def sample_enable(self, rng: random.Random, force_enable: bool = False) -> None:
        """
        Draw each relay's enable flag from its weight.

        With force_enable every node is switched on without drawing; the lagged
        flag is left alone in that case. The root is always enabled.
        """
        if force_enable:
            for node in self._nodes:
                node.enabled = True
        else:
            for node in self._nodes:
                if node.is_root:
                    continue
                node.sample_enable(rng)
        self.root.enabled = True

    def set_enabled(self, enabled_ids: Iterable[int]) -> None:
        """Enable exactly the given nodes (plus the root); no weight bookkeeping."""
        wanted = set(enabled_ids)
        for node in self._nodes:
            node.enabled = node.is_root or node.id in wanted

    def update_weights(self, delta: float) -> int:
        """Apply delta to every flipped node. Returns how many were updated."""
        updated = 0
        for node in self._nodes:
            if node.flipped:
                node.update_weight(delta)
                updated += 1
        return updated

    def enabled_count(self) -> int:
        return sum(1 for n in self._nodes if n.enabled)

    def weights(self) -> List[float]:
        return [n.weight for n in self._nodes]

    def min_costs(self) -> List[float]:
        return [n.min_cost for n in self._nodes]

    def dump(self) -> List[Dict[str, object]]:
        return [
            {
                "id": n.id,
                "min_cost": n.min_cost,
                "enabled": n.enabled,
                "weight": n.weight,
            }
            for n in self._nodes
        ]


def format_dump(rows: Iterable[Mapping[str, object]]) -> str:
    lines = []
    for row in rows:
        lines.append(
            f"id:{row['id']},\tmin cost:{float(row['min_cost']):.0f},"
            f"\tswitch enabled:{'Y' if row['enabled'] else 'N'}"
        )
    return "\n".join(lines)


# --- Construction ------------------------------------------------------------


def distance_to_cost(distance: float) -> float:
    """
    Base link cost for a hop of the given length: round(d * 5 + 30).

    Halves round away from zero.
    """
    return float(math.floor(distance * 5.0 + 30.0 + 0.5))


def link_cost(distance: float, touches_root: bool, params: CostParams) -> float:
    """Link cost plus the relay overhead unless the root is an endpoint."""
    cost = distance_to_cost(distance)
    if not touches_root:
        cost += params.cost_switch
    return cost


def build_mesh_graph(
    n_nodes: int,
    width: float,
    height: float,
    params: CostParams | None = None,
    rng: random.Random | None = None,
    initial_weight: float = 1.5,
) -> MeshGraph:
    """
    Scatter relays on a width x height field centred on the root and link them.

    Args:
        n_nodes: total node count including the root at the origin.
        width, height: field extents; relays land in [-w/2, w/2] x [-h/2, h/2].
        params: cutoff and cost constants.
        rng: random source for placement; pass a seeded one for reproducibility.
        initial_weight: starting logit for every node.
    """
    if n_nodes < 1:
        raise ValueError("n_nodes must be at least 1")
    if width < 0 or height < 0:
        raise ValueError("width and height must be non-negative")
    rng = rng or random.Random()

    positions: List[Tuple[float, float]] = [(0.0, 0.0)]
    for _ in range(1, n_nodes):
        x = (rng.random() - 0.5) * width
        y = (rng.random() - 0.5) * height
        positions.append((x, y))
    return build_mesh_graph_from_positions(positions, params, initial_weight)


def build_mesh_graph_from_positions(
    positions: Sequence[Tuple[float, float]],
    params: CostParams | None = None,
    initial_weight: float = 1.5,
) -> MeshGraph:
    """
    Build the mesh for explicit coordinates; positions[0] is the root.

    The result depends only on the coordinates and params.
    """
    params = params or CostParams()
    try:
        nodes = [
            MeshNode(_id=i, x=float(x), y=float(y), weight=initial_weight)
            for i, (x, y) in enumerate(positions)
        ]
        _connect_by_distance(nodes, params)
    except MemoryError as exc:
        raise ResourceExhaustedError(
            f"cannot allocate mesh of {len(positions)} nodes"
        ) from exc
    return MeshGraph(nodes)


def _connect_by_distance(nodes: List[MeshNode], params: CostParams) -> None:
    for a in nodes:
        edges: List[Edge] = []
        for b in nodes:
            if a is b:
                continue
            d = a.distance_to(b)
            if d < params.cutoff_distance:
                touches_root = a.is_root or b.is_root
                edges.append(Edge(target=b.id, cost=link_cost(d, touches_root, params)))
        a.edges = tuple(edges)
