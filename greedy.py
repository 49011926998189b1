"""
Greedy relay selection, a deterministic baseline for the learned policy.

Works outward from the root one layer at a time. Within a layer, the
candidate relay that covers the most still-uncovered frontier nodes is
switched on until the frontier is covered; the nodes it covered become the
next layer's candidates.
"""

from typing import Dict, Set

from graph import Graph
from mesh_graph import MeshGraph
from nodes import ROOT_ID


def greedy_enable_selection(graph: Graph) -> Set[int]:
    """
    Return the ids of the relays the greedy cover switches on (root included).

    Ties go to the lowest id. A layer ends early when no candidate covers any
    remaining frontier node.
    """
    neighbours: Dict[int, Set[int]] = {
        n.id: {v.id for v in graph.outgoing(n)} for n in graph.nodes()
    }

    enabled: Set[int] = {ROOT_ID}
    covered: Set[int] = {ROOT_ID}
    candidates: Set[int] = {ROOT_ID}
    frontier: Set[int] = set(neighbours[ROOT_ID])

    while frontier:
        newly_covered: Set[int] = set()
        while frontier and candidates:
            best_id = -1
            best_cover = 0
            for cid in sorted(candidates):
                cover = len(neighbours[cid] & frontier)
                if cover > best_cover:
                    best_cover = cover
                    best_id = cid
            if best_id < 0:
                break
            candidates.discard(best_id)
            hit = neighbours[best_id] & frontier
            frontier -= hit
            newly_covered |= hit
            covered |= hit
            enabled.add(best_id)

        if not newly_covered:
            break
        candidates = newly_covered
        frontier = set()
        for nid in newly_covered:
            frontier |= neighbours[nid] - covered

    return enabled


def apply_greedy_selection(graph: MeshGraph) -> Set[int]:
    """Switch on exactly the greedy selection and return it."""
    selection = greedy_enable_selection(graph)
    graph.set_enabled(selection)
    return selection
