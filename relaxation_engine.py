"""
Heap-based RelaxationEngine implementation for meshprune.

A Dijkstra traversal where a node's enable flag gates whether it relays:
disabled nodes can be reached as destinations but their outgoing edges are
never followed.
"""

from algorithms import RelaxationEngine
from mesh_graph import MeshGraph


class GatedDijkstraEngine(RelaxationEngine):
    """
    Single-source relaxation using the graph's indexed min-heap.

    Complexity:
        O(E log V) over the nodes reachable through enabled relays.
    """

    def __init__(self) -> None:
        # Instrumentation counters per invocation.
        self.last_edges_examined = 0
        self.last_relaxed = 0
        self.last_heap_pops = 0
        self.last_heap_pushes = 0
        self.last_decrease_keys = 0

    def relax(self, graph: MeshGraph) -> None:
        self.last_edges_examined = 0
        self.last_relaxed = 0
        self.last_heap_pops = 0
        self.last_heap_pushes = 0
        self.last_decrease_keys = 0

        pq = graph.queue()
        current = graph.root

        while current is not None:
            if current.enabled:
                for neighbor, cost in graph.outgoing(current).items():
                    if neighbor.visited:
                        continue
                    self.last_edges_examined += 1
                    alt = current.min_cost + cost
                    if alt < neighbor.min_cost:
                        neighbor.min_cost = alt
                        self.last_relaxed += 1
                        if neighbor in pq:
                            pq.decrease_key(neighbor)
                            self.last_decrease_keys += 1
                        else:
                            pq.insert(neighbor)
                            self.last_heap_pushes += 1
            current.visited = True

            current = pq.extract_min()
            if current is not None:
                self.last_heap_pops += 1
