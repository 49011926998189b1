"""
Algorithm interfaces for meshprune.

Keeps the cost propagation separate from graph construction and the
learning loop.
"""

from abc import ABC, abstractmethod
from typing import List

from mesh_graph import MeshGraph


class RelaxationEngine(ABC):
    """
    Interface for single-source cost propagation from the root.
    """

    @abstractmethod
    def relax(self, graph: MeshGraph) -> None:
        """
        Propagate costs from the root for the graph's current enable snapshot.

        Writes each node's min_cost and visited flag in place. Disabled nodes
        may be reached but never relay; unreached nodes keep +inf.
        """
        raise NotImplementedError

    def shortest_path_costs(self, graph: MeshGraph) -> List[float]:
        """
        Reset the graph, relax it and return min_cost indexed by node id.
        """
        graph.reset()
        self.relax(graph)
        return graph.min_costs()
