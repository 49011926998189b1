"""
Directed, weighted graph abstraction for meshprune.

Nodes are Node instances addressed by integer id.
Edges are directed: u -> v with float cost.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping

from nodes import Node


class Graph(ABC):
    """Directed, weighted graph over Node objects."""

    @abstractmethod
    def nodes(self) -> Iterable[Node]:
        """Return all nodes in the graph, ordered by id."""
        raise NotImplementedError

    @abstractmethod
    def node(self, node_id: int) -> Node:
        """Return the node with the given id."""
        raise NotImplementedError

    @abstractmethod
    def outgoing(self, node: Node) -> Mapping[Node, float]:
        """
        Outgoing neighbors and edge costs for a given node.

        Returns: dict[Node, float]
        """
        raise NotImplementedError
