"""
Node model for meshprune.

A MeshNode is a relay unit at a fixed 2-D position. Its outgoing edges are
fixed once the graph is built; the enable flags, min_cost and visited flag
are per-round state, and weight is the only state that survives a reset.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple
import math
import random


ROOT_ID = 0


def sigmoid(v: float) -> float:
    """Logistic function mapping a weight (logit) to an enable probability."""
    # Split on sign so large |v| never overflows math.exp.
    if v >= 0:
        return 1.0 / (1.0 + math.exp(-v))
    z = math.exp(v)
    return z / (1.0 + z)


class Node(ABC):
    """Abstract node in a mesh graph."""

    @property
    @abstractmethod
    def id(self) -> int:
        """
        Index of the node in its graph; the root is always 0.
        """
        raise NotImplementedError


@dataclass(frozen=True)
class Edge:
    """
    Directed edge to a neighbour.

    target is the neighbour's index in the owning graph, never the node
    object itself.
    """

    target: int
    cost: float


@dataclass(eq=False)
class MeshNode(Node):
    """
    Concrete relay node.

    Equality is identity: two nodes at the same position are still distinct
    relays.
    """

    _id: int
    x: float
    y: float
    weight: float = 1.5
    edges: Tuple[Edge, ...] = ()
    enabled: bool = True
    was_enabled_last_round: bool = True
    min_cost: float = math.inf
    visited: bool = False

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_root(self) -> bool:
        return self._id == ROOT_ID

    def distance_to(self, other: "MeshNode") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def reset(self) -> None:
        """Clear per-round relaxation state. Weight and enable flags are kept."""
        self.min_cost = 0.0 if self.is_root else math.inf
        self.visited = False

    def sample_enable(self, rng: random.Random) -> None:
        """Shift the enable flag into the lagged slot and draw a new one."""
        self.was_enabled_last_round = self.enabled
        self.enabled = sigmoid(self.weight) >= rng.random()

    @property
    def flipped(self) -> bool:
        return self.enabled != self.was_enabled_last_round

    def update_weight(self, delta: float) -> None:
        """
        Apply the shared reward delta if this node flipped this round.

        delta < 0 means the network got cheaper: a node that just switched on
        becomes more likely to stay on, one that switched off less likely.
        """
        if self.flipped:
            self.weight += delta * (-1.0 if self.enabled else 1.0)
