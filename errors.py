"""Exceptions raised by meshprune."""


class MeshPruneError(Exception):
    """Base class for meshprune errors."""


class ResourceExhaustedError(MeshPruneError, MemoryError):
    """
    Node, edge or queue storage could not be allocated.

    Raised from graph or queue construction. The run cannot continue; callers
    should not retry.
    """
