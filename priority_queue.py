"""
Indexed binary min-heap with decrease-key.

Items are tracked by their integer id, so a caller can lower an item's key
and ask the heap to restore order without holding a handle into the heap.
"""

from typing import Callable, Dict, Generic, List, Optional, Protocol, TypeVar


class _HasId(Protocol):
    @property
    def id(self) -> int: ...


T = TypeVar("T", bound=_HasId)


class IndexedMinHeap(Generic[T]):
    """
    Min-heap ordered by key(item).

    Complexity:
        insert, decrease_key, extract_min: O(log n); membership: O(1).
    """

    def __init__(self, key: Callable[[T], float]) -> None:
        self._key = key
        self._heap: List[T] = []
        self._pos: Dict[int, int] = {}  # item id -> index in _heap

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, item: T) -> bool:
        return item.id in self._pos

    def insert(self, item: T) -> None:
        """Add item; it must not already be queued."""
        if item.id in self._pos:
            raise ValueError(f"item {item.id} is already queued")
        self._heap.append(item)
        self._pos[item.id] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def decrease_key(self, item: T) -> None:
        """Restore heap order after item's key was lowered."""
        try:
            idx = self._pos[item.id]
        except KeyError:
            raise KeyError(f"item {item.id} is not queued") from None
        self._sift_up(idx)

    def extract_min(self) -> Optional[T]:
        """Remove and return the smallest item, or None when empty."""
        if not self._heap:
            return None
        top = self._heap[0]
        last = self._heap.pop()
        del self._pos[top.id]
        if self._heap:
            self._heap[0] = last
            self._pos[last.id] = 0
            self._sift_down(0)
        return top

    def peek(self) -> Optional[T]:
        return self._heap[0] if self._heap else None

    def clear(self) -> None:
        self._heap.clear()
        self._pos.clear()

    # --- internals -----------------------------------------------------------

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._pos[heap[i].id] = i
        self._pos[heap[j].id] = j

    def _sift_up(self, idx: int) -> None:
        key = self._key
        while idx > 0:
            parent = (idx - 1) // 2
            if key(self._heap[idx]) < key(self._heap[parent]):
                self._swap(idx, parent)
                idx = parent
            else:
                break

    def _sift_down(self, idx: int) -> None:
        key = self._key
        n = len(self._heap)
        while True:
            left = 2 * idx + 1
            right = left + 1
            smallest = idx
            if left < n and key(self._heap[left]) < key(self._heap[smallest]):
                smallest = left
            if right < n and key(self._heap[right]) < key(self._heap[smallest]):
                smallest = right
            if smallest == idx:
                break
            self._swap(idx, smallest)
            idx = smallest
