"""Bounded max-heap that keeps the k smallest distances of a stream."""

from __future__ import annotations

from collections.abc import Iterable

from kannolo.topk_selector import OnlineTopKSelector


class TopkHeap(OnlineTopKSelector):
    """Keeps the ``k`` smallest distances pushed so far, with their ids.

    Internally a binary max-heap: the root holds the largest retained
    distance, so a new distance only enters once the heap is full if it is
    smaller than the root.
    """

    def __init__(self, k: int) -> None:
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        self.k = k
        self.n_processed = 0
        self._distances: list[float] = []
        self._ids: list[int] = []

    def __len__(self) -> int:
        return len(self._distances)

    def _add(self, distance: float, id: int) -> None:
        """Insert a new entry and sift it up to restore the heap order."""
        distances = self._distances
        ids = self._ids
        distances.append(distance)
        ids.append(id)

        i = len(distances) - 1
        while i > 0:
            parent = ((i + 1) >> 1) - 1
            if distance <= distances[parent]:
                break
            distances[i] = distances[parent]
            ids[i] = ids[parent]
            i = parent
        distances[i] = distance
        ids[i] = id

    def replace_top(self, distance: float, id: int) -> None:
        """Replace the largest retained distance with ``distance`` and sift it down."""
        distances = self._distances
        ids = self._ids
        size = len(distances)
        i = 0
        while True:
            right = (i + 1) << 1
            left = right - 1
            if left >= size:
                break
            if right == size or distances[left] >= distances[right]:
                child = left
            else:
                child = right
            if distance >= distances[child]:
                break
            distances[i] = distances[child]
            ids[i] = ids[child]
            i = child
        distances[i] = distance
        ids[i] = id

    def top(self) -> float:
        """The largest retained distance; raises IndexError when the heap is empty."""
        return self._distances[0]

    def push(self, distance: float) -> None:
        self.push_with_id(distance, self.n_processed)

    def push_with_id(self, distance: float, id: int) -> None:
        if self.n_processed < self.k:
            self._add(distance, id)
            self.n_processed += 1
            return
        if distance < self.top():
            self.replace_top(distance, id)
        self.n_processed += 1

    def extend(self, distances: Iterable[float]) -> None:
        values = list(distances)
        base = self.n_processed
        items = iter(enumerate(values))

        while len(self._distances) < self.k:
            entry = next(items, None)
            if entry is None:
                self.n_processed += len(values)
                return
            offset, distance = entry
            self._add(distance, base + offset)

        for offset, distance in items:
            if distance < self.top():
                self.replace_top(distance, base + offset)

        self.n_processed += len(values)

    def topk(self) -> list[tuple[float, int]]:
        return sorted(zip(self._distances, self._ids), key=lambda pair: pair[0])