"""Interface for online selectors that keep the k smallest distances of a stream."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable


class OnlineTopKSelector(ABC):
    """Consumes distances one at a time and reports the k smallest seen so far.

    Distances pushed without an explicit id are numbered by their position in
    the stream, starting at zero.
    """

    @abstractmethod
    def push(self, distance: float) -> None:
        """Offer a distance whose id is its position in the stream."""

    @abstractmethod
    def push_with_id(self, distance: float, id: int) -> None:
        """Offer a distance with an explicit id."""

    def extend(self, distances: Iterable[float]) -> None:
        """Offer every distance of ``distances`` in order, as with :meth:`push`."""
        for distance in distances:
            self.push(distance)

    @abstractmethod
    def topk(self) -> list[tuple[float, int]]:
        """Return the retained ``(distance, id)`` pairs sorted by ascending distance."""