"""Quantizer, encoded dataset and query evaluator interfaces."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np

from kannolo.topk_selector import OnlineTopKSelector


class DistanceType(enum.Enum):
    """How two vectors are compared; smaller distances are better."""

    EUCLIDEAN = "euclidean"
    DOT_PRODUCT = "dot_product"


class Quantizer(ABC):
    """Turns input vectors into stored codes and knows how they are compared."""

    @abstractmethod
    def encode(self, input_vectors: Any) -> np.ndarray:
        """Encode a flat run of input vectors and return the flat run of codes."""

    @abstractmethod
    def m(self) -> int:
        """Number of code items that each stored vector occupies."""

    @abstractmethod
    def distance(self) -> DistanceType:
        """The distance this quantizer is used with."""

    @abstractmethod
    def get_space_usage_bytes(self) -> int:
        """Memory taken by the quantizer itself, in bytes."""


class EncodedDataset:
    """Fixed-width encoded vectors stored back to back in one flat array."""

    def __init__(self, quantizer: Quantizer, data: Any) -> None:
        width = quantizer.m()
        if width <= 0:
            raise ValueError(f"quantizer code width must be positive, got {width}")
        flat = np.asarray(data).ravel()
        if flat.size % width:
            raise ValueError(
                f"data length {flat.size} is not a multiple of the code width {width}"
            )
        self.quantizer = quantizer
        self.data = flat
        self._width = width

    def get(self, index: int) -> np.ndarray:
        """Return the code of the vector at ``index``."""
        if not 0 <= index < len(self):
            raise IndexError(f"index {index} out of range for dataset of {len(self)}")
        return self.data[index * self._width : (index + 1) * self._width]

    def __len__(self) -> int:
        return self.data.size // self._width

    def dim(self) -> int:
        """Width of each stored code."""
        return self._width

    def __iter__(self) -> Iterator[np.ndarray]:
        return (self.get(i) for i in range(len(self)))


class QueryEvaluator(ABC):
    """Computes distances between one query and vectors of an encoded dataset."""

    @abstractmethod
    def compute_distance(self, dataset: Any, index: int) -> float:
        """Distance between the query and the vector at ``index``."""

    def compute_distances(self, dataset: Any, indexes: Iterable[int]) -> Iterator[float]:
        """Distances to each of ``indexes``, in order."""
        return (self.compute_distance(dataset, index) for index in indexes)

    def compute_four_distances(
        self, dataset: Any, indexes: Iterable[int]
    ) -> Iterator[float]:
        """Distances to a batch of four vectors; by default one at a time."""
        return (self.compute_distance(dataset, index) for index in indexes)

    def topk_retrieval(
        self, distances: Iterable[float], heap: OnlineTopKSelector
    ) -> list[tuple[float, int]]:
        """Feed ``distances`` to ``heap`` and return its sorted top-k."""
        for distance in distances:
            heap.push(distance)
        return heap.topk()