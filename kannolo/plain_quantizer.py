"""Identity quantizer for dense vectors: codes are the vectors themselves."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np

from kannolo.quantizer import DistanceType, EncodedDataset, Quantizer, QueryEvaluator

_WORD_SIZE_BYTES = 8


class PlainQuantizer(Quantizer):
    """Stores dense vectors of dimension ``d`` unchanged."""

    def __init__(self, d: int, distance: DistanceType) -> None:
        if d < 0:
            raise ValueError(f"dimension must be non-negative, got {d}")
        self._d = d
        self._distance = distance

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainQuantizer):
            return NotImplemented
        return self._d == other._d and self._distance == other._distance

    def __hash__(self) -> int:
        return hash((self._d, self._distance))

    def __repr__(self) -> str:
        return f"PlainQuantizer(d={self._d}, distance={self._distance})"

    def encode(self, input_vectors: Any) -> np.ndarray:
        """Return a copy of the flat input; plain codes equal the input values."""
        return np.array(input_vectors, copy=True).ravel()

    def m(self) -> int:
        return self._d

    def distance(self) -> DistanceType:
        return self._distance

    def get_space_usage_bytes(self) -> int:
        return _WORD_SIZE_BYTES


def _distance(query: np.ndarray, document: np.ndarray, kind: DistanceType) -> float:
    if document.shape != query.shape:
        raise ValueError(
            f"query has {query.size} components but the vector has {document.size}"
        )
    document = document.astype(np.float32, copy=False)
    if kind is DistanceType.EUCLIDEAN:
        diff = query - document
        return float(np.dot(diff, diff))
    return -float(np.dot(query, document))


class QueryEvaluatorPlain(QueryEvaluator):
    """Exact distances between a dense query and plainly stored vectors.

    Euclidean distances are squared; dot products are negated so that
    smaller is always better.
    """

    def __init__(self, query: Any, dataset: EncodedDataset) -> None:
        self.query = np.asarray(query, dtype=np.float32).ravel()

    def compute_distance(self, dataset: EncodedDataset, index: int) -> float:
        return _distance(self.query, dataset.get(index), dataset.quantizer.distance())

    def compute_four_distances(
        self, dataset: EncodedDataset, indexes: Iterable[int]
    ) -> Iterator[float]:
        """Distances to the first four of ``indexes``; fewer than four is an error."""
        batch = list(indexes)[:4]
        if len(batch) < 4:
            raise ValueError(f"expected four indexes, got {len(batch)}")
        kind = dataset.quantizer.distance()
        results = [_distance(self.query, dataset.get(i), kind) for i in batch]
        return iter(results)