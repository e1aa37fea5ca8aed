"""Identity quantizer for sparse vectors and exact dot-product evaluation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np

from kannolo.quantizer import DistanceType, Quantizer, QueryEvaluator

_WORD_SIZE_BYTES = 8
_MAX_COMPONENT = np.iinfo(np.uint16).max


def _as_sparse(components: Any, values: Any) -> tuple[np.ndarray, np.ndarray]:
    comps = np.asarray(components).ravel()
    vals = np.asarray(values, dtype=np.float32).ravel()
    if comps.size != vals.size:
        raise ValueError(
            f"sparse vector has {comps.size} components but {vals.size} values"
        )
    if comps.size:
        if not np.issubdtype(comps.dtype, np.integer):
            raise TypeError("sparse components must be integers")
        if comps.min() < 0 or comps.max() > _MAX_COMPONENT:
            raise ValueError(
                f"sparse components must lie between 0 and {_MAX_COMPONENT}"
            )
    return comps.astype(np.uint16), vals


class SparsePlainQuantizer(Quantizer):
    """Stores sparse vectors over ``d`` dimensions unchanged."""

    def __init__(self, d: int, distance: DistanceType) -> None:
        if d < 0:
            raise ValueError(f"dimension must be non-negative, got {d}")
        self._d = d
        self._distance = distance

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparsePlainQuantizer):
            return NotImplemented
        return self._d == other._d and self._distance == other._distance

    def __hash__(self) -> int:
        return hash((self._d, self._distance))

    def __repr__(self) -> str:
        return f"SparsePlainQuantizer(d={self._d}, distance={self._distance})"

    def encode(self, input_vectors: Any) -> np.ndarray:
        """Return a copy of the flat input values; plain codes equal the input."""
        return np.array(input_vectors, copy=True).ravel()

    def m(self) -> int:
        return self._d

    def distance(self) -> DistanceType:
        return self._distance

    def get_space_usage_bytes(self) -> int:
        return _WORD_SIZE_BYTES


class SparseEncodedDataset:
    """A collection of sparse vectors, each a pair of component ids and values.

    When ``dim`` is None it is taken as one more than the largest component.
    """

    def __init__(
        self,
        quantizer: SparsePlainQuantizer,
        vectors: Iterable[tuple[Any, Any]],
        dim: int | None = None,
    ) -> None:
        self.quantizer = quantizer
        self._vectors = [_as_sparse(comps, vals) for comps, vals in vectors]
        if dim is None:
            dim = max(
                (int(comps.max()) + 1 for comps, _ in self._vectors if comps.size),
                default=0,
            )
        if dim < 0:
            raise ValueError(f"dimension must be non-negative, got {dim}")
        self._dim = dim

    def get(self, index: int) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(components, values)`` of the vector at ``index``."""
        if not 0 <= index < len(self):
            raise IndexError(f"index {index} out of range for dataset of {len(self)}")
        return self._vectors[index]

    def __len__(self) -> int:
        return len(self._vectors)

    def dim(self) -> int:
        """Dimensionality of the space the vectors live in."""
        return self._dim

    def __iter__(self) -> Iterator[tuple[np.ndarray, np.ndarray]]:
        return iter(self._vectors)


class SparseQueryEvaluatorPlain(QueryEvaluator):
    """Negated dot products between a sparse query and stored sparse vectors.

    The query is expanded once into a dense vector wide enough for both the
    dataset and the query's own largest component.
    """

    def __init__(
        self, query_components: Any, query_values: Any, dataset: SparseEncodedDataset
    ) -> None:
        comps, vals = _as_sparse(query_components, query_values)
        largest = int(comps.max()) if comps.size else 0
        dense_dim = max(dataset.dim(), largest + 1)
        dense = np.zeros(dense_dim, dtype=np.float32)
        dense[comps.astype(np.intp)] = vals
        self.dense_query = dense

    def compute_distance(self, dataset: SparseEncodedDataset, index: int) -> float:
        comps, vals = dataset.get(index)
        idx = comps.astype(np.intp)
        inside = idx < self.dense_query.size
        dot = float(np.dot(self.dense_query[idx[inside]], vals[inside]))
        return -dot