"""Numeric helpers: matrix products, norms, recall and result export."""

from __future__ import annotations

import csv
import enum
import math
from collections.abc import Hashable, Iterable, Sequence
from typing import Any

import numpy as np


class MatrixLayout(enum.Enum):
    """Storage order of the output matrix of :func:`sgemm`."""

    ROW_MAJOR = "row_major"
    COL_MAJOR = "col_major"


def sgemm(
    layout: MatrixLayout,
    transpose_a: bool,
    transpose_b: bool,
    alpha: float,
    beta: float,
    m: int,
    k: int,
    n: int,
    a: Any,
    lda: int,
    b: Any,
    ldb: int,
    c: np.ndarray,
    ldc: int,
) -> np.ndarray:
    """Compute ``c = alpha * A @ B + beta * c`` in place on the flat array ``c``.

    ``A`` (m x k) is read row-major from ``a`` with row stride ``lda``; ``B``
    (k x n) is read column-major from ``b`` with column stride ``ldb``. ``C``
    (m x n) is stored in ``c`` with stride ``ldc`` in the given ``layout``.
    The transpose flags are accepted for interface compatibility; the
    strides alone fix how ``a`` and ``b`` are read. When ``beta`` is zero the
    previous contents of ``c`` are ignored. Returns ``c``.
    """
    if not isinstance(c, np.ndarray):
        raise TypeError("c must be a writable numpy array")
    a_flat = np.asarray(a, dtype=np.float32).ravel()
    b_flat = np.asarray(b, dtype=np.float32).ravel()
    c_flat = c.reshape(-1)
    if not np.shares_memory(c_flat, c) and c.size:
        raise ValueError("c must be contiguous so it can be updated in place")

    rows_m = np.arange(m)[:, None]
    cols_n = np.arange(n)[None, :]
    depth_row = np.arange(k)[None, :]
    depth_col = np.arange(k)[:, None]

    mat_a = a_flat[rows_m * lda + depth_row]
    mat_b = b_flat[depth_col + cols_n * ldb]

    if layout is MatrixLayout.ROW_MAJOR:
        c_index = rows_m * ldc + cols_n
    else:
        c_index = rows_m + cols_n * ldc

    product = np.float32(alpha) * (mat_a @ mat_b)
    if beta != 0:
        product = product + np.float32(beta) * c_flat[c_index].astype(np.float32)
    c_flat[c_index] = product
    return c


def intersection(s: Iterable[Hashable], groundtruth: Iterable[Hashable]) -> int:
    """Count the items of ``groundtruth`` that also appear in ``s``."""
    seen = set(s)
    return sum(1 for v in groundtruth if v in seen)


def warm_up() -> np.ndarray:
    """Run one 100x100 random matrix product to warm up the numeric backend."""
    m = k = n = 100
    rng = np.random.default_rng()
    a = rng.random(m * k, dtype=np.float32)
    b = rng.random(k * n, dtype=np.float32)
    result = np.zeros(m * n, dtype=np.float32)
    return sgemm(
        MatrixLayout.ROW_MAJOR, True, False, -2.0, 0.0, m, k, n, a, k, b, k, result, n
    )


def vectors_norm(vectors: Any, d: int) -> np.ndarray:
    """Squared norms of each complete run of ``d`` values; a trailing partial run is ignored."""
    if d <= 0:
        raise ValueError(f"dimension must be positive, got {d}")
    flat = np.asarray(vectors, dtype=np.float32).ravel()
    complete = flat[: (flat.size // d) * d].reshape(-1, d)
    return np.einsum("ij,ij->i", complete, complete)


def compute_vector_norm_squared(vec: Sequence[float], length: int) -> float:
    """Sum of squares of the first ``length`` values of ``vec``."""
    head = np.asarray(vec, dtype=np.float32).ravel()[:length]
    return float(np.dot(head, head))


def compute_squared_l2_distance(
    query_vec: Sequence[float], centroids: Sequence[float], length: int
) -> float:
    """Squared Euclidean distance over the first ``length`` paired values."""
    q = np.asarray(query_vec, dtype=np.float32).ravel()
    c = np.asarray(centroids, dtype=np.float32).ravel()
    size = min(length, q.size, c.size)
    diff = q[:size] - c[:size]
    return float(np.dot(diff, diff))


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _format_float(value: float) -> str:
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def save_to_tsv(
    params_ef_search: Iterable[int],
    recalls: Iterable[float],
    search_times: Iterable[int],
    filename: str,
) -> None:
    """Write one tab-separated row per search width with its accuracy and query time."""
    with open(filename, "w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle, delimiter="\t", lineterminator="\n")
        writer.writerow(["ef_search", "Accuracy@10", "Avg_query_time"])
        for param, rec, t in zip(params_ef_search, recalls, search_times):
            rounded = _round_half_away(rec * 100.0) / 100.0
            writer.writerow([str(param), _format_float(rounded), str(t)])


def compute_accuracy(
    ids: Sequence[int], ground_truth_values: Sequence[int], k: int, gt_size: int
) -> float:
    """Average recall@k over all queries, as a percentage.

    ``ids`` holds ``k`` results per query; ``ground_truth_values`` holds
    ``gt_size`` true neighbours per query, of which the first ``k`` count.
    """
    if k <= 0 or gt_size <= 0:
        raise ValueError("k and gt_size must be positive")
    n_queries = len(ground_truth_values) // gt_size
    if n_queries == 0:
        raise ValueError("ground truth holds no complete query")

    total = 0.0
    i = j = 0
    while i < len(ids) and j < len(ground_truth_values):
        if i + k > len(ids) or j + k > len(ground_truth_values):
            raise IndexError("results or ground truth end in the middle of a query")
        truth = set(ground_truth_values[j : j + k])
        hits = sum(1 for x in ids[i : i + k] if x in truth)
        total += hits / k
        i += k
        j += gt_size

    return 100.0 * total / n_queries