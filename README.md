# kannolo

Building blocks for nearest neighbour search over dense and sparse vectors,
built on numpy.

Distances follow one rule throughout: smaller is better. Euclidean distances
are squared, and dot products are negated, so the same top-k selection works
for every metric.

## Modules

- `kannolo.topk_selector`: `OnlineTopKSelector`, the interface for anything
  that consumes a stream of distances (`push`, `push_with_id`, `extend`) and
  reports the `k` smallest as sorted `(distance, id)` pairs (`topk`).
- `kannolo.topk_heap`: `TopkHeap(k)`, a bounded max-heap implementing that
  interface. Distances pushed without an id are numbered by their position in
  the stream. `top()` gives the largest retained distance and `replace_top`
  swaps it out. Pushing into a heap with `k == 0` raises `IndexError`.
- `kannolo.quantizer`: `DistanceType` (`EUCLIDEAN`, `DOT_PRODUCT`), the
  `Quantizer` and `QueryEvaluator` interfaces, and `EncodedDataset`, which
  stores fixed-width codes back to back in one flat array (`get`, `len`,
  `dim`, iteration).
- `kannolo.plain_quantizer`: `PlainQuantizer(d, distance)` stores dense vectors
  unchanged. `QueryEvaluatorPlain(query, dataset)` computes exact distances
  with `compute_distance`, `compute_distances` and `compute_four_distances`.
  The last one needs at least four indexes.
- `kannolo.sparse_plain_quantizer`: `SparsePlainQuantizer`,
  `SparseEncodedDataset(quantizer, vectors, dim=None)` for `(components,
  values)` pairs, and `SparseQueryEvaluatorPlain(query_components,
  query_values, dataset)` for negated dot products. Components must be
  integers between 0 and 65535.
- `kannolo.codecs`: writers and a reader for packed codes over any writable
  buffer, such as a `bytearray` or a numpy `uint8` array:
  - `PQEncoderGeneric(code, nbits)` packs values of up to 64 bits, least
    significant bits first.
  - `PQEncoder8` writes one byte per value.
  - `PQEncoder16` writes one little-endian 16-bit word per value.
  - `PQDecoder8` reads one byte per value.
- `kannolo.utils`: numeric and reporting helpers:
  - `sgemm` computes an in-place `c = alpha * A @ B + beta * c` on flat
    arrays, in a `MatrixLayout`.
  - `vectors_norm`, `compute_vector_norm_squared` and
    `compute_squared_l2_distance` compute norms and distances.
  - `intersection` and `compute_accuracy` measure recall as a percentage.
  - `save_to_tsv` writes benchmark rows with the columns `ef_search`,
    `Accuracy@10` and `Avg_query_time`.
  - `warm_up` runs one random 100x100 product.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Exact search over dense vectors:

```python
import numpy as np

from kannolo.plain_quantizer import PlainQuantizer, QueryEvaluatorPlain
from kannolo.quantizer import DistanceType, EncodedDataset
from kannolo.topk_heap import TopkHeap

data = np.random.default_rng(0).random((1000, 16), dtype=np.float32)
quantizer = PlainQuantizer(16, DistanceType.EUCLIDEAN)
dataset = EncodedDataset(quantizer, quantizer.encode(data))

evaluator = QueryEvaluatorPlain(data[42], dataset)
distances = evaluator.compute_distances(dataset, range(len(dataset)))
print(evaluator.topk_retrieval(distances, TopkHeap(10)))
```

Sparse vectors:

```python
from kannolo.quantizer import DistanceType
from kannolo.sparse_plain_quantizer import (
    SparseEncodedDataset,
    SparsePlainQuantizer,
    SparseQueryEvaluatorPlain,
)

quantizer = SparsePlainQuantizer(4, DistanceType.DOT_PRODUCT)
dataset = SparseEncodedDataset(quantizer, [([0, 3], [1.0, 2.0]), ([1], [5.0])])
evaluator = SparseQueryEvaluatorPlain([3], [1.0], dataset)
evaluator.compute_distance(dataset, 0)  # -2.0
```

Using the top-k heap on its own:

```python
from kannolo.topk_heap import TopkHeap

heap = TopkHeap(3)
heap.extend([0.0, -1.0, 2.0])
heap.topk()  # [(-1.0, 1), (0.0, 0), (2.0, 2)]
```

## What this package does not do

The package provides the pieces that search is built from, and no search
index. It has no graph or other index structure, no bookkeeping of visited
nodes, and no trained product quantizer with lookup-table distances. The
code writers in `kannolo.codecs` pack codes you already have. The package
does not load or save datasets or indexes, and it has no command-line tools.