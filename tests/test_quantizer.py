import numpy as np
import pytest

from kannolo.quantizer import DistanceType, EncodedDataset, Quantizer, QueryEvaluator
from kannolo.topk_selector import OnlineTopKSelector


class _Identity(Quantizer):
    def __init__(self, d, distance=DistanceType.EUCLIDEAN):
        self._d = d
        self._distance = distance

    def encode(self, input_vectors):
        return np.array(input_vectors, dtype=np.float32)

    def m(self):
        return self._d

    def distance(self):
        return self._distance

    def get_space_usage_bytes(self):
        return 8


class _SquaredL2(QueryEvaluator):
    def __init__(self, query):
        self.query = np.asarray(query, dtype=np.float32)

    def compute_distance(self, dataset, index):
        diff = dataset.get(index) - self.query
        return float(diff @ diff)


class _Collect(OnlineTopKSelector):
    def __init__(self, k):
        self.k = k
        self.items = []

    def push(self, distance):
        self.items.append((distance, len(self.items)))

    def push_with_id(self, distance, id):
        self.items.append((distance, id))

    def topk(self):
        return sorted(self.items)[: self.k]


@pytest.fixture
def dataset():
    q = _Identity(3)
    vectors = [[0, 0, 0], [1, 1, 1], [2, 2, 2], [3, 3, 3], [4, 4, 4]]
    return EncodedDataset(q, q.encode(vectors))


def test_distance_type_values():
    assert DistanceType("euclidean") is DistanceType.EUCLIDEAN
    assert DistanceType("dot_product") is DistanceType.DOT_PRODUCT


def test_quantizer_is_abstract():
    with pytest.raises(TypeError):
        Quantizer()


def test_dataset_len_and_dim(dataset):
    assert len(dataset) == 5
    assert dataset.dim() == 3


def test_dataset_get_returns_stored_vector(dataset):
    np.testing.assert_array_equal(dataset.get(2), [2, 2, 2])


def test_dataset_iter_matches_get(dataset):
    rows = list(dataset)
    assert len(rows) == len(dataset)
    for i, row in enumerate(rows):
        np.testing.assert_array_equal(row, dataset.get(i))


@pytest.mark.parametrize("index", [-1, 5, 100])
def test_dataset_get_out_of_range(dataset, index):
    with pytest.raises(IndexError):
        dataset.get(index)


def test_dataset_rejects_ragged_data():
    with pytest.raises(ValueError):
        EncodedDataset(_Identity(3), [1.0, 2.0, 3.0, 4.0])


def test_dataset_rejects_zero_width():
    with pytest.raises(ValueError):
        EncodedDataset(_Identity(0), [])


def test_compute_distances_matches_single(dataset):
    evaluator = _SquaredL2([1, 1, 1])
    indexes = [4, 0, 2]
    assert list(evaluator.compute_distances(dataset, indexes)) == [
        evaluator.compute_distance(dataset, i) for i in indexes
    ]


def test_compute_four_distances_matches_single(dataset):
    evaluator = _SquaredL2([2, 2, 2])
    indexes = [0, 1, 2, 3]
    assert list(evaluator.compute_four_distances(dataset, indexes)) == [
        evaluator.compute_distance(dataset, i) for i in indexes
    ]


def test_topk_retrieval_returns_closest(dataset):
    evaluator = _SquaredL2([3, 3, 3])
    distances = evaluator.compute_distances(dataset, range(len(dataset)))
    result = evaluator.topk_retrieval(distances, _Collect(2))
    assert [i for _, i in result] == [3, 2] or [i for _, i in result] == [3, 4]
    assert result[0] == (0.0, 3)


def test_query_evaluator_is_abstract():
    with pytest.raises(TypeError):
        QueryEvaluator()