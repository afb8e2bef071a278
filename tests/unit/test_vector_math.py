import pytest

from shared.exceptions import DimensionMismatchError
from shared.helper.vector_math import average_vectors, cosine_similarity


def test_cosine_similarity_basic_values():
    assert cosine_similarity([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_cosine_similarity_zero_norm_is_zero():
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


def test_cosine_similarity_dimension_mismatch():
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_average_of_three_unit_vectors():
    averaged = average_vectors([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0]])

    assert averaged == pytest.approx([0.333, 0.333, 0.333, 0.0], abs=1e-3)


def test_average_rejects_mismatched_dimensions():
    with pytest.raises(DimensionMismatchError) as exc_info:
        average_vectors([[1.0, 0.0], [0.0, 1.0], [1.0]])

    assert exc_info.value.kind == "dimension-mismatch"
    assert exc_info.value.details["index"] == 2


def test_average_rejects_empty_input():
    with pytest.raises(ValueError):
        average_vectors([])
