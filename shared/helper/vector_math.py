"""Small vector helpers shared by the in-memory index and the vectorizer."""

import math

from shared.exceptions import DimensionMismatchError


def cosine_similarity(vec_a: list[float], vec_b: list[float]) -> float:
    """Cosine similarity dot(a, b) / (|a| * |b|).

    Returns 0.0 when either vector has zero norm.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(expected=len(vec_a), actual=len(vec_b), index=1)
    dot = sum(a * b for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (norm_a * norm_b)


def average_vectors(vectors: list[list[float]]) -> list[float]:
    """Component-wise arithmetic mean of equally sized vectors.

    Raises:
        ValueError: If no vectors are given.
        DimensionMismatchError: If any vector differs in length from the first.
    """
    if not vectors:
        raise ValueError("Cannot average an empty list of vectors.")
    dimensions = len(vectors[0])
    totals = [0.0] * dimensions
    for index, vector in enumerate(vectors):
        if len(vector) != dimensions:
            raise DimensionMismatchError(expected=dimensions, actual=len(vector), index=index)
        for i, value in enumerate(vector):
            totals[i] += value
    return [total / len(vectors) for total in totals]
