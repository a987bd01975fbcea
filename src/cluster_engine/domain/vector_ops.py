"""Pure numeric helpers for centroid and embedding vectors.

Vectors enter as any float sequence and leave as tuples of plain floats, so
nothing returned here aliases a caller's list or a numpy buffer.
"""

import math
from collections.abc import Sequence

import numpy as np

Vector = tuple[float, ...]


def as_array(vector: Sequence[float]) -> np.ndarray:
    """Convert a sequence to a float64 array. Nested input keeps its shape."""
    return np.asarray(vector, dtype=np.float64)


def to_vector(array: np.ndarray) -> Vector:
    return tuple(float(x) for x in array.tolist())


def is_finite(vector: Sequence[float]) -> bool:
    return bool(np.all(np.isfinite(as_array(vector))))


def magnitude(vector: Sequence[float]) -> float:
    """Euclidean (L2) norm."""
    if len(vector) == 0:
        return 0.0
    return float(np.linalg.norm(as_array(vector)))


def normalize(vector: Sequence[float]) -> Vector:
    """Scale to unit magnitude; a zero vector is returned unchanged."""
    array = as_array(vector)
    norm = float(np.linalg.norm(array)) if array.size else 0.0
    if norm == 0.0:
        return to_vector(array)
    return to_vector(array / norm)


def rescale_if_exceeds(vector: Sequence[float], max_magnitude: float) -> Vector:
    """Rescale to unit magnitude only when the norm exceeds ``max_magnitude``."""
    if magnitude(vector) > max_magnitude:
        return normalize(vector)
    return to_vector(as_array(vector))


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1]; 0.0 when either vector has zero magnitude."""
    left, right = as_array(a), as_array(b)
    if left.shape != right.shape:
        raise ValueError(f"vector lengths differ: {left.size} != {right.size}")
    denominator = float(np.linalg.norm(left) * np.linalg.norm(right))
    if denominator == 0.0 or math.isnan(denominator):
        return 0.0
    return clamp(float(np.dot(left, right)) / denominator, -1.0, 1.0)


def mean_vector(vectors: Sequence[Sequence[float]]) -> Vector:
    """Component-wise mean of equally sized vectors."""
    matrix = np.asarray(vectors, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[0] == 0:
        raise ValueError("mean_vector expects a non-empty list of equally sized vectors")
    return to_vector(matrix.mean(axis=0))
