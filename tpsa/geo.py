"""Geometric and cost related helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np


@dataclass(frozen=True)
class Point:
    """A city location in the plane."""

    x: float
    y: float


def euclidean(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


class DistanceMatrix:
    """Symmetric cost table over city indices.

    The underlying array is flagged read-only once built, so it can be shared
    by every worker thread without synchronisation.
    """

    def __init__(self, matrix: np.ndarray) -> None:
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError("Distance matrix must be square")
        self._matrix = np.array(matrix, dtype=np.float64)
        self._matrix.flags.writeable = False
        self._rows: List[List[float]] = self._matrix.tolist()

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "DistanceMatrix":
        size = len(points)
        matrix = np.zeros((size, size), dtype=np.float64)
        for i in range(size):
            for j in range(i + 1, size):
                cost = euclidean(points[i], points[j])
                matrix[i, j] = cost
                matrix[j, i] = cost
        return cls(matrix)

    @property
    def size(self) -> int:
        return self._matrix.shape[0]

    @property
    def array(self) -> np.ndarray:
        return self._matrix

    def __len__(self) -> int:
        return self.size

    def cost(self, i: int, j: int) -> float:
        return self._rows[i][j]

    def as_lists(self) -> List[List[float]]:
        """Row-major nested lists, faster than numpy for scalar lookups."""
        return self._rows

    def tour_cost(self, tour: Sequence[int]) -> float:
        return tour_cost(tour, self._rows)


def tour_cost(tour: Sequence[int], rows: Sequence[Sequence[float]]) -> float:
    """Length of the closed cycle described by ``tour``."""
    n = len(tour)
    total = 0.0
    for k in range(n):
        total += rows[tour[k]][tour[(k + 1) % n]]
    return total


def is_permutation(tour: Sequence[int], size: int) -> bool:
    return len(tour) == size and sorted(tour) == list(range(size))
