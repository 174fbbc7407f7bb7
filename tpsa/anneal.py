"""Temperature-governed 2-opt passes run by each worker."""
from __future__ import annotations

import math
from typing import List

from .geo import DistanceMatrix
from .replica import Replica


def metropolis(delta: float, temperature: float) -> float:
    """Probability ``exp(-delta / temperature)``, saturated at 1."""
    if delta <= 0:
        return 1.0
    return math.exp(-delta / temperature)


def run_sa(replica: Replica, matrix: DistanceMatrix, period: int) -> int:
    """Run ``period`` full 2-opt sweeps on ``replica`` and return accepted moves.

    Only ``replica.tour`` and ``replica.rng`` are touched, which keeps
    concurrent calls on distinct replicas free of shared mutable state.
    """
    tour = replica.tour
    rows = matrix.as_lists()
    rand = replica.rng.random
    temperature = replica.temperature
    n = len(tour)
    accepted = 0
    for _ in range(period):
        for i in range(n - 2):
            for j in range(i + 2, n):
                a, b = tour[i], tour[i + 1]
                c, d = tour[j], tour[(j + 1) % n]
                current = rows[a][b] + rows[c][d]
                nxt = rows[a][c] + rows[b][d]
                p = rand()
                if nxt < current or p <= metropolis(nxt - current, temperature):
                    _flip(tour, i + 1, j)
                    accepted += 1
    return accepted


def _flip(tour: List[int], start: int, end: int) -> None:
    """Reverse ``tour[start..end]`` in place."""
    tour[start : end + 1] = tour[start : end + 1][::-1]
