"""Replica exchange between adjacent temperature slots."""
from __future__ import annotations

import math
import random
from typing import List, Sequence, Tuple

from .geo import DistanceMatrix
from .replica import Replica


def exchange_pairs(thread: int, iteration: int) -> List[Tuple[int, int]]:
    """Odd-even transposition schedule.

    Even iterations pair (0, 1), (2, 3), ...; odd iterations pair
    (1, 2), (3, 4), ...
    """
    start = 0 if iteration % 2 == 0 else 1
    return [(i, i + 1) for i in range(start, thread - 1, 2)]


def swap_probability(t_cur: float, t_next: float, v_cur: float, v_next: float) -> float:
    """``exp(-dT * dV / (T_next * T_cur))`` saturated at 1."""
    exponent = -(t_next - t_cur) * (v_next - v_cur) / (t_next * t_cur)
    if exponent >= 0:
        return 1.0
    return math.exp(exponent)


def exchange_solution(
    replicas: Sequence[Replica],
    cur: int,
    nxt: int,
    matrix: DistanceMatrix,
    rng: random.Random,
) -> bool:
    """Try to swap the tours held by slots ``cur`` and ``nxt``."""
    first, second = replicas[cur], replicas[nxt]
    delta_temp = second.temperature - first.temperature
    v_cur = matrix.tour_cost(first.tour)
    v_next = matrix.tour_cost(second.tour)
    delta_value = v_next - v_cur
    p = rng.random()
    q = swap_probability(first.temperature, second.temperature, v_cur, v_next)
    if delta_temp * delta_value < 0 or p <= q:
        first.tour, second.tour = second.tour, first.tour
        return True
    return False


def exchange_solutions(
    replicas: Sequence[Replica],
    iteration: int,
    matrix: DistanceMatrix,
    rng: random.Random,
) -> Tuple[int, int]:
    """Run the exchange step for one iteration; returns (attempted, accepted)."""
    attempted = 0
    accepted = 0
    for cur, nxt in exchange_pairs(len(replicas), iteration):
        attempted += 1
        if exchange_solution(replicas, cur, nxt, matrix, rng):
            accepted += 1
    return attempted, accepted
