"""Parallel tempering driver: fork-join annealing followed by replica exchange."""
from __future__ import annotations

import enum
import random
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import List, Sequence

from .anneal import run_sa
from .config import TPSAConfig
from .errors import InputError
from .exchange import exchange_solutions
from .geo import DistanceMatrix, Point
from .ladder import temperature_ladder
from .replica import Replica, make_replicas
from .utils import LOGGER, Timer, log_progress, make_rng, make_seeds

MIN_CITIES = 3


class SolverState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    DONE = "done"


@dataclass
class SolveResult:
    """Tour read from the coldest slot once the run is over."""

    tour: List[int]
    cost: float
    temperatures: List[float]
    iterations: int
    attempted_exchanges: int = 0
    accepted_exchanges: int = 0
    elapsed: float = 0.0
    reference_cost: float | None = None
    gap: float | None = None
    history: List[float] = field(default_factory=list)


class TPSA:
    """Replica-exchange simulated annealing over 2-opt moves."""

    def __init__(self, config: TPSAConfig, points: Sequence[Point]) -> None:
        self.config = config
        self.points = list(points)
        self.state = SolverState.UNINITIALIZED
        self.matrix: DistanceMatrix | None = None
        self.temperatures: List[float] = []
        self.replicas: List[Replica] = []
        self._exchange_rng: random.Random | None = None
        self.attempted_exchanges = 0
        self.accepted_exchanges = 0
        self.history: List[float] = []

    @property
    def size(self) -> int:
        return len(self.points)

    def initialize(self) -> None:
        """Validate inputs and seed every replica with one shuffled tour."""
        self.config.validate()
        if self.size < MIN_CITIES:
            raise InputError(f"At least {MIN_CITIES} cities are required, got {self.size}")
        self.matrix = DistanceMatrix.from_points(self.points)
        self.temperatures = temperature_ladder(
            self.config.min_temp, self.config.max_temp, self.config.thread
        )
        shuffle_seed, exchange_seed, *replica_seeds = make_seeds(
            self.config.seed, self.config.thread + 2
        )
        tour = list(range(self.size))
        make_rng(shuffle_seed).shuffle(tour)
        self.replicas = make_replicas(tour, self.temperatures, replica_seeds)
        self._exchange_rng = make_rng(exchange_seed)
        self.attempted_exchanges = 0
        self.accepted_exchanges = 0
        self.history = []
        self.state = SolverState.INITIALIZED
        LOGGER.info(
            "Initialised %d cities, %d replicas, T in [%.4g, %.4g], initial cost %.3f",
            self.size,
            self.config.thread,
            self.config.min_temp,
            self.config.max_temp,
            self.matrix.tour_cost(tour),
        )

    def step(self, executor: ThreadPoolExecutor, iteration: int) -> None:
        """One cycle: parallel local search, barrier, then sequential exchange."""
        assert self.matrix is not None and self._exchange_rng is not None
        futures = [
            executor.submit(run_sa, replica, self.matrix, self.config.period)
            for replica in self.replicas
        ]
        wait(futures)
        for replica, future in zip(self.replicas, futures):
            moves = future.result()
            LOGGER.debug("iter=%d slot=%d accepted_moves=%d", iteration, replica.slot, moves)
        attempted, accepted = exchange_solutions(
            self.replicas, iteration, self.matrix, self._exchange_rng
        )
        self.attempted_exchanges += attempted
        self.accepted_exchanges += accepted

    def solve(self) -> SolveResult:
        if self.state is SolverState.UNINITIALIZED:
            self.initialize()
        if self.state is not SolverState.INITIALIZED:
            raise RuntimeError(f"Cannot solve from state {self.state.value}")
        self.state = SolverState.RUNNING
        total = self.config.max_iteration
        with Timer() as timer:
            with ThreadPoolExecutor(
                max_workers=self.config.thread, thread_name_prefix="tpsa"
            ) as executor:
                for iteration in range(total):
                    self.step(executor, iteration)
                    cost = self.best_cost()
                    self.history.append(cost)
                    if (iteration + 1) % self.config.log_every == 0 or iteration + 1 == total:
                        log_progress(iteration + 1, total, cost, self.accepted_exchanges)
        self.state = SolverState.DONE
        cost = self.best_cost()
        LOGGER.info("Finished after %d iterations: cost %.3f (%.2fs)", total, cost, timer.elapsed)
        return SolveResult(
            tour=self.best_tour(),
            cost=cost,
            temperatures=list(self.temperatures),
            iterations=total,
            attempted_exchanges=self.attempted_exchanges,
            accepted_exchanges=self.accepted_exchanges,
            elapsed=timer.elapsed,
            history=list(self.history),
        )

    def best_tour(self) -> List[int]:
        """Copy of the tour held by the coldest slot."""
        if not self.replicas:
            raise RuntimeError("Solver is not initialised")
        return list(self.replicas[-1].tour)

    def best_cost(self) -> float:
        assert self.matrix is not None
        return self.matrix.tour_cost(self.replicas[-1].tour)


def solve_points(
    points: Sequence[Point],
    config: TPSAConfig,
    reference_tour: Sequence[int] | None = None,
) -> SolveResult:
    """Run the solver on ``points`` and compare against an optional reference tour."""
    solver = TPSA(config, points)
    result = solver.solve()
    if reference_tour is not None:
        assert solver.matrix is not None
        reference_cost = solver.matrix.tour_cost(reference_tour)
        result.reference_cost = reference_cost
        result.gap = (result.cost - reference_cost) / reference_cost if reference_cost > 0 else 0.0
    return result
