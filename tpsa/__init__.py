"""Parallel tempering simulated annealing (TPSA) for the travelling salesman problem."""
from __future__ import annotations

from .config import TPSAConfig, load_config
from .errors import ConfigError, InputError, TPSAError
from .geo import DistanceMatrix, Point, tour_cost
from .solver import TPSA, SolveResult, SolverState, solve_points

__all__ = [
    "ConfigError",
    "DistanceMatrix",
    "InputError",
    "Point",
    "SolveResult",
    "SolverState",
    "TPSA",
    "TPSAConfig",
    "TPSAError",
    "load_config",
    "solve_points",
    "tour_cost",
]
