"""Utility helpers for the TPSA solver."""
from __future__ import annotations

import logging
import random
import time
from typing import List

import numpy as np


LOGGER = logging.getLogger("tpsa")


def configure_logging(level: int = logging.INFO) -> None:
    """Configure the solver logger once."""
    if LOGGER.handlers:
        LOGGER.setLevel(level)
        return
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(message)s", "%H:%M:%S"
    )
    handler.setFormatter(formatter)
    LOGGER.addHandler(handler)
    LOGGER.setLevel(level)


def make_seeds(seed: int | None, count: int) -> List[int]:
    """Derive ``count`` independent integer seeds from a master seed.

    ``seed=None`` draws fresh entropy from the operating system, so two
    unseeded runs differ.
    """
    children = np.random.SeedSequence(seed).spawn(count)
    return [int(child.generate_state(1, dtype=np.uint64)[0]) for child in children]


def make_rng(seed: int) -> random.Random:
    return random.Random(seed)


class Timer:
    """Context manager for timing code blocks."""

    def __init__(self) -> None:
        self.start_time: float | None = None
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.elapsed = time.perf_counter() - (self.start_time or time.perf_counter())


def log_progress(iteration: int, total: int, cost: float, accepted: int) -> None:
    """Log the current optimisation state."""
    LOGGER.info("iter=%d/%d cold=%.3f swaps=%d", iteration, total, cost, accepted)
