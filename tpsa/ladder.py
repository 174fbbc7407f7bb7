"""Fixed temperature ladder shared by the replicas."""
from __future__ import annotations

from typing import List

from .errors import ConfigError


def temperature_ladder(min_temp: float, max_temp: float, thread: int) -> List[float]:
    """Linearly spaced temperatures, hottest first.

    Slot 0 holds ``max_temp`` and the last slot holds ``min_temp``.
    """
    if thread < 2:
        raise ConfigError("thread must be >= 2 to build a temperature ladder")
    interval = (max_temp - min_temp) / (thread - 1)
    temperatures = [0.0] * thread
    for i in range(thread):
        temperatures[thread - 1 - i] = interval * i + min_temp
    return temperatures
