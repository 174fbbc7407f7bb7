"""Solver configuration."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

from .errors import ConfigError

# CamelCase keys accepted for compatibility with older config files.
_LEGACY_KEYS = {
    "MinTemp": "min_temp",
    "MaxTemp": "max_temp",
    "Thread": "thread",
    "Period": "period",
    "MaxIteration": "max_iteration",
    "DataFileName": "data_file",
    "Seed": "seed",
}


@dataclass
class TPSAConfig:
    """Parameters of a parallel tempering run."""

    min_temp: float
    max_temp: float
    thread: int
    period: int
    max_iteration: int
    data_file: str | None = None
    seed: int | None = None
    log_every: int = 10

    def validate(self) -> "TPSAConfig":
        for name in ("min_temp", "max_temp"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigError(f"{name} must be a finite number, got {value!r}")
        for name in ("thread", "period", "max_iteration", "log_every"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigError(f"seed must be an integer, got {self.seed!r}")
        if self.data_file is not None and not isinstance(self.data_file, str):
            raise ConfigError(f"data_file must be a path string, got {self.data_file!r}")
        if self.thread < 2:
            raise ConfigError("thread must be >= 2 to build a temperature ladder")
        if self.period < 1:
            raise ConfigError("period must be >= 1")
        if self.max_iteration < 0:
            raise ConfigError("max_iteration must be >= 0")
        if self.min_temp <= 0:
            raise ConfigError("min_temp must be strictly positive")
        if self.max_temp < self.min_temp:
            raise ConfigError("max_temp must be >= min_temp")
        if self.log_every < 1:
            raise ConfigError("log_every must be >= 1")
        return self

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "TPSAConfig":
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in payload.items():
            name = _LEGACY_KEYS.get(key, key)
            if name not in known:
                raise ConfigError(f"Unknown configuration key: {key}")
            values[name] = value
        missing = [name for name in ("min_temp", "max_temp", "thread", "period", "max_iteration") if name not in values]
        if missing:
            raise ConfigError(f"Missing configuration keys: {', '.join(missing)}")
        return cls(**values)


def load_config(path: str | Path) -> TPSAConfig:
    """Read a JSON configuration file."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid configuration file ({path}): {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Configuration file {path} is not UTF-8 text: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("Configuration file must contain a JSON object")
    return TPSAConfig.from_mapping(payload)
