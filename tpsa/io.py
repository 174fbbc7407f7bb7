"""Input/output helpers for the TPSA solver."""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Dict, List, Sequence

from .errors import InputError
from .geo import Point, is_permutation
from .solver import MIN_CITIES, SolveResult
from .utils import LOGGER


def _read_lines(path: str | Path) -> List[str]:
    try:
        return Path(path).read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise InputError(f"{path} is not a text file: {exc}") from exc


def _parse_float(token: str, path: str | Path, lineno: int) -> float:
    try:
        value = float(token)
    except ValueError as exc:
        raise InputError(f"{path}:{lineno}: malformed coordinate {token!r}") from exc
    if not math.isfinite(value):
        raise InputError(f"{path}:{lineno}: non-finite coordinate {token!r}")
    return value


def _parse_tsplib_points(lines: Sequence[str], path: str | Path) -> List[Point]:
    points: List[Point] = []
    in_section = False
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        if not in_section:
            key, _, value = line.partition(":")
            if key.strip() == "EDGE_WEIGHT_TYPE" and value.strip() not in ("EUC_2D", ""):
                LOGGER.warning(
                    "%s uses EDGE_WEIGHT_TYPE %s; exact Euclidean distances are used instead",
                    path,
                    value.strip(),
                )
            if line.startswith("NODE_COORD_SECTION"):
                in_section = True
            continue
        if line == "EOF":
            break
        parts = line.split()
        if len(parts) != 3:
            raise InputError(f"{path}:{lineno}: expected 'index x y', got {line!r}")
        points.append(Point(_parse_float(parts[1], path, lineno), _parse_float(parts[2], path, lineno)))
    if not in_section:
        raise InputError(f"{path}: missing NODE_COORD_SECTION")
    return points


def _parse_plain_points(lines: Sequence[str], path: str | Path) -> List[Point]:
    points: List[Point] = []
    for lineno, raw in enumerate(lines, start=1):
        parts = raw.split()
        if not parts:
            continue
        if len(parts) != 2:
            raise InputError(f"{path}:{lineno}: expected two coordinates, got {raw.strip()!r}")
        points.append(Point(_parse_float(parts[0], path, lineno), _parse_float(parts[1], path, lineno)))
    return points


def read_points(path: str | Path) -> List[Point]:
    """Read city coordinates from a plain ``x<TAB>y`` file or a TSPLIB file."""
    lines = _read_lines(path)
    if any(line.strip().startswith("NODE_COORD_SECTION") for line in lines):
        points = _parse_tsplib_points(lines, path)
    else:
        points = _parse_plain_points(lines, path)
    if len(points) < MIN_CITIES:
        raise InputError(f"{path}: at least {MIN_CITIES} cities are required, got {len(points)}")
    return points


def read_tour(path: str | Path) -> List[int]:
    """Read a 1-based tour file and return 0-based city indices."""
    lines = _read_lines(path)
    has_section = any(line.strip() == "TOUR_SECTION" for line in lines)
    tour: List[int] = []
    in_section = not has_section
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        if not in_section:
            in_section = line == "TOUR_SECTION"
            continue
        if line in ("-1", "EOF"):
            break
        for token in line.split():
            try:
                city = int(token)
            except ValueError as exc:
                raise InputError(f"{path}:{lineno}: malformed city index {token!r}") from exc
            if city < 1:
                raise InputError(f"{path}:{lineno}: city indices are 1-based, got {city}")
            tour.append(city - 1)
    return tour


def reference_tour_path(data_path: str | Path) -> Path:
    """Location of the known-optimal tour for ``data_path`` (``ans/<stem>.opt.tour``)."""
    data_path = Path(data_path)
    return data_path.parent / "ans" / f"{data_path.stem}.opt.tour"


def load_reference_tour(path: str | Path, size: int) -> List[int] | None:
    """Read a reference tour; failures are logged and yield ``None``."""
    try:
        tour = read_tour(path)
    except InputError as exc:
        LOGGER.warning("Reference tour ignored: %s", exc)
        return None
    if not is_permutation(tour, size):
        LOGGER.warning("Reference tour ignored: %s is not a permutation of %d cities", path, size)
        return None
    return tour


def build_output_payload(result: SolveResult, data_file: str | None = None) -> Dict[str, object]:
    """Create a serialisable dictionary describing the solution."""
    return {
        "data_file": data_file,
        "cost": result.cost,
        "tour": list(result.tour),
        "reference_cost": result.reference_cost,
        "gap": result.gap,
        "temperatures": list(result.temperatures),
        "iterations": result.iterations,
        "attempted_exchanges": result.attempted_exchanges,
        "accepted_exchanges": result.accepted_exchanges,
        "elapsed_s": result.elapsed,
    }


def write_output(path: str | Path, result: SolveResult, data_file: str | None = None) -> Dict[str, object]:
    """Serialise the solution to JSON and return the payload."""
    payload = build_output_payload(result, data_file)
    Path(path).write_text(json.dumps(payload, indent=2))
    return payload
