import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from tpsa.errors import InputError
from tpsa.geo import Point
from tpsa.io import (
    build_output_payload,
    load_reference_tour,
    read_points,
    read_tour,
    reference_tour_path,
    write_output,
)
from tpsa.main import build_parser, main
from tpsa.solver import SolveResult

SQUARE_TSV = "0\t0\n1\t0\n1\t1\n0\t1\n"

TSPLIB_SQUARE = """NAME : square4
TYPE : TSP
DIMENSION : 4
EDGE_WEIGHT_TYPE : EUC_2D
NODE_COORD_SECTION
1 0 0
2 1 0
3 1 1
4 0 1
EOF
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_read_plain_points(tmp_path):
    points = read_points(_write(tmp_path / "square.tsp", SQUARE_TSV + "\n"))
    assert points == [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]


def test_read_tsplib_points(tmp_path):
    points = read_points(_write(tmp_path / "square.tsp", TSPLIB_SQUARE))
    assert points[2] == Point(1.0, 1.0)
    assert len(points) == 4


@pytest.mark.parametrize(
    "content",
    [
        "0\t0\n1\tabc\n2\t2\n",
        "0\t0\n1\n2\t2\n",
        "0\t0\n1\t1\t1\n2\t2\n",
        "0\t0\n1\tnan\n2\t2\n",
        "0\t0\n1\t1\n",
        "",
    ],
)
def test_malformed_points_raise_input_error(tmp_path, content):
    with pytest.raises(InputError):
        read_points(_write(tmp_path / "bad.tsp", content))


def test_missing_points_file(tmp_path):
    with pytest.raises(InputError):
        read_points(tmp_path / "nope.tsp")


def test_read_plain_tour_is_zero_based(tmp_path):
    assert read_tour(_write(tmp_path / "t.opt.tour", "1\n3\n2\n4\n")) == [0, 2, 1, 3]


def test_read_tsplib_tour(tmp_path):
    text = "NAME : t\nTYPE : TOUR\nDIMENSION : 4\nTOUR_SECTION\n1\n2\n3\n4\n-1\nEOF\n"
    assert read_tour(_write(tmp_path / "t.opt.tour", text)) == [0, 1, 2, 3]


def test_malformed_tour_raises(tmp_path):
    with pytest.raises(InputError):
        read_tour(_write(tmp_path / "t.opt.tour", "1\nx\n"))
    with pytest.raises(InputError):
        read_tour(_write(tmp_path / "t0.opt.tour", "0\n1\n"))


def test_reference_tour_path_follows_ans_layout():
    assert reference_tour_path(Path("data") / "krod100.tsp") == Path("data") / "ans" / "krod100.opt.tour"


def test_reference_tour_failures_are_warnings(tmp_path, caplog):
    caplog.set_level(logging.WARNING, logger="tpsa")
    assert load_reference_tour(tmp_path / "missing.opt.tour", 4) is None
    short = _write(tmp_path / "short.opt.tour", "1\n2\n")
    assert load_reference_tour(short, 4) is None
    assert sum("Reference tour ignored" in r.getMessage() for r in caplog.records) == 2


def test_output_payload_matches_file(tmp_path):
    result = SolveResult(tour=[0, 1, 2], cost=12.0, temperatures=[2.0, 1.0], iterations=3,
                         reference_cost=12.0, gap=0.0)
    payload = write_output(tmp_path / "out.json", result, data_file="tri.tsp")
    assert json.loads((tmp_path / "out.json").read_text()) == payload
    assert build_output_payload(result)["tour"] == [0, 1, 2]


def test_cli_solves_and_reports_reference(tmp_path, capsys):
    data = _write(tmp_path / "square.tsp", SQUARE_TSV)
    _write(tmp_path / "ans" / "square.opt.tour", "1\n2\n3\n4\n")
    output = tmp_path / "result.json"
    code = main(
        [
            "--data", str(data),
            "--thread", "4",
            "--period", "5",
            "--max-iteration", "20",
            "--min-temp", "0.1",
            "--max-temp", "10",
            "--seed", "0",
            "--output", str(output),
            "--log-level", "WARNING",
        ]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "TPSA solution  : " in out
    assert "Exact solution : 4.0" in out
    payload = json.loads(output.read_text())
    assert payload["cost"] == pytest.approx(4.0)
    assert sorted(payload["tour"]) == [0, 1, 2, 3]
    assert payload["reference_cost"] == pytest.approx(4.0)


def test_cli_without_reference_still_solves(tmp_path, capsys):
    data = _write(tmp_path / "tri.tsp", "0 0\n3 0\n0 4\n")
    code = main(["--data", str(data), "--thread", "2", "--period", "1", "--max-iteration", "2",
                 "--log-level", "ERROR"])
    assert code == 0
    out = capsys.readouterr().out
    assert "TPSA solution  : 12.0" in out
    assert "Exact solution" not in out


def test_cli_reports_input_and_config_errors(tmp_path):
    data = _write(tmp_path / "two.tsp", "0 0\n1 1\n")
    assert main(["--data", str(data), "--log-level", "ERROR"]) == 2
    ok = _write(tmp_path / "tri.tsp", "0 0\n3 0\n0 4\n")
    assert main(["--data", str(ok), "--thread", "1", "--log-level", "ERROR"]) == 2
    assert main(["--log-level", "ERROR"]) == 2


def test_cli_reads_json_config(tmp_path, capsys):
    data = _write(tmp_path / "tri.tsp", "0 0\n3 0\n0 4\n")
    config = _write(
        tmp_path / "config.json",
        json.dumps({"MinTemp": 0.5, "MaxTemp": 5, "Thread": 3, "Period": 1, "MaxIteration": 3,
                    "DataFileName": str(data)}),
    )
    assert main(["--config", str(config), "--log-level", "ERROR"]) == 0
    assert "TPSA solution" in capsys.readouterr().out


def test_cli_reports_bad_config_files(tmp_path):
    data = _write(tmp_path / "tri.tsp", "0 0\n3 0\n0 4\n")
    assert main(["--config", str(tmp_path), "--data", str(data), "--log-level", "ERROR"]) == 2
    config = _write(
        tmp_path / "config.json",
        json.dumps({"MinTemp": 0.5, "MaxTemp": 5, "Thread": 2, "Period": 1, "MaxIteration": 1,
                    "DataFileName": 7}),
    )
    assert main(["--config", str(config), "--log-level", "ERROR"]) == 2


def test_cli_help_describes_thread_backend():
    assert "GIL" in build_parser().format_help()
