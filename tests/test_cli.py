from __future__ import annotations

import pytest

from cubesolve.moves import apply_all
from cubesolve.notation import parse_sequence
from cubesolve.state import create_solved, is_solved, to_string
import scripts.solve_cli as solve_cli


def _solution_from(output: str) -> str:
    line = next(line for line in output.splitlines() if line.startswith("Solution: "))
    value = line.removeprefix("Solution: ")
    return "" if value == "-" else value


def test_cli_solves_formula(capsys: pytest.CaptureFixture[str]) -> None:
    assert solve_cli.main(["--formula", "R U Ri Ui"]) == 0
    output = capsys.readouterr().out
    assert "Scramble: R U Ri Ui" in output
    state = apply_all(create_solved(), parse_sequence("R U Ri Ui"))
    assert is_solved(apply_all(state, parse_sequence(_solution_from(output))))


def test_cli_seeded_scramble_prints_stages(capsys: pytest.CaptureFixture[str]) -> None:
    assert solve_cli.main(["--scramble", "15", "--seed", "4", "--stages"]) == 0
    output = capsys.readouterr().out
    assert "  cross: " in output
    assert "  last_layer_edge_positions: " in output
    assert "Length: " in output


def test_cli_accepts_state_string(capsys: pytest.CaptureFixture[str]) -> None:
    assert solve_cli.main(["--state", to_string(create_solved())]) == 0
    output = capsys.readouterr().out
    assert "Solution: -" in output
    assert "Length: 0" in output


def test_cli_reports_invalid_formula(capsys: pytest.CaptureFixture[str]) -> None:
    assert solve_cli.main(["--formula", "R X"]) == 2
    assert "Unknown face letter" in capsys.readouterr().err


def test_cli_reports_invalid_state(capsys: pytest.CaptureFixture[str]) -> None:
    assert solve_cli.main(["--state", "W" * 54]) == 2
    assert "Error:" in capsys.readouterr().err


def test_cli_requires_a_source() -> None:
    with pytest.raises(SystemExit):
        solve_cli.parse_args([])
