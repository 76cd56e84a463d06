from __future__ import annotations

import pytest

from cubesolve.errors import InvalidFace, InvalidMoveToken
from cubesolve.facelets import facelet_index, layer_turn_permutation
from cubesolve.models import FACE_ORDER, Face, Move
from cubesolve.moves import (
    apply,
    apply_all,
    basic_move,
    facelet_permutation,
    invert_moves,
    reorient,
    simplify,
    state_string_from_moves,
)
from cubesolve.notation import parse_sequence
from cubesolve.state import create_solved, is_solved, to_string, validate


def _row(state, face: Face, row: int) -> list[str]:
    flat = state.facelets
    return [flat[facelet_index(face, row * 3 + col)] for col in range(3)]


def _col(state, face: Face, col: int) -> list[str]:
    flat = state.facelets
    return [flat[facelet_index(face, row * 3 + col)] for row in range(3)]


@pytest.mark.parametrize("face", FACE_ORDER)
def test_four_quarter_turns_are_identity(face: Face) -> None:
    state = apply_all(create_solved(), [Move(face)] * 4)
    assert is_solved(state)
    assert state.cubies.is_identity()


@pytest.mark.parametrize("face", FACE_ORDER)
def test_clockwise_then_counter_clockwise_cancels(face: Face) -> None:
    scrambled = apply_all(create_solved(), parse_sequence("R U Fi L2 D Bi"))
    state = apply(apply(scrambled, Move(face, 1)), Move(face, 3))
    assert state == scrambled


@pytest.mark.parametrize("face", FACE_ORDER)
def test_quarter_turn_keeps_centers(face: Face) -> None:
    state = apply(create_solved(), Move(face))
    for other in FACE_ORDER:
        assert state.facelets[facelet_index(other, 4)] == create_solved().center(other)


def test_u_turn_moves_top_rows_right_to_front() -> None:
    solved = create_solved()
    state = apply(solved, "U")
    assert _row(state, Face.F, 0) == [solved.center(Face.R)] * 3
    assert _row(state, Face.L, 0) == [solved.center(Face.F)] * 3
    assert _row(state, Face.B, 0) == [solved.center(Face.L)] * 3
    assert _row(state, Face.R, 0) == [solved.center(Face.B)] * 3
    assert _row(state, Face.F, 1) == [solved.center(Face.F)] * 3


def test_r_turn_moves_front_column_up() -> None:
    solved = create_solved()
    state = apply(solved, "R")
    assert _col(state, Face.U, 2) == [solved.center(Face.F)] * 3
    assert _col(state, Face.B, 0) == [solved.center(Face.U)] * 3
    assert _col(state, Face.D, 2) == [solved.center(Face.B)] * 3
    assert _col(state, Face.F, 2) == [solved.center(Face.D)] * 3


def test_f_turn_moves_up_bottom_row_to_right() -> None:
    solved = create_solved()
    state = apply(solved, "F")
    assert _col(state, Face.R, 0) == [solved.center(Face.U)] * 3
    assert _row(state, Face.D, 0) == [solved.center(Face.R)] * 3
    assert _col(state, Face.L, 2) == [solved.center(Face.D)] * 3
    assert _row(state, Face.U, 2) == [solved.center(Face.L)] * 3


def test_d_turn_moves_bottom_rows_front_to_right() -> None:
    solved = create_solved()
    state = apply(solved, "D")
    assert _row(state, Face.R, 2) == [solved.center(Face.F)] * 3
    assert _row(state, Face.F, 2) == [solved.center(Face.L)] * 3


@pytest.mark.parametrize("face", FACE_ORDER)
def test_cubie_tables_agree_with_sticker_geometry(face: Face) -> None:
    assert facelet_permutation(face) == layer_turn_permutation(face)


@pytest.mark.parametrize("face", FACE_ORDER)
def test_basic_moves_are_legal(face: Face) -> None:
    basic_move(face).verify()


def test_zero_turn_move_is_a_no_op() -> None:
    state = create_solved()
    assert apply(state, Move(Face.R, 4)) is state


def test_apply_rejects_non_moves() -> None:
    with pytest.raises(InvalidFace):
        apply(create_solved(), 42)  # type: ignore[arg-type]


def test_apply_reports_bad_tokens_as_notation_errors() -> None:
    with pytest.raises(InvalidMoveToken, match="Unknown face letter"):
        apply(create_solved(), "Q")
    with pytest.raises(InvalidMoveToken, match="Malformed suffix") as excinfo:
        apply(create_solved(), "R3")
    assert excinfo.value.position == 1


def test_move_with_unknown_face_is_invalid_face() -> None:
    with pytest.raises(InvalidFace):
        apply(create_solved(), Move("Q"))  # type: ignore[arg-type]


def test_inverse_sequence_restores_state() -> None:
    moves = parse_sequence("R U2 Fi L D2 Bi (R U Ri Ui)3")
    state = apply_all(create_solved(), moves + invert_moves(moves))
    assert is_solved(state)


def test_legal_sequences_stay_valid() -> None:
    state = create_solved()
    for move in parse_sequence("R U Ri Ui F2 Li D B2 Ui R2 D Fi L U2 Bi"):
        state = apply(state, move)
        assert validate(state) is state


def test_sexy_move_has_order_six() -> None:
    state = apply_all(create_solved(), parse_sequence("(R U Ri Ui)6"))
    assert is_solved(state)
    state = apply_all(create_solved(), parse_sequence("(R U Ri Ui)3"))
    assert not is_solved(state)


@pytest.mark.parametrize("axis", ["x", "y", "z"])
def test_reorient_keeps_solved_cube_solved(axis: str) -> None:
    state = reorient(create_solved(), axis)
    assert is_solved(state)


def test_reorient_y_brings_right_to_front() -> None:
    solved = create_solved()
    state = reorient(solved, "y")
    assert state.center(Face.F) == solved.center(Face.R)
    assert state.center(Face.U) == solved.center(Face.U)


def test_reorient_full_turn_is_identity() -> None:
    state = apply_all(create_solved(), parse_sequence("R U Fi"))
    assert reorient(state, "x", 4) == state
    assert to_string(reorient(reorient(state, "z", 1), "z", 3)) == to_string(state)


def test_reorient_rejects_unknown_axis() -> None:
    with pytest.raises(InvalidFace, match="rotation axis"):
        reorient(create_solved(), "w")


def test_simplify_merges_same_face_runs() -> None:
    moves = parse_sequence("R R U Ui F2 F2 F Li")
    assert simplify(moves) == [Move(Face.R, 2), Move(Face.F), Move(Face.L, 3)]


def test_simplify_cascades_after_cancellation() -> None:
    assert simplify(parse_sequence("R U Ui Ri")) == []


def test_state_string_from_moves_matches_apply() -> None:
    moves = parse_sequence("R U Ri Ui")
    assert state_string_from_moves(moves) == to_string(apply_all(create_solved(), moves))
    assert state_string_from_moves([]) == to_string(create_solved())
