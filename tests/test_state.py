from __future__ import annotations

import pytest

from cubesolve.cubie import CubieCube
from cubesolve.errors import InvalidState
from cubesolve.facelets import CORNER_FACELETS, EDGE_FACELETS, facelet_index
from cubesolve.models import FACE_ORDER, Face
from cubesolve.moves import apply_all
from cubesolve.notation import parse_sequence
from cubesolve.palette import DEFAULT_PALETTE
from cubesolve.state import (
    CubeState,
    create_solved,
    from_facelets,
    from_string,
    is_solved,
    is_valid,
    solved_state_string,
    to_facelets,
    to_string,
    validate,
)


def _solved_list() -> list[str]:
    return list(to_string(create_solved()))


def _swap(facelets: list[str], first: tuple[Face, int], second: tuple[Face, int]) -> list[str]:
    a, b = facelet_index(*first), facelet_index(*second)
    facelets[a], facelets[b] = facelets[b], facelets[a]
    return facelets


def test_solved_state_string_layout() -> None:
    assert solved_state_string() == "W" * 9 + "Y" * 9 + "R" * 9 + "O" * 9 + "G" * 9 + "B" * 9
    assert to_string(create_solved()) == solved_state_string()


def test_solved_facelets_use_face_order() -> None:
    facelets = to_facelets(create_solved())
    assert list(facelets) == [face.value for face in FACE_ORDER]
    for face, color in zip(FACE_ORDER, DEFAULT_PALETTE):
        assert facelets[face.value] == [color] * 9


def test_create_solved_with_custom_palette() -> None:
    state = create_solved(["a", "b", "c", "d", "e", "f"])
    assert state.center(Face.L) == "e"
    assert is_solved(state)


def test_custom_palette_must_be_distinct() -> None:
    with pytest.raises(InvalidState, match="distinct"):
        create_solved(["a", "a", "c", "d", "e", "f"])


def test_is_solved_detects_swapped_facelets() -> None:
    facelets = _swap(_solved_list(), (Face.F, 1), (Face.R, 1))
    assert not is_solved({face.value: facelets[i * 9 : i * 9 + 9] for i, face in enumerate(FACE_ORDER)})


def test_is_solved_false_after_a_move() -> None:
    assert not is_solved(apply_all(create_solved(), parse_sequence("R")))


def test_facelets_round_trip_through_mapping_and_string() -> None:
    state = apply_all(create_solved(), parse_sequence("R U Ri Ui F2 D Li"))
    assert from_facelets(to_facelets(state)) == state
    assert from_string(to_string(state)) == state


def test_from_string_ignores_whitespace() -> None:
    text = " ".join(solved_state_string()[i : i + 9] for i in range(0, 54, 9))
    assert is_solved(from_string(text))


def test_from_string_rejects_wrong_length() -> None:
    with pytest.raises(InvalidState, match="exactly 54"):
        from_string("W" * 53)


def test_from_facelets_requires_every_face() -> None:
    facelets = to_facelets(create_solved())
    del facelets["B"]
    with pytest.raises(InvalidState, match="missing faces: B"):
        from_facelets(facelets)


def test_from_facelets_requires_nine_per_face() -> None:
    facelets = to_facelets(create_solved())
    facelets["U"] = facelets["U"][:8]
    with pytest.raises(InvalidState, match="exactly 9 facelets"):
        from_facelets(facelets)


def test_from_facelets_rejects_unknown_face_key() -> None:
    facelets = dict(to_facelets(create_solved()))
    facelets["Q"] = ["W"] * 9
    with pytest.raises(InvalidState, match="Unknown face"):
        from_facelets(facelets)


def test_validate_rejects_bad_color_counts() -> None:
    facelets = _solved_list()
    facelets[facelet_index(Face.U, 0)] = "Y"
    with pytest.raises(InvalidState, match="exactly 9 times"):
        from_string("".join(facelets))


def test_validate_rejects_unknown_colors() -> None:
    facelets = _solved_list()
    facelets[facelet_index(Face.U, 0)] = "X"
    with pytest.raises(InvalidState, match="match no center"):
        from_string("".join(facelets))


def test_validate_rejects_twisted_corner() -> None:
    facelets = _solved_list()
    positions = [facelet_index(*facelet) for facelet in CORNER_FACELETS[0]]
    colors = [facelets[index] for index in positions]
    for index, color in zip(positions, colors[1:] + colors[:1]):
        facelets[index] = color
    with pytest.raises(InvalidState, match="Twisted corner"):
        from_string("".join(facelets))


def test_validate_rejects_flipped_edge() -> None:
    facelets = _swap(_solved_list(), *EDGE_FACELETS[0])
    with pytest.raises(InvalidState, match="Flipped edge"):
        from_string("".join(facelets))


def test_validate_rejects_swapped_edge_pair() -> None:
    # UR and UF trade places: one transposition of edges, none of corners.
    facelets = _swap(_solved_list(), (Face.R, 1), (Face.F, 1))
    with pytest.raises(InvalidState, match="Swapped pieces"):
        from_string("".join(facelets))


def test_validate_rejects_impossible_corner() -> None:
    facelets = _swap(_solved_list(), (Face.R, 0), (Face.L, 2))
    assert not is_valid("".join(facelets))


def test_validate_checks_cubie_values_too() -> None:
    state = CubeState(cubies=CubieCube(co=(1, 0, 0, 0, 0, 0, 0, 0)))
    with pytest.raises(InvalidState, match="Twisted corner"):
        validate(state)


def test_cubie_lengths_are_checked() -> None:
    with pytest.raises(InvalidState, match="cp must contain 8 entries"):
        CubieCube(cp=(0, 1, 2))


def test_is_valid_accepts_every_input_shape() -> None:
    state = apply_all(create_solved(), parse_sequence("F R U"))
    assert is_valid(state)
    assert is_valid(to_facelets(state))
    assert is_valid(to_string(state))
    assert not is_valid("W" * 54)


def test_face_accessor_returns_row_major_colors() -> None:
    state = apply_all(create_solved(), parse_sequence("U"))
    assert state.face("F")[:3] == ("B", "B", "B")
    assert state.face(Face.F)[3:] == ("R",) * 6
