from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Sequence, Union

from cubesolve import facelets as _facelets
from cubesolve.cubie import CubieCube
from cubesolve.errors import InvalidFace
from cubesolve.models import FACE_ORDER, Face, Move, coerce_face
from cubesolve.notation import parse_move
from cubesolve.state import CubeState, create_solved, from_facelet_sequence, to_string

MoveLike = Union[Move, str]

_AXIS_TO_FACE = {"x": Face.R, "y": Face.U, "z": Face.F}


@lru_cache(maxsize=None)
def basic_move(face: Face) -> CubieCube:
    """Cubie effect of one clockwise quarter turn of ``face``.

    Read off a solved cube whose stickers were carried by the geometric
    layer rotation, so the cubie tables and the facelet layout cannot drift.
    """
    labels = tuple(face_.value for face_ in FACE_ORDER)
    solved = _facelets.project(*_identity_arrays(), labels)
    turned = _facelets.permute(solved, _facelets.layer_turn_permutation(face))
    cp, co, ep, eo, _ = _facelets.read(turned)
    return CubieCube(cp=cp, co=co, ep=ep, eo=eo)


def _identity_arrays() -> tuple[tuple[int, ...], ...]:
    identity = CubieCube()
    return identity.cp, identity.co, identity.ep, identity.eo


def facelet_permutation(face: Face | str) -> tuple[int, ...]:
    """54-facelet permutation of one clockwise turn, derived from the cubie tables."""
    move = basic_move(coerce_face(face))
    return _facelets.permutation_of(move.cp, move.co, move.ep, move.eo)


def _as_move(move: MoveLike) -> Move:
    if isinstance(move, Move):
        return move
    if isinstance(move, str):
        return parse_move(move)
    raise InvalidFace(f"Not a move: {move!r}")


def apply(state: CubeState, move: MoveLike) -> CubeState:
    move = _as_move(move)
    face = coerce_face(move.face)
    if move.turns == 0:
        return state

    cubies = state.cubies
    quarter = basic_move(face)
    for _ in range(move.turns):
        cubies = cubies.multiply(quarter)
    return CubeState(cubies=cubies, palette=state.palette)


def apply_all(state: CubeState, moves: Iterable[MoveLike]) -> CubeState:
    for move in moves:
        state = apply(state, move)
    return state


def reorient(state: CubeState, axis: str, turns: int = 1) -> CubeState:
    """Turns the whole cube about ``x`` (like R), ``y`` (like U) or ``z`` (like F)."""
    if axis not in _AXIS_TO_FACE:
        raise InvalidFace(f"Unknown rotation axis '{axis}' (expected x, y or z)")

    turns %= 4
    if turns == 0:
        return state

    permutation = _facelets.cube_rotation_permutation(_AXIS_TO_FACE[axis])
    facelets = state.facelets
    for _ in range(turns):
        facelets = _facelets.permute(facelets, permutation)
    return from_facelet_sequence(facelets)


def invert_moves(moves: Sequence[MoveLike]) -> list[Move]:
    return [_as_move(move).inverse() for move in reversed(moves)]


def simplify(moves: Iterable[MoveLike]) -> list[Move]:
    """Merges neighbouring turns of the same face and drops identities."""
    result: list[Move] = []
    for raw in moves:
        move = _as_move(raw)
        if result and result[-1].face == move.face:
            merged = Move(move.face, result[-1].turns + move.turns)
            result.pop()
            if not merged.is_identity():
                result.append(merged)
            continue
        if not move.is_identity():
            result.append(move)
    return result


def state_string_from_moves(moves: Sequence[MoveLike], palette: Sequence[str] | None = None) -> str:
    return to_string(apply_all(create_solved(palette), moves))
