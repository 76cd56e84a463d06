"""Facelet layout, sticker geometry and the cubie <-> facelet projection.

Facelets are addressed as ``FACE_ORDER.index(face) * 9 + i`` where ``i`` is
the row-major index on that face, 0 at the top-left as seen looking at the
face. Side faces are seen with U above them, U is seen from above with B at
the top edge and D is seen from below with F at the top edge.

Positions use x towards R, y towards U and z towards F; every sticker is
described by the cubie it sits on and the outward normal of the face it
shows on.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence

import numpy as np

from cubesolve.errors import InvalidState
from cubesolve.models import FACE_ORDER, Face

FACELET_COUNT = 54
CENTER_INDEX = 4

Vec3 = tuple[int, int, int]
Facelet = tuple[Face, int]

# normal, screen-right, screen-down for every face as seen from outside.
_FACE_FRAMES: dict[Face, tuple[Vec3, Vec3, Vec3]] = {
    Face.U: ((0, 1, 0), (1, 0, 0), (0, 0, 1)),
    Face.D: ((0, -1, 0), (1, 0, 0), (0, 0, -1)),
    Face.F: ((0, 0, 1), (1, 0, 0), (0, -1, 0)),
    Face.B: ((0, 0, -1), (-1, 0, 0), (0, -1, 0)),
    Face.L: ((-1, 0, 0), (0, 0, 1), (0, -1, 0)),
    Face.R: ((1, 0, 0), (0, 0, -1), (0, -1, 0)),
}

CORNER_SLOTS: tuple[str, ...] = ("URF", "UFL", "ULB", "UBR", "DFR", "DLF", "DBL", "DRB")
EDGE_SLOTS: tuple[str, ...] = ("UR", "UF", "UL", "UB", "DR", "DF", "DL", "DB", "FR", "FL", "BL", "BR")

# U/D facelet first, then clockwise around the corner as seen from outside.
CORNER_FACELETS: tuple[tuple[Facelet, Facelet, Facelet], ...] = (
    ((Face.U, 8), (Face.R, 0), (Face.F, 2)),
    ((Face.U, 6), (Face.F, 0), (Face.L, 2)),
    ((Face.U, 0), (Face.L, 0), (Face.B, 2)),
    ((Face.U, 2), (Face.B, 0), (Face.R, 2)),
    ((Face.D, 2), (Face.F, 8), (Face.R, 6)),
    ((Face.D, 0), (Face.L, 8), (Face.F, 6)),
    ((Face.D, 6), (Face.B, 8), (Face.L, 6)),
    ((Face.D, 8), (Face.R, 8), (Face.B, 6)),
)

# U/D facelet first; for the middle layer the F/B facelet comes first.
EDGE_FACELETS: tuple[tuple[Facelet, Facelet], ...] = (
    ((Face.U, 5), (Face.R, 1)),
    ((Face.U, 7), (Face.F, 1)),
    ((Face.U, 3), (Face.L, 1)),
    ((Face.U, 1), (Face.B, 1)),
    ((Face.D, 5), (Face.R, 7)),
    ((Face.D, 1), (Face.F, 7)),
    ((Face.D, 3), (Face.L, 7)),
    ((Face.D, 7), (Face.B, 7)),
    ((Face.F, 5), (Face.R, 3)),
    ((Face.F, 3), (Face.L, 5)),
    ((Face.B, 5), (Face.L, 3)),
    ((Face.B, 3), (Face.R, 5)),
)


def facelet_index(face: Face, index: int) -> int:
    return FACE_ORDER.index(face) * 9 + index


def face_slice(face: Face) -> slice:
    start = FACE_ORDER.index(face) * 9
    return slice(start, start + 9)


def _rotate_quarter(vec: np.ndarray, normal: np.ndarray) -> np.ndarray:
    # Clockwise as seen looking at the face whose outward normal is `normal`.
    return normal * int(np.dot(normal, vec)) - np.cross(normal, vec)


@lru_cache(maxsize=1)
def sticker_geometry() -> tuple[tuple[Vec3, Vec3], ...]:
    """Returns ``(position, normal)`` for every facelet index."""
    stickers: list[tuple[Vec3, Vec3]] = []
    for face in FACE_ORDER:
        normal, right, down = (np.array(vec) for vec in _FACE_FRAMES[face])
        for index in range(9):
            row, col = divmod(index, 3)
            position = normal + right * (col - 1) + down * (row - 1)
            stickers.append((tuple(int(v) for v in position), tuple(int(v) for v in normal)))
    return tuple(stickers)


def _geometric_permutation(normal: Vec3, whole_cube: bool) -> tuple[int, ...]:
    stickers = sticker_geometry()
    lookup = {sticker: index for index, sticker in enumerate(stickers)}
    axis = np.array(normal)

    permutation = list(range(FACELET_COUNT))
    for index, (position, sticker_normal) in enumerate(stickers):
        p = np.array(position)
        if not whole_cube and int(np.dot(p, axis)) != 1:
            continue
        moved = (
            tuple(int(v) for v in _rotate_quarter(p, axis)),
            tuple(int(v) for v in _rotate_quarter(np.array(sticker_normal), axis)),
        )
        permutation[lookup[moved]] = index
    return tuple(permutation)


@lru_cache(maxsize=None)
def layer_turn_permutation(face: Face) -> tuple[int, ...]:
    """Facelet permutation of one clockwise quarter turn of ``face``.

    ``new[i] == old[permutation[i]]``.
    """
    return _geometric_permutation(_FACE_FRAMES[face][0], whole_cube=False)


@lru_cache(maxsize=None)
def cube_rotation_permutation(face: Face) -> tuple[int, ...]:
    """Facelet permutation of turning the whole cube like a clockwise ``face`` turn."""
    return _geometric_permutation(_FACE_FRAMES[face][0], whole_cube=True)


def permute(facelets: Sequence[str], permutation: Sequence[int]) -> tuple[str, ...]:
    return tuple(facelets[source] for source in permutation)


def project(
    cp: Sequence[int],
    co: Sequence[int],
    ep: Sequence[int],
    eo: Sequence[int],
    palette: Sequence[str],
) -> tuple[str, ...]:
    """Facelet colors of a cubie configuration with the given center colors."""
    colors = {face: palette[position] for position, face in enumerate(FACE_ORDER)}
    facelets = [""] * FACELET_COUNT

    for face in FACE_ORDER:
        facelets[facelet_index(face, CENTER_INDEX)] = colors[face]

    for slot, (piece, ori) in enumerate(zip(cp, co, strict=True)):
        for n in range(3):
            face, index = CORNER_FACELETS[slot][(n + ori) % 3]
            facelets[facelet_index(face, index)] = colors[CORNER_FACELETS[piece][n][0]]

    for slot, (piece, ori) in enumerate(zip(ep, eo, strict=True)):
        for n in range(2):
            face, index = EDGE_FACELETS[slot][(n + ori) % 2]
            facelets[facelet_index(face, index)] = colors[EDGE_FACELETS[piece][n][0]]

    return tuple(facelets)


def permutation_of(
    cp: Sequence[int],
    co: Sequence[int],
    ep: Sequence[int],
    eo: Sequence[int],
) -> tuple[int, ...]:
    """Facelet permutation carried out by a cubie configuration applied to solved."""
    permutation = list(range(FACELET_COUNT))

    for slot, (piece, ori) in enumerate(zip(cp, co, strict=True)):
        for n in range(3):
            target = CORNER_FACELETS[slot][(n + ori) % 3]
            source = CORNER_FACELETS[piece][n]
            permutation[facelet_index(*target)] = facelet_index(*source)

    for slot, (piece, ori) in enumerate(zip(ep, eo, strict=True)):
        for n in range(2):
            target = EDGE_FACELETS[slot][(n + ori) % 2]
            source = EDGE_FACELETS[piece][n]
            permutation[facelet_index(*target)] = facelet_index(*source)

    return tuple(permutation)


def read(
    facelets: Sequence[str],
) -> tuple[tuple[int, ...], tuple[int, ...], tuple[int, ...], tuple[int, ...], tuple[str, ...]]:
    """Reads ``(cp, co, ep, eo, palette)`` back from 54 facelet colors.

    Only checks what the reading itself needs: counts, distinct centers and
    that every slot shows a real piece. Permutation and parity checks belong
    to :meth:`CubieCube.verify`.
    """
    if len(facelets) != FACELET_COUNT:
        raise InvalidState(f"State must contain exactly {FACELET_COUNT} facelets, got {len(facelets)}")

    palette = tuple(facelets[facelet_index(face, CENTER_INDEX)] for face in FACE_ORDER)
    if len(set(palette)) != 6:
        raise InvalidState(f"Center colors must be distinct (got: {' '.join(palette)})")

    face_of = {color: face for color, face in zip(palette, FACE_ORDER, strict=True)}
    unknown = sorted(set(facelets) - set(face_of))
    if unknown:
        raise InvalidState(f"State contains colors that match no center: {', '.join(unknown)}")

    for color in palette:
        count = sum(1 for value in facelets if value == color)
        if count != 9:
            raise InvalidState(f"Color {color} must appear exactly 9 times, got {count}")

    def face_at(facelet: Facelet) -> Face:
        return face_of[facelets[facelet_index(*facelet)]]

    cp: list[int] = []
    co: list[int] = []
    for slot, slot_facelets in enumerate(CORNER_FACELETS):
        faces = [face_at(facelet) for facelet in slot_facelets]
        ori = next((n for n, face in enumerate(faces) if face in (Face.U, Face.D)), None)
        if ori is None:
            raise InvalidState(f"Corner slot {CORNER_SLOTS[slot]} shows no U/D color")
        signature = (faces[ori], faces[(ori + 1) % 3], faces[(ori + 2) % 3])
        piece = next(
            (
                candidate
                for candidate, candidate_facelets in enumerate(CORNER_FACELETS)
                if tuple(face for face, _ in candidate_facelets) == signature
            ),
            None,
        )
        if piece is None:
            raise InvalidState(
                f"Corner slot {CORNER_SLOTS[slot]} shows an impossible corner "
                f"({''.join(face.value for face in faces)})"
            )
        cp.append(piece)
        co.append(ori)

    ep: list[int] = []
    eo: list[int] = []
    for slot, slot_facelets in enumerate(EDGE_FACELETS):
        faces = tuple(face_at(facelet) for facelet in slot_facelets)
        for candidate, candidate_facelets in enumerate(EDGE_FACELETS):
            home = tuple(face for face, _ in candidate_facelets)
            if faces == home:
                ep.append(candidate)
                eo.append(0)
                break
            if faces == home[::-1]:
                ep.append(candidate)
                eo.append(1)
                break
        else:
            raise InvalidState(
                f"Edge slot {EDGE_SLOTS[slot]} shows an impossible edge "
                f"({''.join(face.value for face in faces)})"
            )

    return tuple(cp), tuple(co), tuple(ep), tuple(eo), palette
