from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from cubesolve.errors import InvalidState
from cubesolve.facelets import CORNER_SLOTS, EDGE_SLOTS

_CORNER_COUNT = len(CORNER_SLOTS)
_EDGE_COUNT = len(EDGE_SLOTS)


def permutation_parity(permutation: Sequence[int]) -> int:
    inversions = 0
    for i, left in enumerate(permutation):
        for right in permutation[i + 1 :]:
            if left > right:
                inversions += 1
    return inversions % 2


@dataclass(frozen=True)
class CubieCube:
    """Pieces per slot: ``cp[slot]`` is the corner piece sitting in ``slot``.

    Pieces are numbered by their home slot, so the identity is solved.
    ``co``/``eo`` count how far the piece is twisted/flipped in its slot.
    """

    cp: tuple[int, ...] = tuple(range(_CORNER_COUNT))
    co: tuple[int, ...] = (0,) * _CORNER_COUNT
    ep: tuple[int, ...] = tuple(range(_EDGE_COUNT))
    eo: tuple[int, ...] = (0,) * _EDGE_COUNT

    def __post_init__(self) -> None:
        for name, values, size in (
            ("cp", self.cp, _CORNER_COUNT),
            ("co", self.co, _CORNER_COUNT),
            ("ep", self.ep, _EDGE_COUNT),
            ("eo", self.eo, _EDGE_COUNT),
        ):
            if len(values) != size:
                raise InvalidState(f"{name} must contain {size} entries, got {len(values)}")
            object.__setattr__(self, name, tuple(int(value) for value in values))

    def multiply(self, other: "CubieCube") -> "CubieCube":
        """``self`` followed by ``other``."""
        cp = tuple(self.cp[other.cp[i]] for i in range(_CORNER_COUNT))
        co = tuple((self.co[other.cp[i]] + other.co[i]) % 3 for i in range(_CORNER_COUNT))
        ep = tuple(self.ep[other.ep[i]] for i in range(_EDGE_COUNT))
        eo = tuple((self.eo[other.ep[i]] + other.eo[i]) % 2 for i in range(_EDGE_COUNT))
        return CubieCube(cp=cp, co=co, ep=ep, eo=eo)

    def is_identity(self) -> bool:
        return self == CubieCube()

    def corner_parity(self) -> int:
        return permutation_parity(self.cp)

    def edge_parity(self) -> int:
        return permutation_parity(self.ep)

    def corner_slot(self, piece: int) -> int:
        return self.cp.index(piece)

    def edge_slot(self, piece: int) -> int:
        return self.ep.index(piece)

    def verify(self) -> None:
        if sorted(self.cp) != list(range(_CORNER_COUNT)):
            raise InvalidState("Every corner piece must appear exactly once")
        if sorted(self.ep) != list(range(_EDGE_COUNT)):
            raise InvalidState("Every edge piece must appear exactly once")
        if any(value not in (0, 1, 2) for value in self.co):
            raise InvalidState("Corner orientations must be 0, 1 or 2")
        if any(value not in (0, 1) for value in self.eo):
            raise InvalidState("Edge orientations must be 0 or 1")
        if sum(self.co) % 3 != 0:
            raise InvalidState("Twisted corner: total corner orientation is not a multiple of 3")
        if sum(self.eo) % 2 != 0:
            raise InvalidState("Flipped edge: total edge orientation is odd")
        if self.corner_parity() != self.edge_parity():
            raise InvalidState("Swapped pieces: corner and edge permutation parities differ")
