from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from cubesolve.errors import InvalidFace


class Face(str, Enum):
    U = "U"
    D = "D"
    F = "F"
    B = "B"
    L = "L"
    R = "R"


FACE_ORDER: Tuple[Face, ...] = (Face.U, Face.D, Face.F, Face.B, Face.L, Face.R)

# Side faces in the order a y-turn of the viewer visits them.
SIDE_FACES: Tuple[Face, ...] = (Face.F, Face.R, Face.B, Face.L)


def coerce_face(raw: str | Face) -> Face:
    if isinstance(raw, Face):
        return raw
    try:
        return Face(raw)
    except ValueError:
        raise InvalidFace(f"Unknown face '{raw}' (expected one of UDFBLR)") from None


class Stage(str, Enum):
    CROSS = "cross"
    FIRST_LAYER_CORNERS = "first_layer_corners"
    SECOND_LAYER = "second_layer"
    LAST_LAYER_CROSS = "last_layer_cross"
    LAST_LAYER_CORNER_POSITIONS = "last_layer_corner_positions"
    LAST_LAYER_CORNER_ORIENTATION = "last_layer_corner_orientation"
    LAST_LAYER_EDGE_POSITIONS = "last_layer_edge_positions"


@dataclass(frozen=True)
class Move:
    face: Face
    turns: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "face", coerce_face(self.face))
        if isinstance(self.turns, bool) or not isinstance(self.turns, int):
            raise TypeError(f"Move turns must be an int, got {self.turns!r}")
        object.__setattr__(self, "turns", self.turns % 4)

    def inverse(self) -> "Move":
        return Move(self.face, -self.turns)

    def is_identity(self) -> bool:
        return self.turns == 0


@dataclass(frozen=True)
class AlgorithmPreset:
    name: str
    formula: str
    stage: Stage
    aliases: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Preset name must be non-empty")
        if not self.formula.strip():
            raise ValueError("Preset formula must be non-empty")
