from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence, Union

from cubesolve import facelets as _facelets
from cubesolve.cubie import CubieCube
from cubesolve.errors import InvalidState
from cubesolve.models import FACE_ORDER, Face, coerce_face
from cubesolve.palette import DEFAULT_PALETTE, validate_palette

FaceletMapping = Mapping[Union[str, Face], Sequence[str]]


@dataclass(frozen=True)
class CubeState:
    """Canonical cube value: pieces in slots plus the six center colors.

    The facelet view is always derived from ``cubies``; there is no second
    copy to keep in sync.
    """

    cubies: CubieCube = field(default_factory=CubieCube)
    palette: tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "palette", validate_palette(self.palette))
        except ValueError as exc:
            raise InvalidState(str(exc)) from exc

    @property
    def facelets(self) -> tuple[str, ...]:
        return _facelets.project(
            self.cubies.cp,
            self.cubies.co,
            self.cubies.ep,
            self.cubies.eo,
            self.palette,
        )

    def face(self, face: Face | str) -> tuple[str, ...]:
        return self.facelets[_facelets.face_slice(coerce_face(face))]

    def center(self, face: Face | str) -> str:
        return self.palette[FACE_ORDER.index(coerce_face(face))]


def create_solved(palette: Sequence[str] | None = None) -> CubeState:
    return CubeState(palette=tuple(palette) if palette is not None else DEFAULT_PALETTE)


def from_facelet_sequence(facelets: Sequence[str]) -> CubeState:
    cp, co, ep, eo, palette = _facelets.read([str(value) for value in facelets])
    cubies = CubieCube(cp=cp, co=co, ep=ep, eo=eo)
    cubies.verify()
    return CubeState(cubies=cubies, palette=palette)


def _flatten_mapping(mapping: FaceletMapping) -> list[str]:
    by_face: dict[Face, Sequence[str]] = {}
    for raw_face, values in mapping.items():
        try:
            face = coerce_face(raw_face)
        except ValueError as exc:
            raise InvalidState(str(exc)) from exc
        by_face[face] = values

    missing = [face.value for face in FACE_ORDER if face not in by_face]
    if missing:
        raise InvalidState(f"State is missing faces: {', '.join(missing)}")

    flat: list[str] = []
    for face in FACE_ORDER:
        values = list(by_face[face])
        if len(values) != 9:
            raise InvalidState(f"Face {face.value} must contain exactly 9 facelets, got {len(values)}")
        flat.extend(str(value) for value in values)
    return flat


def from_facelets(mapping: FaceletMapping) -> CubeState:
    """Builds a validated state from ``{face: [9 colors]}``."""
    return from_facelet_sequence(_flatten_mapping(mapping))


def to_facelets(state: CubeState) -> dict[str, list[str]]:
    """Interchange shape: faces in U D F B L R order, 9 row-major colors each."""
    flat = state.facelets
    return {face.value: list(flat[_facelets.face_slice(face)]) for face in FACE_ORDER}


def from_string(text: str) -> CubeState:
    compact = "".join(text.split())
    if len(compact) != _facelets.FACELET_COUNT:
        raise InvalidState(
            f"State string must contain exactly {_facelets.FACELET_COUNT} facelets, got {len(compact)}"
        )
    return from_facelet_sequence(list(compact))


def to_string(state: CubeState) -> str:
    return "".join(state.facelets)


def _faces_uniform(flat: Sequence[str]) -> bool:
    for face in FACE_ORDER:
        values = flat[_facelets.face_slice(face)]
        center = values[_facelets.CENTER_INDEX]
        if any(value != center for value in values):
            return False
    return True


def is_solved(state: CubeState | FaceletMapping) -> bool:
    """True iff every face shows a single color equal to its center."""
    if isinstance(state, CubeState):
        return _faces_uniform(state.facelets)
    return _faces_uniform(_flatten_mapping(state))


def validate(state: CubeState | FaceletMapping | str) -> CubeState:
    """Returns the validated state or raises :class:`InvalidState`."""
    if isinstance(state, CubeState):
        state.cubies.verify()
        return state
    if isinstance(state, str):
        return from_string(state)
    return from_facelets(state)


def is_valid(state: CubeState | FaceletMapping | str) -> bool:
    try:
        validate(state)
    except InvalidState:
        return False
    return True


def solved_state_string(palette: Sequence[str] | None = None) -> str:
    colors = validate_palette(palette) if palette is not None else DEFAULT_PALETTE
    return "".join(color * 9 for color in colors)
