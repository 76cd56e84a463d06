from __future__ import annotations

from typing import Sequence

from cubesolve.models import FACE_ORDER

# Center colors in FACE_ORDER (U, D, F, B, L, R): white, yellow, red, orange, green, blue.
DEFAULT_PALETTE: tuple[str, ...] = ("W", "Y", "R", "O", "G", "B")


def validate_palette(colors: Sequence[str]) -> tuple[str, ...]:
    if len(colors) != 6:
        raise ValueError("Cube palette must contain exactly 6 face colors (U,D,F,B,L,R)")

    palette = tuple(str(color) for color in colors)
    for face, color in zip(FACE_ORDER, palette, strict=True):
        if not color or color.isspace():
            raise ValueError(f"Palette color for face {face.value} must be non-empty")

    if len(set(palette)) != 6:
        raise ValueError(f"Cube palette colors must be distinct (got: {', '.join(palette)})")
    return palette
