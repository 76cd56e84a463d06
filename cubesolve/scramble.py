from __future__ import annotations

import logging

import numpy as np

from cubesolve.models import FACE_ORDER, Move

logger = logging.getLogger(__name__)

DEFAULT_LENGTH = 20
MAX_REDRAWS = 16

_QUARTER_TURNS = (1, 3)
_ALL_TURNS = (1, 2, 3)


def generate(
    length: int = DEFAULT_LENGTH,
    half_turns: bool = False,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> list[Move]:
    """Random face turns; no move turns the same face as the one before it.

    Quarter turns only unless ``half_turns`` is set. A draw that repeats the
    previous face is redrawn; after ``MAX_REDRAWS`` the face is drawn from the
    allowed faces directly.
    """
    if length < 0:
        raise ValueError("length must be >= 0")
    if rng is None:
        rng = np.random.default_rng(seed)

    turn_choices = _ALL_TURNS if half_turns else _QUARTER_TURNS
    moves: list[Move] = []

    for _ in range(length):
        previous = moves[-1].face if moves else None
        face = FACE_ORDER[int(rng.integers(len(FACE_ORDER)))]
        redraws = 0
        while face == previous and redraws < MAX_REDRAWS:
            face = FACE_ORDER[int(rng.integers(len(FACE_ORDER)))]
            redraws += 1
        if face == previous:
            allowed = [candidate for candidate in FACE_ORDER if candidate != previous]
            face = allowed[int(rng.integers(len(allowed)))]

        turns = turn_choices[int(rng.integers(len(turn_choices)))]
        moves.append(Move(face, turns))

    logger.debug("Generated scramble of %d moves (seed=%s, half_turns=%s)", length, seed, half_turns)
    return moves


def scramble(length: int = DEFAULT_LENGTH, seed: int | None = None, half_turns: bool = False) -> list[Move]:
    return generate(length, half_turns=half_turns, seed=seed)
