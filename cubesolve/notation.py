from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from cubesolve.errors import InvalidMoveToken
from cubesolve.models import Face, Move

_VALID_FACES = {face.value for face in Face}
_SUFFIX_TO_TURNS = {"": 1, "2": 2, "i": 3}
_TURNS_TO_SUFFIX = {turns: suffix for suffix, turns in _SUFFIX_TO_TURNS.items()}


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    start: int


def _move_from_text(text: str, start: int) -> Move:
    if not text:
        raise InvalidMoveToken("Empty move token", start)

    face, suffix = text[0], text[1:]
    if face not in _VALID_FACES:
        raise InvalidMoveToken(f"Unknown face letter '{face}' in '{text}'", start)
    if suffix not in _SUFFIX_TO_TURNS:
        raise InvalidMoveToken(f"Malformed suffix '{suffix}' in '{text}'", start + 1)
    return Move(Face(face), _SUFFIX_TO_TURNS[suffix])


def parse_move(token: str) -> Move:
    """``"R"`` -> R once clockwise, ``"Ri"`` -> counter-clockwise, ``"R2"`` -> half turn."""
    return _move_from_text(token, 0)


def format_move(move: Move) -> str:
    if move.is_identity():
        raise ValueError(f"Move {move.face.value} with zero turns has no token")
    return f"{move.face.value}{_TURNS_TO_SUFFIX[move.turns]}"


def format_sequence(moves: Iterable[Move]) -> str:
    return " ".join(format_move(move) for move in moves)


def parse_sequence(text: str, repeat: int = 1) -> list[Move]:
    """Space-separated tokens, with ``(...)n``, ``(...)^n`` and ``X^n`` repeats."""
    if repeat < 1:
        raise ValueError("repeat must be >= 1")

    moves, _ = _parse_group(_tokenize(text), 0, len(text), nested=False)
    return moves * repeat


# Anything that is not whitespace, a bracket, a caret or a bare count is
# read as one move token, so glued garbage such as "Rx" or "U'" fails whole.
_TOKEN_RE = re.compile(
    r"(?P<space>\s+)|(?P<open>\()|(?P<close>\))|(?P<caret>\^)|(?P<count>\d+)|(?P<move>[^\s()^\d][^\s()^]*)"
)


def _tokenize(text: str) -> list[_Token]:
    return [
        _Token(kind=match.lastgroup, value=match.group(), start=match.start())
        for match in _TOKEN_RE.finditer(text)
        if match.lastgroup != "space"
    ]


def _parse_group(tokens: list[_Token], index: int, end: int, nested: bool) -> tuple[list[Move], int]:
    moves: list[Move] = []
    while index < len(tokens):
        token = tokens[index]
        if token.kind == "close":
            if not nested:
                raise InvalidMoveToken("Unexpected ')'", token.start)
            return moves, index + 1

        if token.kind == "open":
            atom, index = _parse_group(tokens, index + 1, end, nested=True)
            grouped = True
        elif token.kind == "move":
            atom, index = [_move_from_text(token.value, token.start)], index + 1
            grouped = False
        else:
            raise InvalidMoveToken(f"Expected move or '(' but got '{token.value}'", token.start)

        count, index = _repeat_count(tokens, index, grouped)
        moves.extend(atom * count)

    if nested:
        raise InvalidMoveToken("Missing closing ')'", end)
    return moves, index


def _repeat_count(tokens: list[_Token], index: int, grouped: bool) -> tuple[int, int]:
    # "^n" repeats anything; a bare "n" only repeats a bracketed group.
    if index >= len(tokens):
        return 1, index

    token = tokens[index]
    if token.kind == "caret":
        if index + 1 >= len(tokens) or tokens[index + 1].kind != "count":
            raise InvalidMoveToken("Expected integer after '^'", token.start)
        token = tokens[index + 1]
        index += 2
    elif token.kind == "count" and grouped:
        index += 1
    else:
        return 1, index

    count = int(token.value)
    if count < 1:
        raise InvalidMoveToken("Repeat must be >= 1", token.start)
    return count, index
