from __future__ import annotations


class CubeError(Exception):
    """Base class for every error raised by cubesolve."""


class InvalidMoveToken(CubeError, ValueError):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at index {position}")
        self.position = position


class InvalidFace(CubeError, ValueError):
    pass


class InvalidState(CubeError, ValueError):
    pass


class SolverInconsistency(CubeError, RuntimeError):
    """A solver stage found the cube in a state its predecessors rule out."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage
