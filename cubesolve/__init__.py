from cubesolve.config import CubeConfig, configure_logging
from cubesolve.errors import CubeError, InvalidFace, InvalidMoveToken, InvalidState, SolverInconsistency
from cubesolve.models import AlgorithmPreset, Face, Move, Stage
from cubesolve.moves import apply, apply_all, facelet_permutation, invert_moves, reorient, simplify
from cubesolve.notation import format_move, format_sequence, parse_move, parse_sequence
from cubesolve.presets import get_preset, list_preset_names
from cubesolve.scramble import generate, scramble
from cubesolve.solver import StageResult, solution_from_stages, solve, solve_stages
from cubesolve.state import (
    CubeState,
    create_solved,
    from_facelets,
    from_string,
    is_solved,
    is_valid,
    to_facelets,
    to_string,
    validate,
)

__all__ = [
    "AlgorithmPreset",
    "CubeConfig",
    "CubeError",
    "CubeState",
    "Face",
    "InvalidFace",
    "InvalidMoveToken",
    "InvalidState",
    "Move",
    "SolverInconsistency",
    "Stage",
    "StageResult",
    "apply",
    "apply_all",
    "configure_logging",
    "create_solved",
    "facelet_permutation",
    "format_move",
    "format_sequence",
    "from_facelets",
    "from_string",
    "generate",
    "get_preset",
    "invert_moves",
    "is_solved",
    "is_valid",
    "list_preset_names",
    "parse_move",
    "parse_sequence",
    "reorient",
    "scramble",
    "simplify",
    "solution_from_stages",
    "solve",
    "solve_stages",
    "to_facelets",
    "to_string",
    "validate",
]
