#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cubesolve.config import CubeConfig, configure_logging
from cubesolve.errors import CubeError
from cubesolve.moves import apply_all
from cubesolve.notation import format_sequence, parse_sequence
from cubesolve.scramble import generate
from cubesolve.solver import solution_from_stages, solve_stages
from cubesolve.state import CubeState, create_solved, from_string, to_string


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scramble a cube or read one, then solve it layer by layer."
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--scramble", type=int, metavar="N", help="Generate a random scramble of N moves")
    source_group.add_argument("--formula", help="Apply this move sequence to a solved cube (e.g. \"R U Ri (F2 D)2\")")
    source_group.add_argument("--state", help="54 facelet symbols in U D F B L R order")

    parser.add_argument("--seed", type=int, default=None, help="Seed for --scramble")
    parser.add_argument("--half-turns", action="store_true", help="Allow half turns in --scramble")
    parser.add_argument("--stages", action="store_true", help="Print the moves of every stage")

    return parser.parse_args(argv)


def _resolve_state(args: argparse.Namespace, config: CubeConfig) -> tuple[CubeState, str | None]:
    if args.state is not None:
        return from_string(args.state), None

    if args.formula is not None:
        moves = parse_sequence(args.formula)
    else:
        seed = args.seed if args.seed is not None else config.seed
        half_turns = args.half_turns or config.half_turns
        moves = generate(args.scramble, half_turns=half_turns, seed=seed)
    return apply_all(create_solved(), moves), format_sequence(moves)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = CubeConfig.from_env()
    configure_logging(config)

    try:
        state, scramble_text = _resolve_state(args, config)
        stages = solve_stages(state)
        solution = solution_from_stages(state, stages, simplify_moves=config.simplify)
    except (CubeError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if scramble_text is not None:
        print(f"Scramble: {scramble_text}")
    print(f"State: {to_string(state)}")
    for result in stages if args.stages else []:
        print(f"  {result.stage.value}: {format_sequence(result.moves) or '-'}")
    print(f"Solution: {format_sequence(solution) or '-'}")
    print(f"Length: {len(solution)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
