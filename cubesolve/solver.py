"""Layer-by-layer solver.

The first layer is D and the last layer is U. Seven stages run strictly in
order; each one scans the cubie model for the pieces it owns, picks a case
and plays the matching named algorithm from :mod:`cubesolve.presets`.
Algorithms are written with F in front and R on its right and are
relabeled onto whichever side slot is being worked.

A stage that runs out of steps or misses its postcondition raises
:class:`SolverInconsistency`; a validated input never gets there.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from cubesolve.cubie import CubieCube, permutation_parity
from cubesolve.errors import SolverInconsistency
from cubesolve.facelets import CORNER_FACELETS, EDGE_FACELETS, EDGE_SLOTS, CORNER_SLOTS
from cubesolve.models import SIDE_FACES, Face, Move, Stage
from cubesolve.moves import apply_all, basic_move, simplify
from cubesolve.presets import preset_moves
from cubesolve.state import CubeState, FaceletMapping, validate

logger = logging.getLogger(__name__)

_MAX_STEPS = 6

_U_CORNERS = range(0, 4)
_D_CORNERS = range(4, 8)
_U_EDGES = range(0, 4)
_D_EDGES = range(4, 8)
_MIDDLE_EDGES = range(8, 12)

_CORNER_FACES = tuple(frozenset(face for face, _ in facelets) for facelets in CORNER_FACELETS)
_EDGE_FACES = tuple(frozenset(face for face, _ in facelets) for facelets in EDGE_FACELETS)


def _side(front: Face, offset: int) -> Face:
    return SIDE_FACES[(SIDE_FACES.index(front) + offset) % 4]


def _right_of(front: Face) -> Face:
    return _side(front, 1)


def _back_of(front: Face) -> Face:
    return _side(front, 2)


def _left_of(front: Face) -> Face:
    return _side(front, 3)


def _frame(front: Face) -> dict[Face, Face]:
    """Maps the faces an algorithm is written for onto the faces it runs on."""
    return {
        Face.U: Face.U,
        Face.D: Face.D,
        Face.F: front,
        Face.R: _right_of(front),
        Face.B: _back_of(front),
        Face.L: _left_of(front),
    }


def _after_u_turns(side: Face, turns: int) -> Face:
    # A clockwise U carries the F stickers to L: one step back in SIDE_FACES.
    return _side(side, -turns)


def _front_for_pair(stage: Stage, sides: Iterable[Face]) -> Face:
    pair = set(sides)
    for front in SIDE_FACES:
        if {front, _right_of(front)} == pair:
            return front
    raise SolverInconsistency(
        stage.value,
        f"faces {''.join(sorted(face.value for face in pair))} are not two adjacent sides",
    )


@dataclass(frozen=True)
class StageResult:
    stage: Stage
    moves: tuple[Move, ...]


@dataclass
class _Worker:
    cubies: CubieCube
    moves: list[Move] = field(default_factory=list)

    def turn(self, face: Face, turns: int) -> None:
        move = Move(face, turns)
        if move.is_identity():
            return
        quarter = basic_move(move.face)
        for _ in range(move.turns):
            self.cubies = self.cubies.multiply(quarter)
        self.moves.append(move)

    def run(self, preset: str, front: Face = Face.F) -> None:
        frame = _frame(front)
        for move in preset_moves(preset):
            self.turn(frame[move.face], move.turns)

    def align_u(self, side: Face, target: Face) -> None:
        self.turn(Face.U, (SIDE_FACES.index(side) - SIDE_FACES.index(target)) % 4)

    def align_u_pair(self, stage: Stage, sides: set[Face], targets: set[Face]) -> None:
        for turns in range(4):
            if {_after_u_turns(side, turns) for side in sides} == targets:
                self.turn(Face.U, turns)
                return
        raise SolverInconsistency(stage.value, "corner cannot be brought above its slot")

    def edge_stickers(self, piece: int) -> dict[Face, Face]:
        """Home face of each sticker of ``piece`` -> face it currently shows on."""
        slot = self.cubies.edge_slot(piece)
        ori = self.cubies.eo[slot]
        return {
            EDGE_FACELETS[piece][n][0]: EDGE_FACELETS[slot][(n + ori) % 2][0]
            for n in range(2)
        }

    def corner_stickers(self, piece: int) -> dict[Face, Face]:
        slot = self.cubies.corner_slot(piece)
        ori = self.cubies.co[slot]
        return {
            CORNER_FACELETS[piece][n][0]: CORNER_FACELETS[slot][(n + ori) % 3][0]
            for n in range(3)
        }


def _home(stickers: dict[Face, Face]) -> bool:
    return all(home == shown for home, shown in stickers.items())


def _solve_cross(worker: _Worker) -> None:
    stage = Stage.CROSS
    for front in SIDE_FACES:
        piece = _EDGE_FACES.index(frozenset({Face.D, front}))
        for _ in range(_MAX_STEPS):
            stickers = worker.edge_stickers(piece)
            if _home(stickers):
                break
            slot = set(stickers.values())
            if Face.D in slot:
                (side,) = slot - {Face.D}
                worker.run("CrossPop", front=side)
            elif Face.U in slot:
                (side,) = slot - {Face.U}
                worker.align_u(side, front)
                if worker.edge_stickers(piece)[Face.D] == Face.U:
                    worker.run("CrossInsert", front=front)
                else:
                    worker.run("CrossFlip", front=front)
            else:
                worker.run("CrossLift", front=_front_for_pair(stage, slot))
        else:
            raise SolverInconsistency(stage.value, f"edge {EDGE_SLOTS[piece]} could not be placed")


def _solve_first_layer_corners(worker: _Worker) -> None:
    stage = Stage.FIRST_LAYER_CORNERS
    for front in SIDE_FACES:
        right = _right_of(front)
        piece = _CORNER_FACES.index(frozenset({Face.D, front, right}))
        for _ in range(_MAX_STEPS):
            stickers = worker.corner_stickers(piece)
            if _home(stickers):
                break
            slot = set(stickers.values())
            sides = slot - {Face.U, Face.D}
            if Face.D in slot:
                worker.run("CornerPop", front=_front_for_pair(stage, sides))
                continue

            worker.align_u_pair(stage, sides, {front, right})
            facing = worker.corner_stickers(piece)[Face.D]
            if facing == Face.U:
                worker.run("CornerUp", front=front)
            elif facing == front:
                worker.run("CornerFront", front=front)
            elif facing == right:
                worker.run("CornerRight", front=front)
            else:
                raise SolverInconsistency(
                    stage.value,
                    f"corner {CORNER_SLOTS[piece]} shows D on {facing.value} above its slot",
                )
        else:
            raise SolverInconsistency(stage.value, f"corner {CORNER_SLOTS[piece]} could not be placed")


def _solve_second_layer(worker: _Worker) -> None:
    stage = Stage.SECOND_LAYER
    for front in SIDE_FACES:
        right = _right_of(front)
        piece = _EDGE_FACES.index(frozenset({front, right}))
        for _ in range(_MAX_STEPS):
            stickers = worker.edge_stickers(piece)
            if _home(stickers):
                break
            slot = set(stickers.values())
            if Face.D in slot:
                raise SolverInconsistency(stage.value, f"edge {EDGE_SLOTS[piece]} found in the first layer")
            if Face.U not in slot:
                worker.run("EdgePop", front=_front_for_pair(stage, slot))
            elif stickers[front] == Face.U:
                worker.align_u(stickers[right], right)
                worker.run("EdgeLeft", front=front)
            else:
                worker.align_u(stickers[front], front)
                worker.run("EdgeRight", front=front)
        else:
            raise SolverInconsistency(stage.value, f"edge {EDGE_SLOTS[piece]} could not be placed")


def _oriented_last_layer_edges(cubies: CubieCube) -> set[Face]:
    return {EDGE_FACELETS[slot][1][0] for slot in _U_EDGES if cubies.eo[slot] == 0}


def _solve_last_layer_cross(worker: _Worker) -> None:
    stage = Stage.LAST_LAYER_CROSS
    for _ in range(_MAX_STEPS):
        oriented = _oriented_last_layer_edges(worker.cubies)
        if len(oriented) == 4:
            return
        if not oriented:
            # dot -> L shape
            worker.run("LastLayerCross")
        elif len(oriented) == 2:
            # L shape held at back-left -> line; line held left-right -> cross
            front = next(
                (
                    candidate
                    for candidate in SIDE_FACES
                    if oriented in ({_back_of(candidate), _left_of(candidate)}, {_left_of(candidate), _right_of(candidate)})
                ),
                None,
            )
            if front is None:
                raise SolverInconsistency(stage.value, "unrecognized edge orientation pattern")
            worker.run("LastLayerCross", front=front)
        else:
            raise SolverInconsistency(stage.value, f"{len(oriented)} oriented edges is not a reachable pattern")
    raise SolverInconsistency(stage.value, "last layer edges did not orient")


def _placed_last_layer_corners(cubies: CubieCube) -> list[int]:
    return [slot for slot in _U_CORNERS if cubies.cp[slot] == slot]


def _solve_corner_positions(worker: _Worker) -> None:
    stage = Stage.LAST_LAYER_CORNER_POSITIONS

    # Only an even arrangement can be fixed with 3-cycles, and U changes the parity.
    quarter = basic_move(Face.U)
    best: tuple[int, int] | None = None
    candidate = worker.cubies
    for turns in range(4):
        if permutation_parity(candidate.cp[:4]) == 0:
            placed = len(_placed_last_layer_corners(candidate))
            if best is None or placed > best[1]:
                best = (turns, placed)
        candidate = candidate.multiply(quarter)
    if best is None:
        raise SolverInconsistency(stage.value, "no U alignment gives an even corner arrangement")
    worker.turn(Face.U, best[0])

    for _ in range(_MAX_STEPS):
        placed = _placed_last_layer_corners(worker.cubies)
        if len(placed) == 4:
            return
        if len(placed) == 1:
            sides = _CORNER_FACES[placed[0]] - {Face.U}
            worker.run("CornerCycle", front=_front_for_pair(stage, sides))
        elif not placed:
            worker.run("CornerCycle")
        else:
            raise SolverInconsistency(stage.value, f"{len(placed)} placed corners is not a reachable pattern")
    raise SolverInconsistency(stage.value, "last layer corners did not settle")


def _solve_corner_orientation(worker: _Worker) -> None:
    stage = Stage.LAST_LAYER_CORNER_ORIENTATION
    urf = CORNER_SLOTS.index("URF")

    # Twist whatever sits at URF, then bring the next corner there with U.
    # D is scrambled in between and only comes back once every corner is done.
    u_turns = 0
    for _ in range(4):
        twists = 0
        while worker.cubies.co[urf] != 0:
            if twists == 2:
                raise SolverInconsistency(stage.value, "corner at URF did not orient")
            worker.run("CornerTwist")
            twists += 1
        if all(worker.cubies.co[slot] == 0 for slot in _U_CORNERS):
            break
        worker.turn(Face.U, 1)
        u_turns += 1
    worker.turn(Face.U, -u_turns)


def _solve_edge_positions(worker: _Worker) -> None:
    stage = Stage.LAST_LAYER_EDGE_POSITIONS
    for _ in range(_MAX_STEPS):
        placed = [slot for slot in _U_EDGES if worker.cubies.ep[slot] == slot]
        if len(placed) == 4:
            return
        if len(placed) == 1:
            (side,) = _EDGE_FACES[placed[0]] - {Face.U}
            front = next(candidate for candidate in SIDE_FACES if _back_of(candidate) == side)
            worker.run("EdgeCycle", front=front)
        elif not placed:
            worker.run("EdgeCycle")
        else:
            raise SolverInconsistency(stage.value, f"{len(placed)} placed edges is not a reachable pattern")
    raise SolverInconsistency(stage.value, "last layer edges did not settle")


def _cross_done(cubies: CubieCube) -> bool:
    return all(cubies.ep[slot] == slot and cubies.eo[slot] == 0 for slot in _D_EDGES)


def _first_layer_done(cubies: CubieCube) -> bool:
    return _cross_done(cubies) and all(
        cubies.cp[slot] == slot and cubies.co[slot] == 0 for slot in _D_CORNERS
    )


def _second_layer_done(cubies: CubieCube) -> bool:
    return _first_layer_done(cubies) and all(
        cubies.ep[slot] == slot and cubies.eo[slot] == 0 for slot in _MIDDLE_EDGES
    )


def _last_layer_cross_done(cubies: CubieCube) -> bool:
    return _second_layer_done(cubies) and all(cubies.eo[slot] == 0 for slot in _U_EDGES)


def _corner_positions_done(cubies: CubieCube) -> bool:
    return _last_layer_cross_done(cubies) and len(_placed_last_layer_corners(cubies)) == 4


def _corner_orientation_done(cubies: CubieCube) -> bool:
    return _corner_positions_done(cubies) and all(cubies.co[slot] == 0 for slot in _U_CORNERS)


_PIPELINE: tuple[tuple[Stage, Callable[[_Worker], None], Callable[[CubieCube], bool]], ...] = (
    (Stage.CROSS, _solve_cross, _cross_done),
    (Stage.FIRST_LAYER_CORNERS, _solve_first_layer_corners, _first_layer_done),
    (Stage.SECOND_LAYER, _solve_second_layer, _second_layer_done),
    (Stage.LAST_LAYER_CROSS, _solve_last_layer_cross, _last_layer_cross_done),
    (Stage.LAST_LAYER_CORNER_POSITIONS, _solve_corner_positions, _corner_positions_done),
    (Stage.LAST_LAYER_CORNER_ORIENTATION, _solve_corner_orientation, _corner_orientation_done),
    (Stage.LAST_LAYER_EDGE_POSITIONS, _solve_edge_positions, CubieCube.is_identity),
)

STAGE_POSTCONDITIONS: dict[Stage, Callable[[CubieCube], bool]] = {
    stage: check for stage, _, check in _PIPELINE
}


def solve_stages(state: CubeState | FaceletMapping) -> list[StageResult]:
    """Runs the seven stages and returns the moves each one played."""
    cube = validate(state)
    worker = _Worker(cubies=cube.cubies)
    results: list[StageResult] = []

    for stage, run_stage, postcondition in _PIPELINE:
        start = len(worker.moves)
        run_stage(worker)
        if not postcondition(worker.cubies):
            raise SolverInconsistency(stage.value, "postcondition does not hold after the stage")
        moves = tuple(worker.moves[start:])
        logger.debug("Stage %s finished with %d moves", stage.value, len(moves))
        results.append(StageResult(stage=stage, moves=moves))

    return results


def solution_from_stages(
    state: CubeState, results: Iterable[StageResult], simplify_moves: bool = True
) -> list[Move]:
    """Joins stage moves into one solution and replays it against ``state``."""
    moves = [move for result in results for move in result.moves]
    if simplify_moves:
        moves = simplify(moves)

    if not apply_all(state, moves).cubies.is_identity():
        raise SolverInconsistency("solve", "replaying the solution does not solve the cube")

    logger.debug("Solved in %d moves", len(moves))
    return moves


def solve(state: CubeState | FaceletMapping, simplify_moves: bool = True) -> list[Move]:
    """Move list that takes ``state`` to solved. Never returns a partial result."""
    cube = validate(state)
    return solution_from_stages(cube, solve_stages(cube), simplify_moves=simplify_moves)
