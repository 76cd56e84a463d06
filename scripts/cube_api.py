#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path
from typing import Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cubesolve.config import CubeConfig, configure_logging
from cubesolve.moves import apply_all
from cubesolve.notation import format_move, parse_sequence
from cubesolve.scramble import generate
from cubesolve.solver import solution_from_stages, solve_stages
from cubesolve.state import CubeState, create_solved, is_solved, to_facelets, to_string, validate

StatePayload = Union[dict[str, list[str]], str]

config = CubeConfig.from_env()
configure_logging(config)
app = FastAPI(title="Cube Solver API", version="1.0.0")


class ScrambleRequest(BaseModel):
    length: int = Field(default=config.scramble_length, ge=0, le=1000)
    seed: int | None = None
    half_turns: bool = config.half_turns


class ApplyRequest(BaseModel):
    state: StatePayload | None = None
    moves: str


class SolveRequest(BaseModel):
    state: StatePayload


def _state_data(state: CubeState) -> dict:
    return {
        "facelets": to_facelets(state),
        "string": to_string(state),
        "solved": is_solved(state),
    }


def _resolve_state(raw: StatePayload | None) -> CubeState:
    if raw is None:
        return create_solved()
    return validate(raw)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.get("/api/solved")
def api_solved() -> dict:
    return {"ok": True, "data": _state_data(create_solved())}


@app.post("/api/scramble")
def api_scramble(payload: ScrambleRequest) -> dict:
    seed = payload.seed if payload.seed is not None else config.seed
    try:
        moves = generate(payload.length, half_turns=payload.half_turns, seed=seed)
        state = apply_all(create_solved(), moves)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "ok": True,
        "data": {
            "moves": [format_move(move) for move in moves],
            "state": _state_data(state),
        },
    }


@app.post("/api/apply")
def api_apply(payload: ApplyRequest) -> dict:
    try:
        state = _resolve_state(payload.state)
        moves = parse_sequence(payload.moves)
        state = apply_all(state, moves)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "ok": True,
        "data": {
            "moves": [format_move(move) for move in moves],
            "state": _state_data(state),
        },
    }


@app.post("/api/solve")
def api_solve(payload: SolveRequest) -> dict:
    try:
        state = validate(payload.state)
        stages = solve_stages(state)
        moves = solution_from_stages(state, stages, simplify_moves=config.simplify)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "ok": True,
        "data": {
            "moves": [format_move(move) for move in moves],
            "length": len(moves),
            "stages": [
                {
                    "stage": result.stage.value,
                    "moves": [format_move(move) for move in result.moves],
                }
                for result in stages
            ],
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("scripts.cube_api:app", host="127.0.0.1", port=8008, reload=True)
