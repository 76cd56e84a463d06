from __future__ import annotations

from functools import lru_cache
from typing import Dict

from cubesolve.models import AlgorithmPreset, Move, Stage
from cubesolve.notation import parse_sequence

# Every formula is written for the front face F with R on its right; the
# solver relabels the side faces to reuse it for the other three slots.
PRESET_LIST = [
    AlgorithmPreset(
        name="CrossPop",
        formula="F2",
        stage=Stage.CROSS,
    ),
    AlgorithmPreset(
        name="CrossInsert",
        formula="F2",
        stage=Stage.CROSS,
    ),
    AlgorithmPreset(
        name="CrossFlip",
        formula="Ui Ri F R",
        stage=Stage.CROSS,
    ),
    AlgorithmPreset(
        name="CrossLift",
        formula="R U Ri",
        stage=Stage.CROSS,
    ),
    AlgorithmPreset(
        name="CornerRight",
        formula="R U Ri",
        stage=Stage.FIRST_LAYER_CORNERS,
        aliases=("CornerPop",),
    ),
    AlgorithmPreset(
        name="CornerFront",
        formula="Fi Ui F",
        stage=Stage.FIRST_LAYER_CORNERS,
    ),
    AlgorithmPreset(
        name="CornerUp",
        formula="R U2 Ri Ui R U Ri",
        stage=Stage.FIRST_LAYER_CORNERS,
    ),
    AlgorithmPreset(
        name="EdgeRight",
        formula="U R Ui Ri Ui Fi U F",
        stage=Stage.SECOND_LAYER,
        aliases=("EdgePop",),
    ),
    AlgorithmPreset(
        name="EdgeLeft",
        formula="Ui Fi U F U R Ui Ri",
        stage=Stage.SECOND_LAYER,
    ),
    AlgorithmPreset(
        name="LastLayerCross",
        formula="F R U Ri Ui Fi",
        stage=Stage.LAST_LAYER_CROSS,
    ),
    AlgorithmPreset(
        name="CornerCycle",
        formula="U R Ui Li U Ri Ui L",
        stage=Stage.LAST_LAYER_CORNER_POSITIONS,
    ),
    AlgorithmPreset(
        name="CornerTwist",
        formula="(Ri Di R D)2",
        stage=Stage.LAST_LAYER_CORNER_ORIENTATION,
    ),
    AlgorithmPreset(
        name="EdgeCycle",
        formula="R Ui R U R U R Ui Ri Ui R2",
        stage=Stage.LAST_LAYER_EDGE_POSITIONS,
        aliases=("Ua",),
    ),
]


def _normalized_key(name: str) -> str:
    return name.strip().lower()


def _build_registry() -> Dict[str, AlgorithmPreset]:
    registry: Dict[str, AlgorithmPreset] = {}
    for preset in PRESET_LIST:
        keys = [preset.name, *preset.aliases]
        for raw_key in keys:
            key = _normalized_key(raw_key)
            if key in registry:
                raise ValueError(f"Duplicate preset key detected: {raw_key}")
            registry[key] = preset
    return registry


PRESET_REGISTRY = _build_registry()


def get_preset(name: str) -> AlgorithmPreset:
    key = _normalized_key(name)
    if key not in PRESET_REGISTRY:
        available = ", ".join(sorted({preset.name for preset in PRESET_REGISTRY.values()}))
        raise KeyError(f"Unknown preset: {name}. Available presets: {available}")
    return PRESET_REGISTRY[key]


def list_preset_names(stage: Stage | None = None) -> list[str]:
    return sorted(
        {
            preset.name
            for preset in PRESET_REGISTRY.values()
            if stage is None or preset.stage == stage
        }
    )


@lru_cache(maxsize=None)
def preset_moves(name: str) -> tuple[Move, ...]:
    return tuple(parse_sequence(get_preset(name).formula))
