from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "CUBESOLVE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got '{raw}')")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer (got '{raw}')") from None


@dataclass(frozen=True)
class CubeConfig:
    scramble_length: int = 20
    half_turns: bool = False
    seed: int | None = None
    simplify: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.scramble_length < 0:
            raise ValueError("scramble_length must be >= 0")
        level = self.log_level.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{self.log_level}'")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CubeConfig":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        raw = env.get(f"{ENV_PREFIX}SCRAMBLE_LENGTH", "").strip()
        if raw:
            values["scramble_length"] = _parse_int(f"{ENV_PREFIX}SCRAMBLE_LENGTH", raw)

        raw = env.get(f"{ENV_PREFIX}HALF_TURNS")
        if raw is not None:
            values["half_turns"] = _parse_bool(f"{ENV_PREFIX}HALF_TURNS", raw)

        raw = env.get(f"{ENV_PREFIX}SEED", "").strip()
        if raw:
            values["seed"] = _parse_int(f"{ENV_PREFIX}SEED", raw)

        raw = env.get(f"{ENV_PREFIX}SIMPLIFY")
        if raw is not None:
            values["simplify"] = _parse_bool(f"{ENV_PREFIX}SIMPLIFY", raw)

        raw = env.get(f"{ENV_PREFIX}LOG_LEVEL", "").strip()
        if raw:
            values["log_level"] = raw

        return cls(**values)


def configure_logging(config: CubeConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
