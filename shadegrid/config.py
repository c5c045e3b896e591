"""Game tuning: timer, penalty, difficulty curve. Loaded from YAML or defaults."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator, model_validator

CONFIG_ENV_VAR = "SHADEGRID_CONFIG"


class GameConfig(BaseModel):
    """Constants driving round generation and session scoring."""

    initial_time: int = 60  # seconds on the clock at start()
    wrong_penalty: int = 3  # seconds removed per incorrect pick
    tick_interval: float = 1.0  # seconds between countdown ticks
    base_delta: int = 15  # lightness delta at level 0
    min_delta: int = 1  # delta floor, always distinguishable
    levels_per_delta_step: int = 4
    saturation_range: tuple[int, int] = (40, 80)  # [lo, hi)
    lightness_range: tuple[int, int] = (30, 70)  # [lo, hi)
    celebrate_threshold: int = 20
    max_sessions: int = 1000

    @field_validator("initial_time", "levels_per_delta_step", "max_sessions")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"must be positive, got {v}")
        return v

    @field_validator("tick_interval")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"tick_interval must be positive, got {v}")
        return v

    @field_validator("wrong_penalty")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"must be non-negative, got {v}")
        return v

    @field_validator("min_delta")
    @classmethod
    def validate_min_delta(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"min_delta must be >= 1 so the odd shade stays visible, got {v}")
        return v

    @field_validator("saturation_range", "lightness_range")
    @classmethod
    def validate_range(cls, v: tuple[int, int]) -> tuple[int, int]:
        lo, hi = v
        if not 0 <= lo < hi <= 100:
            raise ValueError(f"range must satisfy 0 <= lo < hi <= 100, got {v}")
        return v

    @model_validator(mode="after")
    def validate_delta_bounds(self) -> "GameConfig":
        # Any lightness in [0, 100] has room for a shift of up to 50 in one direction.
        if not self.min_delta <= self.base_delta <= 50:
            raise ValueError(
                f"base_delta must lie in [min_delta, 50], got {self.base_delta} "
                f"(min_delta={self.min_delta})"
            )
        return self


DEFAULT_CONFIG = GameConfig()


def load_config(path: str | None = None) -> GameConfig:
    """Load GameConfig from YAML.

    Falls back to $SHADEGRID_CONFIG when path is None, and to defaults when
    neither is set. Relative paths resolve against the working directory.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return GameConfig()
    p = Path(path)
    if not p.is_absolute():
        p = Path.cwd() / path
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    with open(p) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")
    return GameConfig(**data)
