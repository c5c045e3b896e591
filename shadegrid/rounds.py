"""Round generation: colors, grid size and odd-cell position per level."""

import random
from dataclasses import dataclass

from .config import DEFAULT_CONFIG, GameConfig

MIN_DELTA = DEFAULT_CONFIG.min_delta

# (first level, grid side) in ascending order
GRID_BREAKPOINTS: tuple[tuple[int, int], ...] = (
    (1, 2),
    (3, 3),
    (7, 4),
    (13, 5),
    (21, 6),
    (31, 7),
    (46, 8),
)


@dataclass(frozen=True)
class Color:
    """HSL color. Hue in [0, 360), saturation and lightness in percent."""

    h: int
    s: int
    l: int  # noqa: E741

    def css(self) -> str:
        """Return CSS notation, e.g. 'hsl(120, 50%, 40%)'."""
        return f"hsl({self.h}, {self.s}%, {self.l}%)"


@dataclass(frozen=True)
class Round:
    """One puzzle: a grid_size x grid_size board with a single odd cell."""

    base_color: Color
    diff_color: Color
    grid_size: int
    diff_index: int
    delta: int

    @property
    def cell_count(self) -> int:
        return self.grid_size * self.grid_size

    def color_at(self, index: int) -> Color:
        """Return the color shown at cell index."""
        if index < 0 or index >= self.cell_count:
            raise ValueError(f"cell index {index} outside [0, {self.cell_count})")
        return self.diff_color if index == self.diff_index else self.base_color


def _check_level(level: int) -> None:
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")


def lightness_delta(level: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Lightness gap for a level: shrinks by 1 every 4 levels, floored at min_delta."""
    _check_level(level)
    return max(config.min_delta, config.base_delta - level // config.levels_per_delta_step)


def grid_size_for_level(level: int) -> int:
    """Grid side for a level (see GRID_BREAKPOINTS)."""
    _check_level(level)
    side = GRID_BREAKPOINTS[0][1]
    for first_level, grid_side in GRID_BREAKPOINTS:
        if level >= first_level:
            side = grid_side
    return side


class RoundGenerator:
    """Builds rounds from a level using an injected random source.

    The policy (delta curve, grid breakpoints) is deterministic; hue,
    saturation, lightness, direction and odd-cell position are drawn from rng.
    Pass a seeded random.Random for reproducible rounds.
    """

    def __init__(self, rng: random.Random | None = None, config: GameConfig | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.config = config if config is not None else DEFAULT_CONFIG

    def generate(self, level: int) -> Round:
        """Return a fresh Round for level (1-based)."""
        cfg = self.config
        h = self.rng.randrange(0, 360)
        s = self.rng.randrange(*cfg.saturation_range)
        base_l = self.rng.randrange(*cfg.lightness_range)

        delta = lightness_delta(level, cfg)
        lighter = self.rng.random() > 0.5
        # Shift the other way when the chosen direction would leave [0, 100].
        if lighter and base_l + delta > 100:
            lighter = False
        elif not lighter and base_l - delta < 0:
            lighter = True
        diff_l = base_l + delta if lighter else base_l - delta

        grid_size = grid_size_for_level(level)
        diff_index = self.rng.randrange(grid_size * grid_size)

        return Round(
            base_color=Color(h, s, base_l),
            diff_color=Color(h, s, diff_l),
            grid_size=grid_size,
            diff_index=diff_index,
            delta=delta,
        )


def generate_round(level: int, rng: random.Random | None = None) -> Round:
    """Generate one round with the default config."""
    return RoundGenerator(rng).generate(level)
