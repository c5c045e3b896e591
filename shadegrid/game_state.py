"""Session game state: status, score, countdown, current round."""

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .config import GameConfig
from .rounds import Color, Round, RoundGenerator

logger = logging.getLogger(__name__)


class ShadegridError(Exception):
    """Base class for engine errors."""


class InvalidCommandError(ShadegridError):
    """Raised in strict mode when a command does not apply to the current status."""


class Status(str, enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    ENDED = "ended"


class SessionEvent(str, enum.Enum):
    STARTED = "started"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    TICK = "tick"
    ENDED = "ended"


@dataclass(frozen=True)
class RoundSummary:
    """Colors and delta of a solved round, kept for the end-of-game screen."""

    base_color: Color
    diff_color: Color
    delta: int

    @classmethod
    def from_round(cls, rnd: Round) -> "RoundSummary":
        return cls(base_color=rnd.base_color, diff_color=rnd.diff_color, delta=rnd.delta)

    def as_dict(self) -> dict[str, Any]:
        return {
            "base": self.base_color.css(),
            "diff": self.diff_color.css(),
            "delta": self.delta,
        }


Listener = Callable[["GameSession", SessionEvent], None]


class GameSession:
    """Idle -> playing -> ended state machine for one player.

    The session is the only mutator of its state. Commands that do not apply
    to the current status are ignored, or raise InvalidCommandError when
    strict=True. Listeners registered with subscribe() are called after every
    mutation.
    """

    def __init__(
        self,
        generator: RoundGenerator | None = None,
        config: GameConfig | None = None,
        strict: bool = False,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.generator = generator if generator is not None else RoundGenerator(config=self.config)
        self.strict = strict
        self.status = Status.IDLE
        self.score = 0
        self.time_left = self.config.initial_time
        self.level = 1
        self.round: Round | None = None
        self.last_round_summary: RoundSummary | None = None
        self.generation = 0  # bumped by every start(); fences stale timer ticks
        self._listeners: list[Listener] = []

    @property
    def is_playing(self) -> bool:
        return self.status is Status.PLAYING

    @property
    def grid_size(self) -> int | None:
        return self.round.grid_size if self.round is not None else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener(session, event); return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(self, event)
            except Exception:
                logger.exception("Session listener failed on %s", event.value)

    def _reject(self, command: str) -> None:
        if self.strict:
            raise InvalidCommandError(f"{command}() not allowed while {self.status.value}")

    def start(self) -> None:
        """Reset score, clock and level, and deal round 1. Valid from any status."""
        self.generation += 1
        self.status = Status.PLAYING
        self.score = 0
        self.time_left = self.config.initial_time
        self.level = 1
        self.last_round_summary = None
        self.round = self.generator.generate(self.level)
        logger.info("Session started (generation %d)", self.generation)
        self._notify(SessionEvent.STARTED)

    def _end(self) -> None:
        self.time_left = 0
        self.status = Status.ENDED
        logger.info("Session ended: score=%d level=%d", self.score, self.level)
        self._notify(SessionEvent.ENDED)

    def select(self, index: int) -> tuple[bool, dict[str, Any]]:
        """Pick cell index. Returns (correct, data); (False, {}) when ignored."""
        if self.status is not Status.PLAYING or self.round is None:
            self._reject("select")
            return False, {}

        if index != self.round.diff_index:
            self.time_left = max(0, self.time_left - self.config.wrong_penalty)
            self._notify(SessionEvent.INCORRECT)
            # Zero time left ends the game at once rather than on the next tick.
            if self.time_left == 0:
                self._end()
            return False, {"time_left": self.time_left, "status": self.status.value}

        self.last_round_summary = RoundSummary.from_round(self.round)
        self.score += 1
        self.level += 1
        self.round = self.generator.generate(self.level)
        self._notify(SessionEvent.CORRECT)
        return True, {
            "level": self.level,
            "score": self.score,
            "grid_size": self.round.grid_size,
        }

    def tick(self) -> bool:
        """Advance the countdown by one second. Returns False when ignored."""
        if self.status is not Status.PLAYING:
            self._reject("tick")
            return False
        if self.time_left <= 1:
            self._end()
        else:
            self.time_left -= 1
            self._notify(SessionEvent.TICK)
        return True

    def snapshot(self) -> dict[str, Any]:
        """Everything a renderer needs, as plain JSON-compatible values."""
        rnd = self.round
        return {
            "status": self.status.value,
            "score": self.score,
            "time_left": self.time_left,
            "level": self.level,
            "grid_size": rnd.grid_size if rnd else None,
            "base_color": rnd.base_color.css() if rnd else None,
            "diff_color": rnd.diff_color.css() if rnd else None,
            "diff_index": rnd.diff_index if rnd else None,
            "delta": rnd.delta if rnd else None,
            "last_round_summary": (
                self.last_round_summary.as_dict() if self.last_round_summary else None
            ),
            "generation": self.generation,
        }
