"""Shadegrid - find the odd shade.

This package provides the round generator and session state machine for a
color perception game: pick the one block whose lightness differs from the
rest before the clock runs out.
"""

__version__ = "0.1.0"

from .config import GameConfig, load_config
from .game_state import (
    GameSession,
    InvalidCommandError,
    RoundSummary,
    SessionEvent,
    ShadegridError,
    Status,
)
from .report import build_report
from .rounds import Color, Round, RoundGenerator, generate_round
from .timer import SessionClock

__all__ = [
    "Color",
    "GameConfig",
    "GameSession",
    "InvalidCommandError",
    "Round",
    "RoundGenerator",
    "RoundSummary",
    "SessionClock",
    "SessionEvent",
    "ShadegridError",
    "Status",
    "build_report",
    "generate_round",
    "load_config",
]
