"""End-of-game report: final score, visual precision, rank, last comparison."""

import enum
import math
from typing import Any

from pydantic import BaseModel

from .game_state import GameSession

PRECISION_FULL_SCORE = 40  # score that maps to 100% precision
DEFAULT_CELEBRATE_THRESHOLD = 20


class Rank(str, enum.Enum):
    EXCEPTIONAL = "exceptional"
    PROFESSIONAL = "professional"
    AVERAGE = "average"
    DEVELOPING = "developing"


RANK_MESSAGES = {
    Rank.EXCEPTIONAL: "Exceptional. Your perception is on par with master painters.",
    Rank.PROFESSIONAL: "Professional grade. You have a keen eye for subtle nuances.",
    Rank.AVERAGE: "Above average. Keep practicing to refine your sensitivity.",
    Rank.DEVELOPING: "Developing. Regular training will significantly improve your color vision.",
}


def visual_precision(score: int) -> int:
    """Percentage in [0, 100]: score relative to PRECISION_FULL_SCORE, floored."""
    return min(100, math.floor(score / PRECISION_FULL_SCORE * 100))


def rank_for_score(score: int) -> Rank:
    if score > 35:
        return Rank.EXCEPTIONAL
    if score > 25:
        return Rank.PROFESSIONAL
    if score > 15:
        return Rank.AVERAGE
    return Rank.DEVELOPING


def should_celebrate(score: int, threshold: int = DEFAULT_CELEBRATE_THRESHOLD) -> bool:
    """True when the final score earns the celebratory effect."""
    return score > threshold


class GameReport(BaseModel):
    """Summary shown once a session has ended."""

    status: str
    score: int
    level: int
    precision: int
    rank: Rank
    rank_message: str
    celebrate: bool
    last_comparison: dict[str, Any] | None = None


def build_report(session: GameSession) -> GameReport:
    """Build the report for session (works in any status; meant for ended)."""
    rank = rank_for_score(session.score)
    summary = session.last_round_summary
    return GameReport(
        status=session.status.value,
        score=session.score,
        level=session.level,
        precision=visual_precision(session.score),
        rank=rank,
        rank_message=RANK_MESSAGES[rank],
        celebrate=should_celebrate(session.score, session.config.celebrate_threshold),
        last_comparison=summary.as_dict() if summary else None,
    )
