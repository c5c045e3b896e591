"""Tests for the end-of-game report."""

import random

import pytest

from shadegrid import GameConfig, GameSession, RoundGenerator, build_report
from shadegrid.report import (
    RANK_MESSAGES,
    Rank,
    rank_for_score,
    should_celebrate,
    visual_precision,
)


class TestVisualPrecision:
    """Test precision percentage."""

    @pytest.mark.parametrize(
        "score,expected",
        [(0, 0), (1, 2), (10, 25), (39, 97), (40, 100), (75, 100)],
    )
    def test_values(self, score, expected):
        assert visual_precision(score) == expected


class TestRank:
    """Test rank tiers (strictly greater than each threshold)."""

    @pytest.mark.parametrize(
        "score,rank",
        [
            (0, Rank.DEVELOPING),
            (15, Rank.DEVELOPING),
            (16, Rank.AVERAGE),
            (25, Rank.AVERAGE),
            (26, Rank.PROFESSIONAL),
            (35, Rank.PROFESSIONAL),
            (36, Rank.EXCEPTIONAL),
        ],
    )
    def test_tiers(self, score, rank):
        assert rank_for_score(score) is rank

    def test_every_rank_has_message(self):
        assert set(RANK_MESSAGES) == set(Rank)


class TestCelebrate:
    def test_threshold_is_exclusive(self):
        assert should_celebrate(20) is False
        assert should_celebrate(21) is True

    def test_custom_threshold(self):
        assert should_celebrate(6, threshold=5) is True


class TestBuildReport:
    """Test report assembly from a session."""

    def test_report_after_game(self):
        session = GameSession(generator=RoundGenerator(random.Random(3)))
        session.start()
        for _ in range(21):
            session.select(session.round.diff_index)
        last_solved = session.last_round_summary
        for _ in range(60):
            session.tick()

        report = build_report(session)
        assert report.status == "ended"
        assert report.score == 21
        assert report.level == 22
        assert report.precision == 52
        assert report.rank is Rank.AVERAGE
        assert report.rank_message == RANK_MESSAGES[Rank.AVERAGE]
        assert report.celebrate is True
        assert report.last_comparison == last_solved.as_dict()

    def test_report_without_solved_round(self):
        session = GameSession()
        session.start()
        report = build_report(session)
        assert report.score == 0
        assert report.celebrate is False
        assert report.last_comparison is None

    def test_threshold_from_config(self):
        session = GameSession(config=GameConfig(celebrate_threshold=0))
        session.start()
        session.select(session.round.diff_index)
        assert build_report(session).celebrate is True
