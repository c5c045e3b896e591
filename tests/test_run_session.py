"""Tests for the scripted player CLI."""

import random
from unittest.mock import MagicMock, patch

import pytest
import requests

from shadegrid.run_session import choose_index, play


def _response(payload, status=200):
    resp = MagicMock()
    resp.ok = status < 400
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}")
    return resp


def _state(status="playing", diff_index=1, grid_size=2):
    return {
        "session_id": "abc",
        "status": status,
        "diff_index": diff_index,
        "grid_size": grid_size,
    }


class TestChooseIndex:
    """Test the scripted player's picks."""

    def test_perfect_accuracy(self):
        rng = random.Random(0)
        for _ in range(20):
            assert choose_index(_state(diff_index=3), 1.0, rng) == 3

    def test_zero_accuracy_never_correct(self):
        rng = random.Random(0)
        for _ in range(50):
            idx = choose_index(_state(diff_index=2, grid_size=3), 0.0, rng)
            assert idx != 2
            assert 0 <= idx < 9


class TestPlay:
    """Test a full scripted session against a mocked server."""

    @patch("shadegrid.run_session.requests.get")
    @patch("shadegrid.run_session.requests.post")
    def test_plays_until_ended(self, mock_post, mock_get):
        mock_post.side_effect = [
            _response(_state()),
            _response({"correct": True, "session": _state(diff_index=0)}),
            _response({"correct": True, "session": _state(status="ended")}),
        ]
        mock_get.return_value = _response({"score": 2, "level": 3, "rank": "developing"})

        report = play("http://server/", accuracy=1.0, seed=1, delay=0)

        assert report["score"] == 2
        urls = [call.args[0] for call in mock_post.call_args_list]
        assert urls[0] == "http://server/api/session"
        assert urls[1] == "http://server/api/session/abc/select"
        assert mock_post.call_args_list[0].kwargs["json"] == {"seed": 1}
        assert mock_post.call_args_list[1].kwargs["json"] == {"index": 1}
        mock_get.assert_called_once_with("http://server/api/session/abc/report", timeout=30)

    @patch("shadegrid.run_session.requests.get")
    @patch("shadegrid.run_session.requests.post")
    def test_max_moves(self, mock_post, mock_get):
        mock_post.side_effect = [
            _response(_state()),
            _response({"correct": True, "session": _state()}),
        ]
        mock_get.return_value = _response({"score": 1, "level": 2, "rank": "developing"})
        play("http://server", accuracy=1.0, delay=0, max_moves=1)
        assert mock_post.call_count == 2

    @patch("shadegrid.run_session.requests.post")
    def test_server_error(self, mock_post, capsys):
        mock_post.return_value = _response({"detail": "Config file not found"}, status=404)
        with pytest.raises(requests.HTTPError):
            play("http://server", accuracy=1.0, delay=0)
        assert "Config file not found" in capsys.readouterr().err
