"""Tests for config loading."""

import pytest
from pydantic import ValidationError

from shadegrid.config import CONFIG_ENV_VAR, GameConfig, load_config


class TestGameConfig:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.initial_time == 60
        assert cfg.wrong_penalty == 3
        assert cfg.tick_interval == 1.0
        assert cfg.base_delta == 15
        assert cfg.min_delta == 1
        assert cfg.saturation_range == (40, 80)
        assert cfg.lightness_range == (30, 70)
        assert cfg.celebrate_threshold == 20

    def test_invalid_initial_time(self):
        with pytest.raises(ValidationError):
            GameConfig(initial_time=0)

    def test_invalid_range(self):
        with pytest.raises(ValidationError):
            GameConfig(lightness_range=(70, 30))

    def test_negative_penalty(self):
        with pytest.raises(ValidationError):
            GameConfig(wrong_penalty=-1)

    def test_zero_min_delta_rejected(self):
        """A zero delta would make the odd shade identical to the rest."""
        with pytest.raises(ValidationError):
            GameConfig(min_delta=0)

    def test_base_delta_below_min_rejected(self):
        with pytest.raises(ValidationError):
            GameConfig(base_delta=2, min_delta=3)

    def test_base_delta_above_50_rejected(self):
        with pytest.raises(ValidationError):
            GameConfig(base_delta=51)

    def test_delta_bounds_inclusive(self):
        assert GameConfig(base_delta=50).base_delta == 50
        assert GameConfig(base_delta=1, min_delta=1).base_delta == 1


class TestLoadConfig:
    """Test YAML loading."""

    def test_load_valid_yaml(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("initial_time: 30\nwrong_penalty: 5\nlightness_range: [20, 60]\n")
        cfg = load_config(str(path))
        assert cfg.initial_time == 30
        assert cfg.wrong_penalty == 5
        assert cfg.lightness_range == (20, 60)
        assert cfg.base_delta == 15

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == GameConfig()

    def test_relative_path(self, tmp_path, monkeypatch):
        (tmp_path / "rel.yaml").write_text("initial_time: 10\n")
        monkeypatch.chdir(tmp_path)
        assert load_config("rel.yaml").initial_time == 10

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/shadegrid.yaml")

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("celebrate_threshold: 5\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().celebrate_threshold == 5

    def test_no_path_no_env(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_config() == GameConfig()
