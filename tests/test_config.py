"""Tests for configuration loading."""

from pathlib import Path

import pytest

from sitegrid.config import (
    AppConfig,
    BackendType,
    Config,
    default_data_dir,
    env_overrides,
    load_config,
)
from sitegrid.core.models import GridSize


class TestConfigFiles:
    def test_from_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("grid_size: large\nseed: false\n")

        assert Config.from_file(path) == {"grid_size": "large", "seed": False}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config.from_file(path) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("invalid: yaml: content:")
        with pytest.raises(ValueError, match="Invalid YAML"):
            Config.from_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            Config.from_file(path)

    def test_paths_use_xdg(self, tmp_path):
        paths = Config.get_config_paths()
        assert paths[0] == tmp_path / "config" / "sitegrid" / "config.yaml"
        assert Path(".sitegrid.yaml") in paths

    def test_merge_is_deep(self):
        merged = Config.merge_configs(
            {"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}}, {"c": 4}
        )
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}


class TestLoadConfig:
    """Precedence: user file, project file, explicit file, env, overrides."""

    def test_defaults(self, tmp_path):
        config = load_config()

        assert config == AppConfig()
        assert config.backend is BackendType.FILESYSTEM
        assert config.data_path == tmp_path / "data" / "sitegrid"

    def test_user_config(self, tmp_path):
        user = tmp_path / "config" / "sitegrid"
        user.mkdir(parents=True)
        (user / "config.yaml").write_text("grid_size: small\n")

        assert load_config().grid_size is GridSize.SMALL

    def test_project_file_wins_over_user(self, tmp_path):
        user = tmp_path / "config" / "sitegrid"
        user.mkdir(parents=True)
        (user / "config.yaml").write_text("grid_size: small\nseed: false\n")
        (tmp_path / "sitegrid.yaml").write_text("grid_size: large\n")

        config = load_config()

        assert config.grid_size is GridSize.LARGE
        assert config.seed is False

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("backend: memory\nbackground_writes: true\n")

        config = load_config(path)

        assert config.backend is BackendType.MEMORY
        assert config.background_writes is True

    def test_env_overrides_files(self, tmp_path, monkeypatch):
        (tmp_path / "sitegrid.yaml").write_text("grid_size: small\n")
        monkeypatch.setenv("SITEGRID_GRID_SIZE", "LARGE")
        monkeypatch.setenv("SITEGRID_DATA_DIR", str(tmp_path / "elsewhere"))

        config = load_config()

        assert config.grid_size is GridSize.LARGE
        assert config.data_path == tmp_path / "elsewhere"

    def test_explicit_overrides_win(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SITEGRID_DATA_DIR", str(tmp_path / "env"))
        config = load_config(overrides={"data_dir": str(tmp_path / "flag")})
        assert config.data_path == tmp_path / "flag"

    @pytest.mark.parametrize(
        "content", ["grid_size: huge\n", "backend: cloud\n", "seed: [1]\n"]
    )
    def test_invalid_values(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)


class TestEnvironment:
    def test_no_variables(self):
        assert env_overrides() == {}

    def test_backend_lowercased(self, monkeypatch):
        monkeypatch.setenv("SITEGRID_BACKEND", "Memory")
        assert env_overrides() == {"backend": "memory"}

    def test_default_data_dir(self, tmp_path):
        assert default_data_dir() == tmp_path / "data" / "sitegrid"
