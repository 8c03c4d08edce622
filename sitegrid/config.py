"""Application configuration from YAML files and the environment."""

from __future__ import annotations

import enum
import os
from pathlib import Path
from typing import Any

import msgspec
import yaml

from sitegrid.core.models import GridSize

ENV_PREFIX = "SITEGRID_"


class BackendType(str, enum.Enum):
    """Where the snapshot is kept."""

    FILESYSTEM = "filesystem"
    MEMORY = "memory"


def default_data_dir() -> Path:
    xdg_data_home = Path(
        os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    )
    return xdg_data_home / "sitegrid"


class AppConfig(msgspec.Struct, frozen=True, kw_only=True):
    """Typed application configuration."""

    data_dir: str = ""
    backend: BackendType = BackendType.FILESYSTEM
    background_writes: bool = False
    grid_size: GridSize = GridSize.MEDIUM
    seed: bool = True

    @property
    def data_path(self) -> Path:
        """Data directory, defaulting to the XDG data location."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return default_data_dir()


class Config:
    """Configuration file handling."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Parse one YAML file into a mapping."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths, lowest precedence first."""
        paths = []

        # Per-user file
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "sitegrid" / "config.yaml")

        # Files in the working directory
        paths.append(Path(".sitegrid.yaml"))
        paths.append(Path("sitegrid.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Fold mappings left to right; later ones take precedence."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def env_overrides() -> dict[str, Any]:
    """Configuration values set through ``SITEGRID_*`` variables."""
    overrides: dict[str, Any] = {}
    if data_dir := os.environ.get(f"{ENV_PREFIX}DATA_DIR"):
        overrides["data_dir"] = data_dir
    if backend := os.environ.get(f"{ENV_PREFIX}BACKEND"):
        overrides["backend"] = backend.lower()
    if grid_size := os.environ.get(f"{ENV_PREFIX}GRID_SIZE"):
        overrides["grid_size"] = grid_size.lower()
    return overrides


def load_config(
    path: Path | None = None, overrides: dict[str, Any] | None = None
) -> AppConfig:
    """Load configuration from files, the environment and explicit overrides.

    Args:
        path: Explicit config file, read after the default locations
        overrides: Values that win over everything else (CLI flags)

    Returns:
        Validated configuration

    Raises:
        ValueError: If a file cannot be parsed or a value is invalid
    """
    config: dict[str, Any] = {}

    # Later files win for conflicting keys
    for candidate in Config.get_config_paths():
        if candidate.exists():
            config = Config.merge_configs(config, Config.from_file(candidate))

    if path is not None:
        config = Config.merge_configs(config, Config.from_file(path))

    config = Config.merge_configs(config, env_overrides(), overrides or {})

    try:
        return msgspec.convert(config, AppConfig, strict=False)
    except msgspec.ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursive merge; nested mappings are combined key by key."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
