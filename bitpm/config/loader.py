"""Configuration file loader and writer."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..constants import BIT_CONFIG_FILENAME
from .models import BitConfig, ConsumerBitConfig

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping in {path}")
    return data


def _write_yaml(path: Path, data: dict) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


class ConfigLoader:
    """Load and save the consumer (workspace) configuration."""

    CONFIG_FILENAME = BIT_CONFIG_FILENAME
    USER_CONFIG_DIR = Path.home() / ".bitpm"

    def __init__(self, project_path: Path | None = None):
        """Initialize config loader.

        Args:
            project_path: Project directory path. If None, uses current directory.
        """
        self._project_path = project_path or Path.cwd()

    def get_config_path(self) -> Path | None:
        """Find config file (project-level first, then user-level).

        Returns:
            Path to config file if found, None otherwise.
        """
        project_config = self._project_path / self.CONFIG_FILENAME
        if project_config.exists():
            return project_config

        user_config = self.USER_CONFIG_DIR / self.CONFIG_FILENAME
        if user_config.exists():
            return user_config

        return None

    def load(self) -> ConsumerBitConfig:
        """Load configuration, returning defaults if no config exists."""
        config_path = self.get_config_path()
        if config_path is None:
            logger.debug("No config file found, using defaults")
            return ConsumerBitConfig()

        try:
            data = _read_yaml(config_path)
            logger.info(f"Loaded config from: {config_path}")
            return ConsumerBitConfig.model_validate(data)
        except (yaml.YAMLError, OSError, ValueError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            return ConsumerBitConfig()

    def save(self, config: ConsumerBitConfig, user_level: bool = False) -> Path:
        """Save configuration to file.

        Args:
            config: Configuration to save.
            user_level: If True, save to user-level config directory.

        Returns:
            Path where config was saved.
        """
        if user_level:
            self.USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            config_path = self.USER_CONFIG_DIR / self.CONFIG_FILENAME
        else:
            config_path = self._project_path / self.CONFIG_FILENAME

        _write_yaml(config_path, config.model_dump(exclude_none=True))

        logger.info(f"Saved config to: {config_path}")
        return config_path


def load_bit_config(
    bit_dir: Path | str, consumer_config: ConsumerBitConfig | None = None
) -> BitConfig:
    """Load a component's config, filling gaps from the consumer config.

    Unlike the consumer config, a malformed component config is an error.
    """
    base = (consumer_config or ConsumerBitConfig()).model_dump()
    config_path = Path(bit_dir) / BIT_CONFIG_FILENAME
    if config_path.exists():
        base.update(_read_yaml(config_path))
    return BitConfig.model_validate(base)


def write_bit_config(
    config: BitConfig, bit_dir: Path | str, override: bool = True
) -> Path | None:
    """Write a component's config.

    Returns:
        Path written, or None when the file existed and override was off.
    """
    config_path = Path(bit_dir) / BIT_CONFIG_FILENAME
    if config_path.exists() and not override:
        logger.debug(f"Keeping existing config: {config_path}")
        return None
    config_path.parent.mkdir(parents=True, exist_ok=True)
    _write_yaml(config_path, config.model_dump(exclude_none=True))
    return config_path


def load_consumer_config(project_path: Path | str | None = None) -> ConsumerBitConfig:
    """Load configuration from project or user directory.

    Convenience function that creates a ConfigLoader and loads config.

    Args:
        project_path: Project directory path. If None, uses current directory.

    Returns:
        ConsumerBitConfig with loaded or default values.
    """
    path = Path(project_path) if project_path else None
    return ConfigLoader(path).load()
