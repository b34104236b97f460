"""Configuration file loading and merging."""

import logging
from pathlib import Path

import yaml

from adl.config.schema import DEFAULT_CONFIG, AdlConfig

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".adl"
CONFIG_FILENAME = "config.yaml"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.adl/config.yaml."""
    return Path.home() / CONFIG_DIRNAME / CONFIG_FILENAME


def get_local_config_path() -> Path:
    """Get path to local config: ./.adl/config.yaml."""
    return Path.cwd() / CONFIG_DIRNAME / CONFIG_FILENAME


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if missing, empty or malformed."""
    if not path.exists():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    result: dict[str, object] = data
    return result


def load_config() -> AdlConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.adl/config.yaml)
    3. Local config (./.adl/config.yaml)

    Command-line options are layered on top by the CLI.
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(), get_local_config_path()):
        data = load_yaml_config(path)
        if data:
            config = config.merge(AdlConfig.from_dict(data))

    return config


def save_config(config: AdlConfig, path: Path) -> None:
    """Save config to a YAML file, creating parent directories if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
