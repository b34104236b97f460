"""User configuration."""

from adl.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_config,
    save_config,
)
from adl.config.schema import DEFAULT_CONFIG, AdlConfig

__all__ = [
    "DEFAULT_CONFIG",
    "AdlConfig",
    "get_home_config_path",
    "get_local_config_path",
    "load_config",
    "save_config",
]
