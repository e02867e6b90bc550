"""
Configuration for NativeKit builders.
"""

from .parser import (
    BuilderConfig,
    CONFIG_FILENAME,
    DEFAULT_INSTALL_DIR,
    default_settings,
    load_config,
    parse_config,
)

__all__ = [
    "BuilderConfig",
    "CONFIG_FILENAME",
    "DEFAULT_INSTALL_DIR",
    "default_settings",
    "load_config",
    "parse_config",
]
