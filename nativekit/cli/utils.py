"""
Shared utilities for CLI commands.
"""

import logging
import sys
from typing import Optional

from nativekit.config.parser import BuilderConfig, load_config

logger = logging.getLogger(__name__)


def load_command_config(args) -> BuilderConfig:
    """
    Load configuration for a command, applying command-line overrides.

    Args:
        args: Parsed arguments (uses ``config`` and ``install_dir``)

    Raises:
        ConfigError: If an explicitly given config file is missing or invalid
    """
    config_file = getattr(args, "config", None)
    config = load_config(config_file, required=config_file is not None)

    install_dir = getattr(args, "install_dir", None)
    if install_dir is not None:
        config.install_dir = install_dir

    logger.debug(f"Install directory: {config.install_dir}")
    return config


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
