"""
Clean command implementation.

Removes the install directory.
"""

import logging

from nativekit.cli.utils import load_command_config
from nativekit.core.filesystem import safe_rmtree

logger = logging.getLogger(__name__)


def run(args) -> int:
    config = load_command_config(args)

    if not config.install_dir.exists():
        print(f"Nothing to remove at {config.install_dir}")
        return 0

    safe_rmtree(config.install_dir)
    print(f"Removed {config.install_dir}")
    return 0
