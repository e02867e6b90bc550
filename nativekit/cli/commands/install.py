"""
Install command implementation.

Installs the native bundle into the install directory without initializing
the runtime.
"""

import logging

from nativekit.bundle.builder import RuntimeBuilder
from nativekit.bundle.progress import ConsoleProgressHandler
from nativekit.cli.utils import load_command_config
from nativekit.core.filesystem import safe_rmtree

logger = logging.getLogger(__name__)


def _install_only(install_dir, args, settings):
    """Initializer that stops after installation and returns the directory."""
    return install_dir


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_command_config(args)

    if not args.no_progress and not args.quiet:
        config.progress_handler = ConsoleProgressHandler()

    if args.force:
        logger.info(f"Removing existing install: {config.install_dir}")
        safe_rmtree(config.install_dir)

    install_dir = RuntimeBuilder(_install_only, config).build()

    print(f"Native bundle installed at {install_dir}")
    return 0
