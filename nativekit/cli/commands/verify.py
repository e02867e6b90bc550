"""
Verify command implementation.

Checks whether the install directory holds a complete install of the
expected release.
"""

import logging

from nativekit.bundle.build_info import BuildInfo
from nativekit.bundle.checker import InstallationChecker, required_entries_for
from nativekit.cli.utils import load_command_config, print_error
from nativekit.core.platform import detect_platform

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the verify command.

    Returns:
        0 if the install is complete, 1 otherwise
    """
    config = load_command_config(args)
    build_info = BuildInfo.load(config.build_info)

    checker = InstallationChecker(
        expected=build_info, required_entries=required_entries_for(detect_platform())
    )

    if checker.check(config.install_dir):
        print(f"Install OK: {config.install_dir} ({build_info.release_tag})")
        return 0

    print_error(
        f"No complete install at {config.install_dir}",
        "Run 'nkit install' to install the native bundle",
    )
    return 1
