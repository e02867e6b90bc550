"""
Platform-specific post-extraction steps.

Each supported OS family gets a hardener. Failures are logged as warnings
and never abort an install: a bundle that could not be hardened is still
complete, and the native runtime reports its own error if it cannot load.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from nativekit.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

QUARANTINE_ATTRIBUTE = "com.apple.quarantine"


class PlatformHardener(ABC):
    """Applies OS trust/attribute adjustments to an extracted bundle."""

    @abstractmethod
    def harden(self, install_dir: Path) -> bool:
        """
        Harden an install directory.

        Returns:
            True if the step succeeded (or had nothing to do)
        """


class NoOpHardener(PlatformHardener):
    """Used on platforms that need no post-processing."""

    def harden(self, install_dir: Path) -> bool:
        return True


class QuarantineClearingHardener(PlatformHardener):
    """
    Removes the macOS quarantine attribute recursively.

    Files extracted from a downloaded archive inherit the attribute, which
    makes Gatekeeper refuse to load the native libraries.
    """

    def __init__(self, xattr: str = "xattr", timeout: int = 120):
        self.xattr = xattr
        self.timeout = timeout

    def harden(self, install_dir: Path) -> bool:
        executable = shutil.which(self.xattr)
        if executable is None:
            logger.warning(
                f"'{self.xattr}' not found, could not clear quarantine on {install_dir}"
            )
            return False

        cmd = [executable, "-r", "-d", QUARANTINE_ATTRIBUTE, str(install_dir)]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Failed to clear quarantine on {install_dir}: {e}")
            return False

        # xattr exits non-zero when no file carried the attribute
        if result.returncode != 0 and "No such xattr" not in result.stderr:
            logger.warning(
                f"Clearing quarantine on {install_dir} exited with "
                f"{result.returncode}: {result.stderr.strip()}"
            )
            return False

        logger.info(f"Cleared quarantine attribute on {install_dir}")
        return True


def get_hardener(info: Optional[PlatformInfo] = None) -> PlatformHardener:
    """
    Select the hardener for a platform.

    Args:
        info: Platform to select for. If None, detects current platform.
    """
    if info is None:
        info = detect_platform()

    if info.is_macos:
        return QuarantineClearingHardener()
    return NoOpHardener()
