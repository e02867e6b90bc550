"""
Detection of complete, trustworthy installs.

An install is trusted only when its marker file exists. Files without the
marker are the leftovers of an interrupted install and are never reused.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from nativekit.bundle.arguments import helper_entry
from nativekit.bundle.build_info import BUILD_META_FILENAME, BuildInfo
from nativekit.core.exceptions import ConfigError
from nativekit.core.platform import PlatformInfo

logger = logging.getLogger(__name__)

INSTALL_MARKER = "install.lock"
DEFAULT_REQUIRED_ENTRIES = (BUILD_META_FILENAME,)


def required_entries_for(info: PlatformInfo) -> Tuple[str, ...]:
    """
    Entries a complete install holds on a platform: the build metadata and
    the native helper the runtime is pointed at.

    Example:
        >>> required_entries_for(PlatformInfo("linux", "x64"))
        ('build_meta.json', 'jcef_helper')
    """
    return DEFAULT_REQUIRED_ENTRIES + (helper_entry(info),)


class InstallationChecker:
    """
    Decides whether an install directory holds a complete install.

    Args:
        expected: Build info the install must match. If None, any release
            is accepted as long as the structure is intact.
        required_entries: Top-level names that must exist besides the marker.
    """

    def __init__(
        self,
        expected: Optional[BuildInfo] = None,
        required_entries: Iterable[str] = DEFAULT_REQUIRED_ENTRIES,
    ):
        self.expected = expected
        self.required_entries = tuple(required_entries)

    def check(self, install_dir: Union[str, Path]) -> bool:
        """
        Check an install directory.

        Never raises for a missing or damaged directory; those are simply
        not valid installs.
        """
        install_dir = Path(install_dir)

        if not install_dir.is_dir():
            logger.debug(f"No install directory at {install_dir}")
            return False

        if not (install_dir / INSTALL_MARKER).is_file():
            logger.info(f"Install at {install_dir} has no {INSTALL_MARKER}, ignoring it")
            return False

        missing = self.missing_entries(install_dir)
        if missing:
            logger.warning(f"Install at {install_dir} is missing: {', '.join(missing)}")
            return False

        if self.expected is not None:
            return self._matches_expected(install_dir)

        return True

    def missing_entries(self, install_dir: Union[str, Path]) -> List[str]:
        """Required entries absent from an install directory."""
        install_dir = Path(install_dir)
        return [n for n in self.required_entries if not (install_dir / n).exists()]

    def _matches_expected(self, install_dir: Path) -> bool:
        try:
            installed = BuildInfo.load(install_dir / BUILD_META_FILENAME)
        except ConfigError as e:
            logger.warning(f"Unreadable build metadata in {install_dir}: {e}")
            return False

        if installed.release_tag != self.expected.release_tag:
            logger.info(
                f"Installed release {installed.release_tag} does not match "
                f"expected {self.expected.release_tag}"
            )
            return False

        return True


def check_installation(
    install_dir: Union[str, Path],
    build_info: Optional[BuildInfo] = None,
    platform_info: Optional[PlatformInfo] = None,
) -> bool:
    """
    Convenience wrapper around InstallationChecker.

    Example:
        >>> if not check_installation(Path("jcef-bundle")):
        ...     print("Install required")
    """
    entries = (
        required_entries_for(platform_info) if platform_info else DEFAULT_REQUIRED_ENTRIES
    )
    return InstallationChecker(expected=build_info, required_entries=entries).check(
        install_dir
    )
