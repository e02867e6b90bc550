"""
Runtime argument preparation.

Some runtime switches must point into the install directory for the
runtime to find its helper processes and resources. Those keys are
reserved: values supplied by the caller are dropped and replaced.

Reserved keys:

- macOS: ``--framework-dir-path``, ``--main-bundle-path``,
  ``--browser-subprocess-path``
- Linux/Windows: ``--browser-subprocess-path``, ``--resources-dir-path``,
  ``--locales-dir-path``
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from nativekit.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

MACOS_HELPER_APP = "jcef Helper.app"
MACOS_FRAMEWORK = "Chromium Embedded Framework.framework"


def helper_entry(info: PlatformInfo) -> str:
    """Top-level name of the helper executable (or app bundle) in an install."""
    if info.is_macos:
        return MACOS_HELPER_APP
    return "jcef_helper.exe" if info.is_windows else "jcef_helper"


def reserved_arguments(install_dir: Path, info: PlatformInfo) -> Dict[str, str]:
    """
    Map reserved argument keys to the values forced for a platform.

    Example:
        >>> reserved_arguments(Path("/b"), PlatformInfo("linux", "x64"))["--locales-dir-path"]
        '/b/locales'
    """
    if info.is_macos:
        helper = install_dir / MACOS_HELPER_APP
        return {
            "--framework-dir-path": str(install_dir / MACOS_FRAMEWORK),
            "--main-bundle-path": str(helper),
            "--browser-subprocess-path": str(helper / "Contents" / "MacOS" / "jcef Helper"),
        }

    return {
        "--browser-subprocess-path": str(install_dir / helper_entry(info)),
        "--resources-dir-path": str(install_dir),
        "--locales-dir-path": str(install_dir / "locales"),
    }


def argument_key(arg: str) -> str:
    """Key of a ``--key=value`` switch (the whole string if there is no '=')."""
    return arg.split("=", 1)[0]


def prepare_arguments(
    install_dir: Path,
    args: Sequence[str],
    info: Optional[PlatformInfo] = None,
) -> List[str]:
    """
    Build the argument list passed to the runtime initializer.

    Caller arguments keep their order; reserved keys are removed from them
    and the platform values are appended.

    Args:
        install_dir: Completed install directory
        args: Extra arguments configured by the caller (may contain spaces)
        info: Platform to prepare for. If None, detects current platform.
    """
    if info is None:
        info = detect_platform()

    install_dir = Path(install_dir).absolute()
    reserved = reserved_arguments(install_dir, info)

    prepared = []
    for arg in args:
        if argument_key(arg) in reserved:
            logger.warning(f"Ignoring reserved runtime argument: {arg}")
            continue
        prepared.append(arg)

    prepared.extend(f"{key}={value}" for key, value in reserved.items())
    return prepared
