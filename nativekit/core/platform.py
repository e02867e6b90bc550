"""
Platform detection for NativeKit.

This module detects the current platform (OS, architecture) and maps it to
the identifier that native bundles are published under.

Features:
- Operating system detection (Windows, Linux, macOS)
- CPU architecture detection (x64, ARM64, x86, ARM)
- Bundle platform identifier generation (e.g., 'linux-amd64', 'macosx-arm64')
- Platform validation and support checking
- Fast detection with caching

Usage:
    from nativekit.core.platform import detect_platform, get_bundle_platform

    platform_info = detect_platform()
    print(f"OS: {platform_info.os}")
    print(f"Bundle platform: {get_bundle_platform(platform_info)}")
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional

from nativekit.core.exceptions import UnsupportedPlatformError

# (os, arch) -> identifier used in published bundle names
_BUNDLE_PLATFORMS = {
    ("linux", "x64"): "linux-amd64",
    ("linux", "arm64"): "linux-arm64",
    ("linux", "arm"): "linux-arm",
    ("macos", "x64"): "macosx-amd64",
    ("macos", "arm64"): "macosx-arm64",
    ("windows", "x64"): "windows-amd64",
    ("windows", "arm64"): "windows-arm64",
    ("windows", "x86"): "windows-i386",
}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm')
        os_version: OS version string (e.g., '10.0.19041', '6.1.0', '14.1')
    """

    os: str
    arch: str
    os_version: str = ""

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_macos(self) -> bool:
        return self.os == "macos"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    def __str__(self) -> str:
        if self.os_version:
            return f"{self.platform_string()} v{self.os_version}"
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance with detected platform information

    Raises:
        UnsupportedPlatformError: If the operating system is not recognized
    """
    return PlatformInfo(
        os=_detect_os(),
        arch=_detect_architecture(),
        os_version=_detect_os_version(),
    )


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos'

    Raises:
        UnsupportedPlatformError: If OS is not supported
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    else:
        raise UnsupportedPlatformError(f"{system}-{platform.machine().lower()}")


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        # Unknown architectures are returned as-is and rejected later
        return machine


def _detect_os_version() -> str:
    system = platform.system().lower()

    if system == "darwin":
        version = platform.mac_ver()[0]
        return version if version else "unknown"
    elif system == "linux":
        return platform.release()
    else:
        return platform.version()


def is_supported_platform(info: Optional[PlatformInfo] = None) -> bool:
    """
    Check if a native bundle is published for the platform.

    Args:
        info: PlatformInfo to check. If None, detects current platform.

    Returns:
        True if platform is supported
    """
    if info is None:
        info = detect_platform()

    return (info.os, info.arch) in _BUNDLE_PLATFORMS


def get_bundle_platform(info: Optional[PlatformInfo] = None) -> str:
    """
    Get the identifier bundles for this platform are published under.

    Args:
        info: PlatformInfo to map. If None, detects current platform.

    Returns:
        Bundle platform identifier (e.g., 'linux-amd64')

    Raises:
        UnsupportedPlatformError: If no bundle exists for the platform

    Example:
        >>> get_bundle_platform(PlatformInfo('macos', 'arm64'))
        'macosx-arm64'
    """
    if info is None:
        info = detect_platform()

    try:
        return _BUNDLE_PLATFORMS[(info.os, info.arch)]
    except KeyError:
        raise UnsupportedPlatformError(info.platform_string()) from None


def get_supported_platforms() -> list[str]:
    """
    Get list of all supported bundle platform identifiers.

    Example:
        >>> 'linux-amd64' in get_supported_platforms()
        True
    """
    return list(_BUNDLE_PLATFORMS.values())


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    Useful for testing or when platform information changes.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "is_supported_platform",
    "get_bundle_platform",
    "get_supported_platforms",
    "clear_platform_cache",
]
