"""
Core functionality for NativeKit.

This package contains the foundational modules that the install pipeline
depends on: exceptions, platform detection, downloads, filesystem
primitives and the cross-process install lock.
"""

from .exceptions import (
    NativeKitError,
    UnsupportedPlatformError,
    InstallIOError,
    ArtifactNotFoundError,
    DownloadedArtifactInvalidError,
    ArchiveExtractionError,
    InsecureArchiveError,
    RuntimeInitializationError,
    BuildWaitInterrupted,
    ConfigError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    is_supported_platform,
    get_bundle_platform,
    get_supported_platforms,
    clear_platform_cache,
)

__all__ = [
    "NativeKitError",
    "UnsupportedPlatformError",
    "InstallIOError",
    "ArtifactNotFoundError",
    "DownloadedArtifactInvalidError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "RuntimeInitializationError",
    "BuildWaitInterrupted",
    "ConfigError",
    "PlatformInfo",
    "detect_platform",
    "is_supported_platform",
    "get_bundle_platform",
    "get_supported_platforms",
    "clear_platform_cache",
]
