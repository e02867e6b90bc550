"""
NativeKit - install a platform-specific native runtime bundle once and
initialize it from any number of threads.

Usage:
    from nativekit import RuntimeBuilder

    builder = RuntimeBuilder(initialize_runtime)
    runtime = builder.build()
"""

from nativekit.bundle.builder import BuildState, RuntimeBuilder
from nativekit.bundle.progress import (
    NO_ESTIMATION,
    ConsoleProgressHandler,
    LoggingProgressHandler,
    ProgressStage,
)
from nativekit.config.parser import BuilderConfig, load_config
from nativekit.core.exceptions import (
    ArchiveExtractionError,
    BuildWaitInterrupted,
    ConfigError,
    DownloadedArtifactInvalidError,
    InstallIOError,
    NativeKitError,
    RuntimeInitializationError,
    UnsupportedPlatformError,
)

__version__ = "0.1.0"

__all__ = [
    "RuntimeBuilder",
    "BuildState",
    "BuilderConfig",
    "load_config",
    "ProgressStage",
    "NO_ESTIMATION",
    "LoggingProgressHandler",
    "ConsoleProgressHandler",
    "NativeKitError",
    "UnsupportedPlatformError",
    "InstallIOError",
    "DownloadedArtifactInvalidError",
    "ArchiveExtractionError",
    "RuntimeInitializationError",
    "BuildWaitInterrupted",
    "ConfigError",
]
