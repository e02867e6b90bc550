"""
Centralized exception hierarchy for NativeKit.

Every failure the install/build sequence can surface maps onto one of these
kinds so callers can tell a platform problem from a disk or network problem,
a corrupt download, or a runtime that rejected its configuration.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class NativeKitError(Exception):
    """Base exception for all NativeKit errors."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatformError(NativeKitError):
    """Raised when no native bundle exists for the current OS/architecture."""

    def __init__(self, platform_string: str):
        self.platform_string = platform_string
        super().__init__(f"Platform is not supported: {platform_string}")


# ============================================================================
# Install Exceptions
# ============================================================================


class InstallIOError(NativeKitError):
    """Raised when a filesystem step of the install fails."""

    pass


class ArtifactNotFoundError(InstallIOError):
    """Raised when no mirror could serve the requested native bundle."""

    def __init__(self, artifact: str, attempted: int = 0):
        self.artifact = artifact
        self.attempted = attempted
        msg = f"Requested artifact could not be found: {artifact}"
        if attempted:
            msg += f" (tried {attempted} mirror(s))"
        super().__init__(msg)


class DownloadedArtifactInvalidError(NativeKitError):
    """Raised when a downloaded artifact lacks the expected inner archive."""

    pass


class ArchiveExtractionError(NativeKitError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Runtime Exceptions
# ============================================================================


class RuntimeInitializationError(NativeKitError):
    """Raised when the native runtime rejects the install directory, args or settings."""

    pass


class BuildWaitInterrupted(NativeKitError):
    """Raised when a caller waiting on another thread's build gives up."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(NativeKitError):
    """Configuration parsing or validation error."""

    pass
