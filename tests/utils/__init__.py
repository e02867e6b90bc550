"""
Test utilities for NativeKit testing.

This package provides builders for in-memory bundle archives and small
fakes for the install pipeline's collaborators.
"""

from .archives import (
    make_tar_gz,
    make_artifact_zip,
    write_installed_bundle,
)
from .fakes import (
    RecordingProgress,
    CountingInitializer,
    FakeDownloader,
)

__all__ = [
    "make_tar_gz",
    "make_artifact_zip",
    "write_installed_bundle",
    "RecordingProgress",
    "CountingInitializer",
    "FakeDownloader",
]
